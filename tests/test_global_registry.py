"""Tests for ctxsync.global_registry."""

from __future__ import annotations

import os
from pathlib import Path

from ctxsync.changes import has_changes
from ctxsync.checksum import EMPTY_CHECKSUM, file_checksum, folder_checksum
from ctxsync.global_registry import GlobalRegistryBuilder
from ctxsync.models import GlobalRegistry


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _ctx_root(tmp_path: Path) -> Path:
    root = tmp_path / ".ctx"
    _write(root / "architecture" / "overview.md", "# Overview\n")
    _write(root / "architecture" / "data-flow.md", "# Data flow\n")
    _write(root / "architecture" / ".draft.md", "# hidden\n")
    _write(root / "rules" / "style.md", "# Style\n")
    return root


def test_build_checksums_files_and_folders(tmp_path: Path) -> None:
    root = _ctx_root(tmp_path)
    os.utime(root / "architecture" / "overview.md", (1_700_000_000, 1_700_000_000))
    os.utime(root / "architecture" / "data-flow.md", (1_600_000_000, 1_600_000_000))

    registry = GlobalRegistryBuilder().build(root)

    assert list(registry.folders) == ["architecture", "rules"]
    architecture = registry.folders["architecture"]
    assert architecture.file_count == 2
    assert [item.path for item in architecture.files] == [
        "architecture/data-flow.md",
        "architecture/overview.md",
    ]
    assert architecture.folder_checksum == folder_checksum(
        [root / "architecture" / "overview.md", root / "architecture" / "data-flow.md"]
    )
    assert architecture.last_file_modified == "2023-11-14T22:13:20.000Z"
    assert architecture.files[1].checksum == file_checksum(root / "architecture" / "overview.md")
    assert architecture.ai_comment is None
    assert all(item.ai_comment is None for item in architecture.files)
    assert registry.meta.last_ai_update is None
    assert registry.meta.last_synced


def test_build_handles_missing_folder(tmp_path: Path) -> None:
    root = tmp_path / ".ctx"
    _write(root / "rules" / "style.md", "# Style\n")

    registry = GlobalRegistryBuilder().build(root)

    architecture = registry.folders["architecture"]
    assert architecture.file_count == 0
    assert architecture.files == []
    assert architecture.folder_checksum == EMPTY_CHECKSUM
    assert architecture.last_file_modified is None


def test_build_preserves_annotations_and_last_ai_update(tmp_path: Path) -> None:
    root = _ctx_root(tmp_path)
    builder = GlobalRegistryBuilder()
    first = builder.build(root)
    first.meta.last_ai_update = "2024-04-01T12:00:00.000Z"
    first.folders["rules"].ai_comment = "Coding rules"
    first.folders["rules"].files[0].ai_comment = "Style guide"
    previous = GlobalRegistry.from_dict(first.to_dict())

    second = builder.build(root, previous)

    assert second.meta.last_ai_update == "2024-04-01T12:00:00.000Z"
    assert second.folders["rules"].ai_comment == "Coding rules"
    assert second.folders["rules"].files[0].ai_comment == "Style guide"
    assert not has_changes(second.to_dict(), first.to_dict())


def test_build_drops_annotation_for_removed_file(tmp_path: Path) -> None:
    root = _ctx_root(tmp_path)
    builder = GlobalRegistryBuilder()
    first = builder.build(root)
    first.folders["rules"].files[0].ai_comment = "Style guide"

    (root / "rules" / "style.md").unlink()
    second = builder.build(root, first)

    assert second.folders["rules"].files == []
    assert has_changes(second.to_dict(), first.to_dict())


def test_build_respects_configured_folders(tmp_path: Path) -> None:
    root = tmp_path / "docs"
    _write(root / "guides" / "setup.md", "# Setup\n")
    _write(root / "guides" / "setup.txt", "ignored\n")

    registry = GlobalRegistryBuilder(folders=["guides"]).build(root)

    assert list(registry.folders) == ["guides"]
    assert [item.path for item in registry.folders["guides"].files] == ["guides/setup.md"]
