"""Tests for the registry store."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import yaml

from ctxsync.stores import (
    ANNOTATION_MARKER,
    load_previous,
    render_registry,
    strip_header,
    write_registry,
)


def test_load_previous_returns_none_for_missing_file(tmp_path: Path) -> None:
    assert load_previous(tmp_path / "registry.yml") is None


def test_render_and_load_round_trip(tmp_path: Path) -> None:
    payload = {
        "meta": {"version": "1.0.0", "last_sync": "2024-05-01T10:00:00.000Z"},
        "contexts": {"/auth": {"what": "Auth", "source": "auth/ctx.yml", "hash": "000000000123"}},
    }
    text = render_registry(
        payload, title="Local Context Registry", command="ctxsync sync local", generated_at="now"
    )
    path = tmp_path / ".ctx" / "registry.yml"
    write_registry(path, text)

    assert text.startswith("# Local Context Registry\n# AUTO-GENERATED - DO NOT EDIT\n")
    assert "# Run 'ctxsync sync local' to update" in text
    assert load_previous(path) == payload


def test_write_registry_replaces_whole_file_without_leftovers(tmp_path: Path) -> None:
    path = tmp_path / "registry.yml"
    path.write_text("old content that is much longer than the new one\n" * 10, encoding="utf-8")

    write_registry(path, "meta: {}\n")

    assert path.read_text(encoding="utf-8") == "meta: {}\n"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["registry.yml"]


def test_strip_header_keeps_annotation_lines() -> None:
    text = "# header\n# ai_comment: kept\nkey: value\n  # indented comment\n"

    stripped = strip_header(text, preserve_marker=ANNOTATION_MARKER)

    assert stripped == "# ai_comment: kept\nkey: value\n"


def test_load_previous_fails_open_on_corrupt_registry(tmp_path: Path) -> None:
    path = tmp_path / "registry.yml"
    path.write_text("# header\nmeta: [broken\n  : :\n", encoding="utf-8")

    assert load_previous(path) is None


def test_load_previous_ignores_non_mapping_registry(tmp_path: Path) -> None:
    path = tmp_path / "registry.yml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    assert load_previous(path) is None


def test_load_previous_preserves_annotation_payload(tmp_path: Path) -> None:
    path = tmp_path / "registry.yml"
    path.write_text(
        "# Global Context Registry\n"
        "rules:\n"
        "  ai_comment: Project rules\n"
        "  files: []\n",
        encoding="utf-8",
    )

    loaded = load_previous(path, preserve_marker=ANNOTATION_MARKER)

    assert loaded == {"rules": {"ai_comment": "Project rules", "files": []}}
    assert yaml.safe_load(path.read_text(encoding="utf-8")) == loaded


def test_write_registry_keeps_existing_permissions(tmp_path: Path) -> None:
    path = tmp_path / "registry.yml"
    path.write_text("meta: {}\n", encoding="utf-8")
    path.chmod(0o644)

    write_registry(path, "meta: {version: 1.0.0}\n")

    assert stat.S_IMODE(path.stat().st_mode) == 0o644


def test_write_registry_uses_umask_default_for_new_file(tmp_path: Path) -> None:
    path = tmp_path / ".ctx" / "registry.yml"
    previous = os.umask(0o022)
    try:
        write_registry(path, "meta: {}\n")
    finally:
        os.umask(previous)

    assert stat.S_IMODE(path.stat().st_mode) == 0o644
