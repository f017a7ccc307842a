"""Tests for ctxsync.annotations."""

from __future__ import annotations

from ctxsync.annotations import detect_annotation_needs
from ctxsync.models import (
    AnnotationNeed,
    GlobalContextFile,
    GlobalContextFolder,
    GlobalRegistry,
    GlobalRegistryMeta,
    NeedType,
    Reason,
)


def _registry(files: list[GlobalContextFile], folder_comment: str | None = "Rules") -> GlobalRegistry:
    return GlobalRegistry(
        meta=GlobalRegistryMeta(version="1.0.0", last_synced="now"),
        folders={
            "rules": GlobalContextFolder(
                folder_checksum="f",
                file_count=len(files),
                last_file_modified=None,
                ai_comment=folder_comment,
                files=files,
            )
        },
    )


def _file(path: str, checksum: str, comment: str | None = None) -> GlobalContextFile:
    return GlobalContextFile(path=path, checksum=checksum, last_modified="t", ai_comment=comment)


def test_brand_new_file_is_reported_as_new() -> None:
    new = _registry([_file("rules/a.md", "111")])

    assert detect_annotation_needs(new, None) == [
        AnnotationNeed(type=NeedType.FILE, path="rules/a.md", reason=Reason.NEW)
    ]


def test_known_file_without_comment_is_missing_comment() -> None:
    old = _registry([_file("rules/a.md", "111")])
    new = _registry([_file("rules/a.md", "222")])

    assert detect_annotation_needs(new, old) == [
        AnnotationNeed(type=NeedType.FILE, path="rules/a.md", reason=Reason.MISSING_COMMENT)
    ]


def test_commented_file_with_new_checksum_is_content_changed() -> None:
    old = _registry([_file("rules/a.md", "111", "About A")])
    new = _registry([_file("rules/a.md", "222", "About A")])

    assert detect_annotation_needs(new, old) == [
        AnnotationNeed(type=NeedType.FILE, path="rules/a.md", reason=Reason.CONTENT_CHANGED)
    ]


def test_commented_unchanged_file_needs_nothing() -> None:
    old = _registry([_file("rules/a.md", "111", "About A")])
    new = _registry([_file("rules/a.md", "111", "About A")])

    assert detect_annotation_needs(new, old) == []


def test_folder_without_comment_is_reported_first() -> None:
    new = _registry([_file("rules/a.md", "111", "About A")], folder_comment=None)

    needs = detect_annotation_needs(new, None)

    assert needs == [AnnotationNeed(type=NeedType.FOLDER, path="rules", reason=Reason.MISSING_COMMENT)]
    assert needs[0].to_dict() == {"type": "folder", "path": "rules", "reason": "missing_comment"}
