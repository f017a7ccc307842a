"""Work out which global registry items need a new or refreshed annotation."""

from __future__ import annotations

from typing import List, Optional

from .models import AnnotationNeed, GlobalRegistry, NeedType, Reason

REASON_LABELS = {
    Reason.NEW: "new file",
    Reason.CONTENT_CHANGED: "content changed",
    Reason.MISSING_COMMENT: "missing comment",
}


def detect_annotation_needs(
    new: GlobalRegistry, old: Optional[GlobalRegistry]
) -> List[AnnotationNeed]:
    """Diff the fresh registry against the previous one.

    Folders without a comment are always reported. A file without a comment is
    ``new`` when the previous registry did not know it, ``missing_comment``
    otherwise. A commented file whose checksum moved is ``content_changed``.
    """
    needs: List[AnnotationNeed] = []
    for name, folder in new.folders.items():
        old_folder = old.folders.get(name) if old else None

        if not folder.ai_comment:
            needs.append(AnnotationNeed(type=NeedType.FOLDER, path=name, reason=Reason.MISSING_COMMENT))

        for item in folder.files:
            old_item = old_folder.find(item.path) if old_folder else None
            if not item.ai_comment:
                reason = Reason.MISSING_COMMENT if old_item else Reason.NEW
                needs.append(AnnotationNeed(type=NeedType.FILE, path=item.path, reason=reason))
            elif old_item and old_item.checksum != item.checksum:
                needs.append(
                    AnnotationNeed(type=NeedType.FILE, path=item.path, reason=Reason.CONTENT_CHANGED)
                )
    return needs


__all__ = ["REASON_LABELS", "detect_annotation_needs"]
