"""Decide whether a regenerated registry differs from the one on disk."""

from __future__ import annotations

import copy
import difflib
import json
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

VOLATILE_META_KEYS = ("last_synced", "last_sync")


@dataclass(frozen=True)
class RegistryDiff:
    """Outcome of comparing two registry snapshots."""

    changed: bool
    lines: List[str] = field(default_factory=list)


def canonicalize(registry: Mapping[str, Any]) -> str:
    """Stable JSON form of ``registry`` with volatile timestamps removed."""
    data = copy.deepcopy(dict(registry))
    meta = data.get("meta")
    if isinstance(meta, dict):
        for key in VOLATILE_META_KEYS:
            meta.pop(key, None)
    return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False, default=str)


def diff_registries(
    new: Mapping[str, Any], old: Optional[Mapping[str, Any]]
) -> RegistryDiff:
    """Structural comparison of two registry mappings, ignoring sync timestamps."""
    new_text = canonicalize(new)
    if old is None:
        return RegistryDiff(changed=True, lines=[f"+{line}" for line in new_text.splitlines()])

    old_text = canonicalize(old)
    if new_text == old_text:
        return RegistryDiff(changed=False)
    lines = list(
        difflib.unified_diff(
            old_text.splitlines(),
            new_text.splitlines(),
            fromfile="previous",
            tofile="current",
            lineterm="",
        )
    )
    return RegistryDiff(changed=True, lines=lines)


def has_changes(new: Mapping[str, Any], old: Optional[Mapping[str, Any]]) -> bool:
    return diff_registries(new, old).changed


__all__ = ["RegistryDiff", "VOLATILE_META_KEYS", "canonicalize", "diff_registries", "has_changes"]
