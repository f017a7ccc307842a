"""Core data models shared across ctxsync components."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .checksum import isoformat_utc

REGISTRY_VERSION = "1.0.0"


class NeedType(str, Enum):
    """Granularity of an annotation need."""

    FOLDER = "folder"
    FILE = "file"


class Reason(str, Enum):
    """Why a folder or file needs a fresh annotation."""

    NEW = "new"
    CONTENT_CHANGED = "content_changed"
    MISSING_COMMENT = "missing_comment"


@dataclass
class LocalRegistryEntry:
    """One context document summarised in the local registry."""

    what: str
    source: str
    hash: str
    use_when: Optional[List[str]] = None
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"what": self.what}
        if self.use_when is not None:
            data["use_when"] = list(self.use_when)
        if self.category is not None:
            data["category"] = self.category
        data["source"] = self.source
        data["hash"] = self.hash
        return data

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LocalRegistryEntry":
        use_when = payload.get("use_when")
        return cls(
            what=_text(payload.get("what")) or "",
            source=_text(payload.get("source")) or "",
            hash=_text(payload.get("hash")) or "",
            use_when=[_text(item) or "" for item in use_when] if isinstance(use_when, list) else None,
            category=_text(payload.get("category")),
        )


@dataclass
class LocalRegistryMeta:
    version: str
    total_contexts: int
    last_sync: str
    generation_command: str


@dataclass
class LocalRegistry:
    """Flat registry of context documents keyed by module path."""

    meta: LocalRegistryMeta
    contexts: Dict[str, LocalRegistryEntry] = field(default_factory=dict)
    by_category: Dict[str, List[str]] = field(default_factory=dict)
    entry_points: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "meta": {
                "version": self.meta.version,
                "total_contexts": self.meta.total_contexts,
                "last_sync": self.meta.last_sync,
                "generation_command": self.meta.generation_command,
            },
            "contexts": {path: entry.to_dict() for path, entry in self.contexts.items()},
            "indexes": {
                "by_category": {name: list(paths) for name, paths in self.by_category.items()},
                "entry_points": list(self.entry_points),
            },
            "validation": {"errors": list(self.errors)},
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LocalRegistry":
        meta = _mapping(payload.get("meta"))
        contexts = {
            str(path): LocalRegistryEntry.from_dict(entry)
            for path, entry in _mapping(payload.get("contexts")).items()
            if isinstance(entry, Mapping)
        }
        indexes = _mapping(payload.get("indexes"))
        by_category = {
            str(name): [str(path) for path in paths]
            for name, paths in _mapping(indexes.get("by_category")).items()
            if isinstance(paths, list)
        }
        entry_points = indexes.get("entry_points")
        errors = _mapping(payload.get("validation")).get("errors")
        total = meta.get("total_contexts")
        return cls(
            meta=LocalRegistryMeta(
                version=_text(meta.get("version")) or REGISTRY_VERSION,
                total_contexts=total if isinstance(total, int) else len(contexts),
                last_sync=_text(meta.get("last_sync")) or "",
                generation_command=_text(meta.get("generation_command")) or "",
            ),
            contexts=contexts,
            by_category=by_category,
            entry_points=[str(path) for path in entry_points] if isinstance(entry_points, list) else [],
            errors=[str(error) for error in errors] if isinstance(errors, list) else [],
        )


@dataclass
class GlobalContextFile:
    """A documentation file tracked by the global registry."""

    path: str
    checksum: str
    last_modified: str
    ai_comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "checksum": self.checksum,
            "last_modified": self.last_modified,
            "ai_comment": self.ai_comment,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "GlobalContextFile":
        return cls(
            path=_text(payload.get("path")) or "",
            checksum=_text(payload.get("checksum")) or "",
            last_modified=_text(payload.get("last_modified")) or "",
            ai_comment=_text(payload.get("ai_comment")) or None,
        )


@dataclass
class GlobalContextFolder:
    """A tracked documentation folder and its member files."""

    folder_checksum: str
    file_count: int
    last_file_modified: Optional[str]
    ai_comment: Optional[str] = None
    files: List[GlobalContextFile] = field(default_factory=list)

    def find(self, path: str) -> Optional[GlobalContextFile]:
        for item in self.files:
            if item.path == path:
                return item
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "folder_checksum": self.folder_checksum,
            "file_count": self.file_count,
            "last_file_modified": self.last_file_modified,
            "ai_comment": self.ai_comment,
            "files": [item.to_dict() for item in self.files],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "GlobalContextFolder":
        files = payload.get("files")
        count = payload.get("file_count")
        parsed: List[GlobalContextFile] = []
        if isinstance(files, list):
            parsed = [GlobalContextFile.from_dict(item) for item in files if isinstance(item, Mapping)]
        return cls(
            folder_checksum=_text(payload.get("folder_checksum")) or "",
            file_count=count if isinstance(count, int) else len(parsed),
            last_file_modified=_text(payload.get("last_file_modified")),
            ai_comment=_text(payload.get("ai_comment")) or None,
            files=parsed,
        )


@dataclass
class GlobalRegistryMeta:
    version: str
    last_synced: str
    # Carried forward as loaded; a hand-written timestamp may be a datetime.
    last_ai_update: Any = None


@dataclass
class GlobalRegistry:
    """Per-folder registry of documentation assets and their annotations."""

    meta: GlobalRegistryMeta
    folders: Dict[str, GlobalContextFolder] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "meta": {
                "version": self.meta.version,
                "last_synced": self.meta.last_synced,
                "last_ai_update": self.meta.last_ai_update,
            }
        }
        for name, folder in self.folders.items():
            data[name] = folder.to_dict()
        return data

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "GlobalRegistry":
        meta = _mapping(payload.get("meta"))
        folders = {
            str(name): GlobalContextFolder.from_dict(value)
            for name, value in payload.items()
            if name != "meta" and isinstance(value, Mapping)
        }
        return cls(
            meta=GlobalRegistryMeta(
                version=_text(meta.get("version")) or REGISTRY_VERSION,
                last_synced=_text(meta.get("last_synced")) or "",
                last_ai_update=meta.get("last_ai_update"),
            ),
            folders=folders,
        )


@dataclass(frozen=True)
class AnnotationNeed:
    """A folder or file whose annotation is missing or stale."""

    type: NeedType
    path: str
    reason: Reason

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type.value, "path": self.path, "reason": self.reason.value}


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _text(value: Any) -> Optional[str]:
    # YAML may hand back timestamps as datetime objects when a file was hand-edited.
    if isinstance(value, datetime):
        return isoformat_utc(value)
    if isinstance(value, (str, int, float, bool)):
        return str(value)
    return None


__all__ = [
    "AnnotationNeed",
    "GlobalContextFile",
    "GlobalContextFolder",
    "GlobalRegistry",
    "GlobalRegistryMeta",
    "LocalRegistry",
    "LocalRegistryEntry",
    "LocalRegistryMeta",
    "NeedType",
    "REGISTRY_VERSION",
    "Reason",
]
