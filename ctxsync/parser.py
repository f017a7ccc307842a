"""Load context documents (``ctx.yml`` / ``*.ctx.yml``) into structured records."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .logging import get_logger

logger = get_logger("parser")


@dataclass
class ParseFailure:
    """A context document that could not be read or parsed."""

    path: Path
    message: str


@dataclass
class ContextDocument:
    """A parsed context document; ``data`` keeps the raw mapping for schema checks."""

    path: Path
    text: str
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def meta(self) -> Dict[str, Any]:
        meta = self.data.get("meta")
        return meta if isinstance(meta, dict) else {}

    @property
    def target(self) -> Optional[str]:
        target = self.meta.get("target")
        return target if isinstance(target, str) and target else None

    @property
    def category(self) -> Optional[str]:
        category = self.meta.get("category")
        if category is None or isinstance(category, (dict, list)):
            return None
        return str(category)

    @property
    def what(self) -> Any:
        return self.data.get("what")

    @property
    def description(self) -> Any:
        return self.data.get("description")

    @property
    def notes(self) -> Any:
        return self.data.get("notes")

    @property
    def use_when(self) -> Optional[List[str]]:
        value = self.data.get("use_when")
        if not isinstance(value, list):
            return None
        return [str(item) for item in value]


ParseResult = Union[ContextDocument, ParseFailure]


def parse_context_text(text: str, path: Path) -> ParseResult:
    """Parse already-loaded YAML text; never raises."""
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        logger.warning("Error parsing %s: %s", path, exc)
        return ParseFailure(path=path, message=f"Invalid YAML: {exc}")
    if loaded is None:
        logger.warning("Error parsing %s: document is empty", path)
        return ParseFailure(path=path, message="Document is empty")
    if not isinstance(loaded, dict):
        logger.warning("Error parsing %s: root is %s, expected a mapping", path, type(loaded).__name__)
        return ParseFailure(path=path, message="Document root must be a mapping")
    return ContextDocument(path=path, text=text, data=loaded)


def parse_context_document(path: Path) -> ParseResult:
    """Read and parse one context document, surfacing failures as ``ParseFailure``."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Error reading %s: %s", path, exc)
        return ParseFailure(path=Path(path), message=f"Unable to read file: {exc}")
    return parse_context_text(text, Path(path))


__all__ = [
    "ContextDocument",
    "ParseFailure",
    "ParseResult",
    "parse_context_document",
    "parse_context_text",
]
