"""Read and write generated registry artifacts."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..logging import get_logger

ANNOTATION_MARKER = "ai_comment"

logger = get_logger("stores.registry")


def strip_header(text: str, *, preserve_marker: Optional[str] = None) -> str:
    """Drop comment lines, keeping any that carry ``preserve_marker``."""
    kept = []
    for line in text.split("\n"):
        if line.strip().startswith("#") and not (preserve_marker and preserve_marker in line):
            continue
        kept.append(line)
    return "\n".join(kept)


def load_previous(path: Path, *, preserve_marker: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Return the previously generated registry mapping, or ``None``.

    A missing file is not an error. A file that cannot be read or parsed is
    logged and treated as absent so the sync can still complete; annotations
    stored in a corrupt artifact are given up in favour of availability.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read existing registry %s: %s", path, exc)
        return None

    try:
        loaded = yaml.safe_load(strip_header(text, preserve_marker=preserve_marker))
    except yaml.YAMLError as exc:
        logger.warning("Failed to load existing registry %s: %s", path, exc)
        return None
    if not isinstance(loaded, dict):
        if loaded is not None:
            logger.warning("Existing registry %s is not a mapping; ignoring it", path)
        return None
    return loaded


def render_registry(
    payload: Mapping[str, Any], *, title: str, command: str, generated_at: str
) -> str:
    """Serialise a registry with its auto-generated header block."""
    header = (
        f"# {title}\n"
        "# AUTO-GENERATED - DO NOT EDIT\n"
        f"# Run '{command}' to update\n"
        f"# Generated: {generated_at}\n"
        "\n"
    )
    body = yaml.safe_dump(
        dict(payload),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=float("inf"),
    )
    return header + body


def _target_mode(path: Path) -> int:
    """Mode the registry should end up with: the current one, else the umask default."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_registry(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` in one step via a sibling temp file.

    The replacement keeps the permissions of the file it replaces; mkstemp
    alone would leave it at 0600.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = _target_mode(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
    logger.debug("Wrote registry %s", path)


__all__ = [
    "ANNOTATION_MARKER",
    "load_previous",
    "render_registry",
    "strip_header",
    "write_registry",
]
