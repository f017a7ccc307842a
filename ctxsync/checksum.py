"""Short content fingerprints for files and folders."""

from __future__ import annotations

import hashlib
from datetime import UTC, datetime
from pathlib import Path
from typing import Iterable, Optional

from .logging import get_logger

CHECKSUM_LENGTH = 12
ERROR_CHECKSUM = "error"
EMPTY_CHECKSUM = "empty"
_SEPARATOR = "|"

logger = get_logger("checksum")


def _digest(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()[:CHECKSUM_LENGTH]


def file_checksum(path: Path) -> str:
    """Return the 12-char SHA-256 prefix of a file's raw bytes, or ``"error"`` if unreadable.

    Bytes are hashed as stored, so line-ending rewrites and non-UTF-8 edits
    both change the fingerprint.
    """
    try:
        content = Path(path).read_bytes()
    except OSError as exc:
        logger.warning("Unable to checksum %s: %s", path, exc)
        return ERROR_CHECKSUM
    return _digest(content)


def folder_checksum(files: Iterable[Path]) -> str:
    """Combine per-file checksums in sorted path order into one fingerprint."""
    ordered = sorted(str(path) for path in files)
    if not ordered:
        return EMPTY_CHECKSUM
    combined = _SEPARATOR.join(file_checksum(Path(path)) for path in ordered)
    return _digest(combined.encode("utf-8"))


def isoformat_utc(moment: datetime) -> str:
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now() -> str:
    return isoformat_utc(datetime.now(UTC))


def file_modified_time(path: Path) -> str:
    """ISO timestamp of the file's mtime; the current time when stat fails."""
    try:
        mtime = Path(path).stat().st_mtime
    except OSError as exc:
        logger.warning("Unable to read modified time for %s: %s", path, exc)
        return utc_now()
    return isoformat_utc(datetime.fromtimestamp(mtime, UTC))


def latest_modified_time(files: Iterable[Path]) -> Optional[str]:
    """Most recent mtime across ``files``; ``None`` when there are none."""
    latest: Optional[float] = None
    for path in files:
        try:
            mtime = Path(path).stat().st_mtime
        except OSError as exc:
            logger.warning("Unable to read modified time for %s: %s", path, exc)
            continue
        if latest is None or mtime > latest:
            latest = mtime
    if latest is None:
        return None
    return isoformat_utc(datetime.fromtimestamp(latest, UTC))


__all__ = [
    "CHECKSUM_LENGTH",
    "EMPTY_CHECKSUM",
    "ERROR_CHECKSUM",
    "file_checksum",
    "file_modified_time",
    "folder_checksum",
    "isoformat_utc",
    "latest_modified_time",
    "utc_now",
]
