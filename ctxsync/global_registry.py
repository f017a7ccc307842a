"""Build the global registry of documentation folders and their annotations."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .checksum import file_checksum, file_modified_time, folder_checksum, latest_modified_time, utc_now
from .config import DEFAULT_GLOBAL_FOLDERS
from .discovery import list_folder_files
from .logging import get_logger
from .models import (
    REGISTRY_VERSION,
    GlobalContextFile,
    GlobalContextFolder,
    GlobalRegistry,
    GlobalRegistryMeta,
)

logger = get_logger("global_registry")


class GlobalRegistryBuilder:
    """Checksums each tracked folder and carries forward existing annotations."""

    def __init__(
        self,
        *,
        folders: Iterable[str] = DEFAULT_GLOBAL_FOLDERS,
        suffix: str = ".md",
    ) -> None:
        self.folders = tuple(folders)
        self.suffix = suffix

    def collect(self, ctx_root: Path) -> Dict[str, List[Path]]:
        """Map each tracked folder name to its visible documentation files."""
        return {name: list_folder_files(ctx_root / name, self.suffix) for name in self.folders}

    def build(self, ctx_root: Path, previous: Optional[GlobalRegistry] = None) -> GlobalRegistry:
        logger.info("Scanning global context files under %s", ctx_root)
        folders: Dict[str, GlobalContextFolder] = {}

        for name, files in self.collect(ctx_root).items():
            existing_folder = previous.folders.get(name) if previous else None

            entries: List[GlobalContextFile] = []
            for path in files:
                rel_path = path.relative_to(ctx_root).as_posix()
                existing_file = existing_folder.find(rel_path) if existing_folder else None
                entries.append(
                    GlobalContextFile(
                        path=rel_path,
                        checksum=file_checksum(path),
                        last_modified=file_modified_time(path),
                        ai_comment=existing_file.ai_comment if existing_file else None,
                    )
                )

            folders[name] = GlobalContextFolder(
                folder_checksum=folder_checksum(files),
                file_count=len(files),
                last_file_modified=latest_modified_time(files),
                ai_comment=existing_folder.ai_comment if existing_folder else None,
                files=entries,
            )
            logger.debug("Folder %s: %d files", name, len(files))

        return GlobalRegistry(
            meta=GlobalRegistryMeta(
                version=REGISTRY_VERSION,
                last_synced=utc_now(),
                last_ai_update=previous.meta.last_ai_update if previous else None,
            ),
            folders=folders,
        )


__all__ = ["GlobalRegistryBuilder"]
