"""Filesystem-backed ``WorkspacePort`` for headless runs and tests.

The focused document is whatever the caller last passed to
``focus``; opening a file is delegated to an optional opener callback.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from scriptbridge.domain.entities import Document
from scriptbridge.domain.ports import WorkspacePort

LOGGER = logging.getLogger(__name__)


class FolderWatch:
    """Handle returned by ``watch_folder``; closing is idempotent."""

    def __init__(self, folder: Path) -> None:
        self.folder = folder
        self.closed = False

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            LOGGER.debug("Stopped watching %s", self.folder)


class FilesystemWorkspace(WorkspacePort):
    def __init__(
        self,
        folders: Iterable[Path] = (),
        *,
        opener: Optional[Callable[[Path], None]] = None,
    ) -> None:
        self.folders: List[Path] = [Path(folder) for folder in folders]
        self.opener = opener
        self.watches: List[FolderWatch] = []
        self._document: Optional[Document] = None

    def focus(self, document: Optional[Document]) -> None:
        self._document = document

    # ---------- WorkspacePort ----------

    def active_document(self) -> Optional[Document]:
        return self._document

    def workspace_folders(self) -> List[Path]:
        return list(self.folders)

    def read_text(self, path: Path) -> str:
        return Path(path).read_text(encoding="utf-8")

    def write_bytes(self, path: Path, data: bytes) -> None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def open_file(self, path: Path) -> None:
        if self.opener is None:
            LOGGER.info("File ready: %s", path)
            return
        self.opener(Path(path))

    def watch_folder(self, folder: Path) -> FolderWatch:
        watch = FolderWatch(Path(folder))
        self.watches.append(watch)
        LOGGER.debug("Watching %s", folder)
        return watch
