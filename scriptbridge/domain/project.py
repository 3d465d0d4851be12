from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .ports import Watcher
from .util import normalize_folder

LOGGER = logging.getLogger(__name__)


class Project:
    """Session bound to one workspace folder.

    Owns the folder watcher handed in at construction and releases it on
    :meth:`dispose`. A disposed project must not be used for dispatch.
    """

    def __init__(self, folder: Path, watcher: Optional[Watcher] = None) -> None:
        self.folder = normalize_folder(folder)
        self._watcher = watcher
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def is_bound_to(self, folder: Path) -> bool:
        return self.folder == normalize_folder(folder)

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        watcher, self._watcher = self._watcher, None
        if watcher is not None:
            watcher.close()
        LOGGER.debug("Disposed project for %s", self.folder)

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "active"
        return f"Project({str(self.folder)!r}, {state})"


__all__ = ["Project"]
