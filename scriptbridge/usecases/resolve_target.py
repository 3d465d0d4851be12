"""Resolve which file and script text an editor action operates on."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from scriptbridge.domain.entities import Target
from scriptbridge.domain.errors import NoActiveTargetError, ReadError
from scriptbridge.domain.ports import WorkspacePort
from scriptbridge.domain.util import address_to_path

LOGGER = logging.getLogger(__name__)


@dataclass
class ResolveTarget:
    """Use case: map an optional explicit address to a ``Target``."""

    workspace: WorkspacePort

    def __call__(self, address: Optional[str] = None) -> Target:
        """Return filename plus script text for an action.

        Args:
            address: ``file://`` URI or path picked in the explorer. ``None``
                means "the focused editor".

        Returns:
            Target: Explicit addresses are read from disk; the focused editor
            contributes its live buffer including unsaved edits.

        Raises:
            NoActiveTargetError: Neither an address nor a focused document.

        Notes:
            An unreadable explicit file is logged and yields an empty script;
            the caller still sends it.
        """
        if address is not None:
            path = address_to_path(address)
            filename = str(path)
            try:
                text = self.workspace.read_text(path)
            except Exception as exc:
                err = ReadError(filename, str(exc))
                LOGGER.warning("%s; sending empty script", err.message)
                text = ""
            return Target(filename=filename, script=text)

        document = self.workspace.active_document()
        if document is None:
            raise NoActiveTargetError()
        return Target(filename=document.path, script=document.text)

    def active_filename(self) -> str:
        """Return the focused document's path, used by ``stop``."""
        document = self.workspace.active_document()
        if document is None:
            raise NoActiveTargetError("No active editor to stop.")
        return document.path


__all__ = ["ResolveTarget"]
