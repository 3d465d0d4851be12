"""Use case owning the single active project and its folder-scoped commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from scriptbridge.domain.entities import ProjectCommand
from scriptbridge.domain.errors import NoWorkspaceOpenError, SendError
from scriptbridge.domain.ports import TransportPort, WorkspacePort
from scriptbridge.domain.project import Project
from scriptbridge.domain.session import SessionContext
from scriptbridge.domain.util import address_to_path

LOGGER = logging.getLogger(__name__)

ProjectFactory = Callable[[Path], Project]


@dataclass
class ProjectLifecycle:
    """Drive ``NoProject -> Active(folder) -> Active(folder') -> Disposed``.

    The active project lives in ``context.project``; at most one exists at a
    time and a replaced project is disposed before its successor is built.
    """

    transport: TransportPort
    workspace: WorkspacePort
    context: SessionContext
    factory: Optional[ProjectFactory] = None

    def __call__(
        self,
        command: Union[ProjectCommand, str],
        address: Optional[str] = None,
    ) -> Project:
        """Settle on the project for ``address`` and forward ``command``.

        Args:
            command: ``run_project`` or ``save_project``.
            address: Explicit folder URI/path; defaults to the first
                workspace folder.

        Returns:
            Project: The active project the command was forwarded for.

        Raises:
            NoWorkspaceOpenError: No address and no workspace folder.
            ValueError: Unknown project command.

        Side Effects:
            May dispose the previous project. Send failures are logged only.
        """
        name = ProjectCommand(command)
        folder = self.resolve_folder(address)
        project = self.ensure_project(folder)
        try:
            self.transport.send_project_command(str(project.folder), name.value)
        except Exception as exc:
            err = SendError(name.value, str(exc) or exc.__class__.__name__)
            LOGGER.error(err.message, exc_info=True)
        return project

    def resolve_folder(self, address: Optional[str] = None) -> Path:
        if address is not None:
            return address_to_path(address)
        folders = self.workspace.workspace_folders()
        if not folders:
            raise NoWorkspaceOpenError("Please open a project folder.")
        return folders[0]

    def ensure_project(self, folder: Path) -> Project:
        current = self.context.project
        if current is not None and not current.disposed and current.is_bound_to(folder):
            return current
        if current is not None:
            # Detach first so nothing dispatches to a half-disposed project.
            self.context.project = None
            current.dispose()
            LOGGER.info("Replacing project %s", current.folder)
        project = self._build(folder)
        self.context.project = project
        LOGGER.info("Active project: %s", project.folder)
        return project

    def dispose(self) -> None:
        """Drop the active project, e.g. on shutdown."""
        current, self.context.project = self.context.project, None
        if current is not None:
            current.dispose()

    def _build(self, folder: Path) -> Project:
        if self.factory is not None:
            return self.factory(folder)
        return Project(folder, watcher=self.workspace.watch_folder(folder))


__all__ = ["ProjectFactory", "ProjectLifecycle"]
