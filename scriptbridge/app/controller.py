"""Command table and use-case wiring for one editor session.

``AppController`` owns the ``SessionContext`` (recent device, active
project), builds every use case against the injected ports, and maps editor
command identifiers to handlers. It is also the single place where failures
become user-visible notices.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..domain.entities import CommandName, ProjectCommand
from ..domain.events import SessionEvent
from ..domain.ports import NotifierPort, TransportPort, UseCaseError, WorkspacePort
from ..domain.session import SessionContext
from ..usecases.capture_screen import CaptureScreen
from ..usecases.error_mapping import map_error
from ..usecases.manual_connect import ConnectAdbDevice, DisconnectDevice
from ..usecases.project_lifecycle import ProjectFactory, ProjectLifecycle
from ..usecases.receive_file import ReceiveFile
from ..usecases.resolve_target import ResolveTarget
from ..usecases.select_device import SelectDevice
from ..usecases.send_command import SendCommand
from ..viewmodels.settings_vm import SettingsVM
from ..viewmodels.status_vm import StatusVM
from .event_relay import SessionEventRelay
from .scheduler import Scheduler


class CommandId(str, Enum):
    """Editor command identifiers (registered as ``extension.<value>``)."""

    START_ALL_SERVER = "startAllServer"
    STOP_ALL_SERVER = "stopAllServer"
    START_SERVER = "startServer"
    STOP_SERVER = "stopServer"
    START_TRACK_ADB = "startTrackADBDevices"
    STOP_TRACK_ADB = "stopTrackADBDevices"
    MANUALLY_CONNECT_ADB = "manuallyConnectADB"
    MANUALLY_DISCONNECT = "manuallyDisconnect"
    SHOW_SERVER_ADDRESS = "showServerAddress"
    RUN = "run"
    RUN_ON_DEVICE = "runOnDevice"
    STOP = "stop"
    STOP_ALL = "stopAll"
    RERUN = "rerun"
    SAVE = "save"
    SAVE_TO_DEVICE = "saveToDevice"
    RUN_PROJECT = "runProject"
    SAVE_PROJECT = "saveProject"
    CAPTURE_SCREEN = "captureScreen"


class AppController:
    """Create use cases from ports and route editor commands to them.

    Call chain:
        Editor command ``extension.<id>`` -> ``execute`` -> handler ->
        use case -> ``TransportPort``. Transport events enter through
        ``handle_event`` and the ``SessionEventRelay``.
    """

    def __init__(
        self,
        *,
        transport: TransportPort,
        workspace: WorkspacePort,
        notifier: NotifierPort,
        scheduler: Scheduler,
        settings_vm: Optional[SettingsVM] = None,
        status_vm: Optional[StatusVM] = None,
        project_factory: Optional[ProjectFactory] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Wire use cases and the event relay.

        Args:
            transport: Debug server adapter.
            workspace: Editor workspace adapter.
            notifier: The single user-visible notice channel.
            scheduler: Keyed timers for debounce and delayed reruns.
            settings_vm: Runtime settings; defaults apply when omitted.
            status_vm: Server status state; a fresh one when omitted.
            project_factory: Override for building ``Project`` instances.
            clock: Time source for capture filenames.
        """
        self._log = logging.getLogger(__name__)
        self.transport = transport
        self.workspace = workspace
        self.notifier = notifier
        self.scheduler = scheduler
        self.settings_vm = settings_vm or SettingsVM()
        self.status_vm = status_vm or StatusVM()
        self.context = SessionContext()

        self.uc_resolve = ResolveTarget(workspace)
        self.uc_send = SendCommand(transport, self.uc_resolve)
        self.uc_select_device = SelectDevice(transport, notifier, self.context)
        self.uc_project = ProjectLifecycle(transport, workspace, self.context, project_factory)
        self.uc_receive_file = ReceiveFile(workspace, notifier)
        self.uc_connect_adb = ConnectAdbDevice(transport, notifier)
        self.uc_disconnect = DisconnectDevice(transport, notifier)
        if clock is None:
            self.uc_capture = CaptureScreen(transport, self.uc_send, notifier)
        else:
            self.uc_capture = CaptureScreen(transport, self.uc_send, notifier, clock)

        self.relay = SessionEventRelay(
            notifier=notifier,
            status_vm=self.status_vm,
            scheduler=scheduler,
            describe_server=self.server_address_text,
            save_project=self.save_project,
            run=self.run,
            stop_all=self.stop_all,
            receive_file=self.uc_receive_file,
            report_error=self.report_error,
            announce_delay_ms=lambda: self.settings_vm.announce_delay_ms,
            rerun_delay_ms=lambda: self.settings_vm.rerun_delay_ms,
        )

        self._commands: Dict[CommandId, Callable[..., Any]] = {
            CommandId.START_ALL_SERVER: self.start_all_server,
            CommandId.STOP_ALL_SERVER: self.stop_all_server,
            CommandId.START_SERVER: self.start_server,
            CommandId.STOP_SERVER: self.stop_server,
            CommandId.START_TRACK_ADB: self.start_track_adb_devices,
            CommandId.STOP_TRACK_ADB: self.stop_track_adb_devices,
            CommandId.MANUALLY_CONNECT_ADB: self.manually_connect_adb,
            CommandId.MANUALLY_DISCONNECT: self.manually_disconnect,
            CommandId.SHOW_SERVER_ADDRESS: self.show_server_address,
            CommandId.RUN: self.run,
            CommandId.RUN_ON_DEVICE: self.run_on_device,
            CommandId.STOP: self.stop,
            CommandId.STOP_ALL: self.stop_all,
            CommandId.RERUN: self.rerun,
            CommandId.SAVE: self.save,
            CommandId.SAVE_TO_DEVICE: self.save_to_device,
            CommandId.RUN_PROJECT: self.run_project,
            CommandId.SAVE_PROJECT: self.save_project,
            CommandId.CAPTURE_SCREEN: self.capture_screen,
        }
        missing = set(CommandId) - set(self._commands)
        if missing:
            raise RuntimeError(f"Commands without handler: {sorted(c.value for c in missing)}")

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def execute(self, command_id: CommandId | str, *args: Any) -> Any:
        """Run an editor command; every failure becomes exactly one notice.

        Raises:
            ValueError: ``command_id`` is not a registered command.
        """
        handler = self._commands[CommandId(command_id)]
        try:
            return handler(*args)
        except Exception as exc:
            self.report_error(exc)
            return None

    def handle_event(self, event: SessionEvent) -> bool:
        """Feed a transport event through the relay."""
        return self.relay.dispatch(event)

    def report_error(self, exc: Exception) -> None:
        """Show ``exc`` on the notice channel, mapping unexpected errors."""
        if isinstance(exc, UseCaseError):
            self._log.warning("%s: %s", exc.code, exc.message)
            self.notifier.error(exc.message)
            return
        self._log.exception("Unexpected error", exc_info=exc)
        self.notifier.error(map_error(exc, default_code="UNEXPECTED").message)

    def deactivate(self) -> None:
        """Dispose the active project, drop timers, and stop the server."""
        self.uc_project.dispose()
        self.scheduler.cancel_all()
        self.transport.disconnect()

    # ------------------------------------------------------------------
    # Server and ADB
    # ------------------------------------------------------------------
    def start_server(self) -> None:
        self.transport.listen()

    def stop_server(self) -> None:
        self.transport.disconnect()

    def start_track_adb_devices(self) -> None:
        self.transport.track_adb_devices()

    def stop_track_adb_devices(self) -> None:
        self.transport.stop_track_adb_devices()

    def start_all_server(self) -> None:
        self.transport.listen()
        self.transport.track_adb_devices()

    def stop_all_server(self) -> None:
        self.transport.disconnect()
        self.transport.stop_track_adb_devices()

    def manually_connect_adb(self) -> Optional[str]:
        return self.uc_connect_adb()

    def manually_disconnect(self) -> Optional[str]:
        return self.uc_disconnect()

    def server_address_text(self) -> str:
        port = self.transport.port
        return " or ".join(f"{address}:{port}" for address in self.transport.host_addresses())

    def show_server_address(self) -> None:
        self.notifier.info(f"Debug server running on {self.server_address_text()}")

    # ------------------------------------------------------------------
    # Script commands
    # ------------------------------------------------------------------
    def run(self, url: Optional[str] = None):
        return self.uc_send(CommandName.RUN, url)

    def rerun(self, url: Optional[str] = None):
        return self.uc_send(CommandName.RERUN, url)

    def save(self, url: Optional[str] = None):
        return self.uc_send(CommandName.SAVE, url)

    def stop(self):
        return self.uc_send(CommandName.STOP)

    def stop_all(self):
        return self.uc_send(CommandName.STOP_ALL)

    def run_on_device(self):
        device = self.uc_select_device()
        if device is None:
            return None
        return self.uc_send(CommandName.RUN, device=device)

    def save_to_device(self):
        device = self.uc_select_device()
        if device is None:
            return None
        return self.uc_send(CommandName.SAVE, device=device)

    # ------------------------------------------------------------------
    # Projects and transfers
    # ------------------------------------------------------------------
    def run_project(self, url: Optional[str] = None):
        return self.uc_project(ProjectCommand.RUN_PROJECT, url)

    def save_project(self, url: Optional[str] = None):
        return self.uc_project(ProjectCommand.SAVE_PROJECT, url)

    def capture_screen(self) -> str:
        return self.uc_capture(
            host_address=self.settings_vm.host_address,
            screenshot_dir=self.settings_vm.screenshot_dir,
        )


__all__ = ["AppController", "CommandId"]
