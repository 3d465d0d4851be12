"""Reactive relay from transport session events to UI notices and use cases.

Each event type has exactly one handler. Handlers never raise into the
transport: failures go to ``report_error``.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, get_args

from scriptbridge.domain.announcement import DeviceAnnouncement
from scriptbridge.domain.entities import DeviceId
from scriptbridge.domain.events import (
    AdbTracking,
    AdbTrackingState,
    DeviceAttached,
    DeviceNamed,
    InboundCommand,
    InboundFile,
    ServerAlreadyRunning,
    ServerStarted,
    ServerStopped,
    SessionEvent,
)
from scriptbridge.domain.ports import NotifierPort
from scriptbridge.viewmodels.status_vm import StatusVM

from .scheduler import Scheduler

RERUN_TIMER = "rerun"

_ADB_NOTICES: Dict[AdbTrackingState, str] = {
    AdbTrackingState.START: "ADB: Tracking start",
    AdbTrackingState.ALREADY_RUNNING: "ADB: Tracking already running",
    AdbTrackingState.STOP: "ADB: Tracking stop",
    AdbTrackingState.ERROR: "ADB: Tracking error",
}


def _announce_key(device_id: DeviceId) -> str:
    return f"announce:{device_id}"


class SessionEventRelay:
    """Dispatch typed session events to exactly one handler each."""

    def __init__(
        self,
        *,
        notifier: NotifierPort,
        status_vm: StatusVM,
        scheduler: Scheduler,
        describe_server: Callable[[], str],
        save_project: Callable[[Optional[str]], object],
        run: Callable[[Optional[str]], object],
        stop_all: Callable[[], object],
        receive_file: Callable[[str, str], object],
        report_error: Callable[[Exception], None],
        announce_delay_ms: Callable[[], int] = lambda: 1000,
        rerun_delay_ms: Callable[[], int] = lambda: 1000,
    ) -> None:
        self._log = logging.getLogger(__name__)
        self.notifier = notifier
        self.status_vm = status_vm
        self.scheduler = scheduler
        self._describe_server = describe_server
        self._save_project = save_project
        self._run = run
        self._stop_all = stop_all
        self._receive_file = receive_file
        self._report_error = report_error
        self._announce_delay_ms = announce_delay_ms
        self._rerun_delay_ms = rerun_delay_ms
        self._announcements: Dict[DeviceId, DeviceAnnouncement] = {}
        self._handlers: Dict[type, Callable] = {
            ServerStarted: self._on_server_started,
            ServerAlreadyRunning: self._on_server_already_running,
            ServerStopped: self._on_server_stopped,
            AdbTracking: self._on_adb_tracking,
            DeviceAttached: self._on_device_attached,
            DeviceNamed: self._on_device_named,
            InboundCommand: self._on_inbound_command,
            InboundFile: self._on_inbound_file,
        }
        missing = set(get_args(SessionEvent)) - set(self._handlers)
        if missing:
            raise RuntimeError(f"Unhandled session events: {sorted(t.__name__ for t in missing)}")

    def dispatch(self, event: SessionEvent) -> bool:
        """Run the handler for ``event``; return False if it reported an error."""
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Not a session event: {event!r}")
        self._log.debug("Session event %s", event.kind.value)
        try:
            handler(event)
        except Exception as exc:
            self._report_error(exc)
            return False
        return True

    def pending_announcements(self) -> int:
        return len(self._announcements)

    # ---------- server lifecycle ----------

    def _on_server_started(self, event: ServerStarted) -> None:
        self.status_vm.set_running(True)
        self.notifier.info(f"Debug server running on {self._describe_server()}")

    def _on_server_already_running(self, event: ServerAlreadyRunning) -> None:
        self.status_vm.set_running(True)
        self.notifier.info("Debug server already running")

    def _on_server_stopped(self, event: ServerStopped) -> None:
        self.status_vm.set_running(False)
        for device_id in list(self._announcements):
            self.scheduler.cancel(_announce_key(device_id))
        self._announcements.clear()
        self.scheduler.cancel(RERUN_TIMER)
        self.notifier.info("Debug server stopped")

    def _on_adb_tracking(self, event: AdbTracking) -> None:
        message = _ADB_NOTICES[event.state]
        if event.state is AdbTrackingState.ERROR:
            self.notifier.error(message)
        else:
            self.notifier.info(message)

    # ---------- device attachment ----------

    def _on_device_attached(self, event: DeviceAttached) -> None:
        device_id = event.device.id
        self._announcements[device_id] = DeviceAnnouncement(event.device)
        self.scheduler.schedule(
            _announce_key(device_id),
            self._announce_delay_ms(),
            lambda: self._guarded(lambda: self._announce(device_id)),
        )

    def _on_device_named(self, event: DeviceNamed) -> None:
        if event.device_id not in self._announcements:
            return
        self.scheduler.cancel(_announce_key(event.device_id))
        self._announce(event.device_id, event.name)

    def _announce(self, device_id: DeviceId, name: Optional[str] = None) -> None:
        announcement = self._announcements.get(device_id)
        if announcement is None:
            return
        device = announcement.fire(name)
        if device is None:
            return
        del self._announcements[device_id]
        self.notifier.info(f"New device attached: {device}")

    # ---------- inbound traffic ----------

    def _on_inbound_command(self, event: InboundCommand) -> None:
        if event.command == "save":
            self._save_project(event.url)
        elif event.command == "rerun":
            self._stop_all()
            url = event.url
            self.scheduler.schedule(
                RERUN_TIMER,
                self._rerun_delay_ms(),
                lambda: self._guarded(lambda: self._run(url)),
            )
        else:
            self._log.warning("Ignoring inbound command %r", event.command)

    def _on_inbound_file(self, event: InboundFile) -> None:
        self.notifier.info(f"Received screenshot: {event.filename}")
        self._receive_file(event.filename, event.base64_content)

    def _guarded(self, action: Callable[[], object]) -> None:
        try:
            action()
        except Exception as exc:
            self._report_error(exc)


__all__ = ["RERUN_TIMER", "SessionEventRelay"]
