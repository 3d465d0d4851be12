from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from scriptbridge.domain.entities import AdbDevice, Device, DeviceId
from scriptbridge.domain.events import (
    AdbTrackingState,
    SessionEvent,
    SessionEventKind,
    event_from_transport,
)
from scriptbridge.domain.ports import TransportPort

LOGGER = logging.getLogger(__name__)

EventHandler = Callable[[SessionEvent], None]


@dataclass
class SentCommand:
    command: str
    payload: Dict[str, str]
    device_id: Optional[DeviceId] = None


@dataclass
class InMemoryTransport(TransportPort):
    """Offline substitute for the debug server with a deterministic registry.

    Emissions use the same string names as a socket transport and are
    converted with ``event_from_transport`` before reaching subscribers.

    ``adb_props`` maps ADB serials to their ``getprop`` answers. Sent commands
    are recorded in ``sent`` and ``project_commands``.
    """

    server_port: int = 9317
    addresses: List[str] = field(default_factory=lambda: ["127.0.0.1"])
    adb_props: Dict[DeviceId, Dict[str, str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._devices: List[Device] = []
        self._handlers: List[EventHandler] = []
        self.listening = False
        self.tracking = False
        self.sent: List[SentCommand] = []
        self.project_commands: List[Tuple[str, str]] = []
        self.connected_adb: List[DeviceId] = []

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def _emit(self, name: str, *args: object) -> None:
        event = event_from_transport(name, *args)
        for handler in list(self._handlers):
            handler(event)

    # ---------- registry simulation ----------

    def attach(self, device: Device) -> None:
        self._devices.append(device)
        self._emit(SessionEventKind.DEVICE_ATTACHED.value, device)

    def report_name(self, device_id: DeviceId, name: str) -> None:
        for index, device in enumerate(self._devices):
            if device.id == device_id:
                self._devices[index] = replace(device, name=name)
        self._emit(SessionEventKind.DEVICE_NAMED.value, device_id, name)

    def detach(self, device_id: DeviceId) -> None:
        self._devices = [device for device in self._devices if device.id != device_id]

    def device_message(self, name: str, *args: object) -> None:
        """Simulate a device-originated emission such as ``cmd`` or ``save_file``."""
        self._emit(name, *args)

    # ---------- TransportPort ----------

    @property
    def devices(self) -> List[Device]:
        return list(self._devices)

    @property
    def port(self) -> int:
        return self.server_port

    def host_addresses(self) -> List[str]:
        return list(self.addresses)

    def listen(self) -> None:
        if self.listening:
            self._emit(SessionEventKind.SERVER_ALREADY_RUNNING.value)
            return
        self.listening = True
        self._emit(SessionEventKind.SERVER_STARTED.value)

    def disconnect(self) -> None:
        self.listening = False
        self._devices.clear()
        self._emit(SessionEventKind.SERVER_STOPPED.value)

    def track_adb_devices(self) -> None:
        if self.tracking:
            self._emit(AdbTrackingState.ALREADY_RUNNING.value)
            return
        self.tracking = True
        self._emit(AdbTrackingState.START.value)

    def stop_track_adb_devices(self) -> None:
        self.tracking = False
        self._emit(AdbTrackingState.STOP.value)

    def list_adb_devices(self) -> List[AdbDevice]:
        return [AdbDevice(serial) for serial in self.adb_props]

    def adb_shell(self, device_id: DeviceId, command: str) -> str:
        props = self.adb_props.get(device_id)
        if props is None:
            raise RuntimeError(f"ADB device {device_id} not found")
        key = command.replace("getprop", "", 1).strip()
        return props.get(key, "") + "\n"

    def connect_device(self, device_id: DeviceId) -> None:
        self.connected_adb.append(device_id)

    def close_device(self, device_id: DeviceId) -> None:
        self.detach(device_id)

    def get_device_by_id(self, device_id: DeviceId) -> Optional[Device]:
        for device in self._devices:
            if device.id == device_id:
                return device
        return None

    def send_command(
        self,
        command: str,
        payload: Optional[Mapping[str, str]] = None,
        *,
        device_id: Optional[DeviceId] = None,
    ) -> None:
        self.sent.append(SentCommand(command, dict(payload or {}), device_id))
        LOGGER.debug("send %s -> %s", command, device_id or "*")

    def send_project_command(self, folder: str, command: str) -> None:
        self.project_commands.append((folder, command))
