"""Typed session events raised by the transport layer.

Every transport notification is converted into exactly one of the frozen
dataclasses below; ``SessionEventKind`` is the closed set of tags the relay
must handle.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Optional, Union

from .entities import Device, DeviceId


class SessionEventKind(str, Enum):
    SERVER_STARTED = "connect"
    SERVER_ALREADY_RUNNING = "connected"
    SERVER_STOPPED = "disconnect"
    ADB_TRACKING = "adb"
    DEVICE_ATTACHED = "new_device"
    DEVICE_NAMED = "data:device_name"
    INBOUND_COMMAND = "cmd"
    INBOUND_FILE = "save_file"


class AdbTrackingState(str, Enum):
    START = "adb:tracking_start"
    ALREADY_RUNNING = "adb:tracking_started"
    STOP = "adb:tracking_stop"
    ERROR = "adb:tracking_error"


@dataclass(frozen=True)
class ServerStarted:
    kind: ClassVar[SessionEventKind] = SessionEventKind.SERVER_STARTED


@dataclass(frozen=True)
class ServerAlreadyRunning:
    kind: ClassVar[SessionEventKind] = SessionEventKind.SERVER_ALREADY_RUNNING


@dataclass(frozen=True)
class ServerStopped:
    kind: ClassVar[SessionEventKind] = SessionEventKind.SERVER_STOPPED


@dataclass(frozen=True)
class AdbTracking:
    state: AdbTrackingState
    kind: ClassVar[SessionEventKind] = SessionEventKind.ADB_TRACKING


@dataclass(frozen=True)
class DeviceAttached:
    device: Device
    kind: ClassVar[SessionEventKind] = SessionEventKind.DEVICE_ATTACHED


@dataclass(frozen=True)
class DeviceNamed:
    device_id: DeviceId
    name: str
    kind: ClassVar[SessionEventKind] = SessionEventKind.DEVICE_NAMED


@dataclass(frozen=True)
class InboundCommand:
    command: str
    url: Optional[str] = None
    kind: ClassVar[SessionEventKind] = SessionEventKind.INBOUND_COMMAND


@dataclass(frozen=True)
class InboundFile:
    filename: str
    base64_content: str
    kind: ClassVar[SessionEventKind] = SessionEventKind.INBOUND_FILE


SessionEvent = Union[
    ServerStarted,
    ServerAlreadyRunning,
    ServerStopped,
    AdbTracking,
    DeviceAttached,
    DeviceNamed,
    InboundCommand,
    InboundFile,
]


def event_from_transport(name: str, *args: Any) -> SessionEvent:
    """Translate a string-named transport emission into a typed event.

    Transports emit by name (``connect``, ``new_device``, ``save_file``, ...);
    this is the single place those names become ``SessionEvent`` values.

    Raises:
        ValueError: Unknown event name or missing arguments.
    """
    try:
        if name == SessionEventKind.SERVER_STARTED.value:
            return ServerStarted()
        if name == SessionEventKind.SERVER_ALREADY_RUNNING.value:
            return ServerAlreadyRunning()
        if name == SessionEventKind.SERVER_STOPPED.value:
            return ServerStopped()
        if name.startswith("adb:"):
            return AdbTracking(AdbTrackingState(name))
        if name == SessionEventKind.DEVICE_ATTACHED.value:
            return DeviceAttached(args[0])
        if name == SessionEventKind.DEVICE_NAMED.value:
            return DeviceNamed(str(args[0]), str(args[1]))
        if name == SessionEventKind.INBOUND_COMMAND.value:
            url = args[1] if len(args) > 1 else None
            return InboundCommand(str(args[0]), None if url is None else str(url))
        if name == SessionEventKind.INBOUND_FILE.value:
            return InboundFile(str(args[0]), str(args[1]))
    except IndexError as exc:
        raise ValueError(f"Transport event '{name}' is missing arguments") from exc
    raise ValueError(f"Unknown transport event '{name}'")


__all__ = [
    "AdbTracking",
    "AdbTrackingState",
    "DeviceAttached",
    "DeviceNamed",
    "InboundCommand",
    "InboundFile",
    "ServerAlreadyRunning",
    "ServerStarted",
    "ServerStopped",
    "SessionEvent",
    "SessionEventKind",
    "event_from_transport",
]
