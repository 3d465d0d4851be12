from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence

from .entities import AdbDevice, Device, DeviceId, Document


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str, meta: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.meta = meta


# ---- Scheduling ----
ScheduleFn = Callable[[int, Callable[[], None]], Any]
CancelFn = Callable[[Any], None]


# ---- Ports (Hexagonal boundaries) ----
class TransportPort(Protocol):
    """Debug server holding device connections and ADB tracking.

    ``devices`` is the live registry; it can change between any two calls.
    """

    @property
    def devices(self) -> List[Device]: ...
    @property
    def port(self) -> int: ...
    def host_addresses(self) -> List[str]: ...
    def listen(self) -> None: ...
    def disconnect(self) -> None: ...
    def track_adb_devices(self) -> None: ...
    def stop_track_adb_devices(self) -> None: ...
    def list_adb_devices(self) -> List[AdbDevice]: ...
    def adb_shell(self, device_id: DeviceId, command: str) -> str: ...
    def connect_device(self, device_id: DeviceId) -> None: ...
    def close_device(self, device_id: DeviceId) -> None: ...
    def get_device_by_id(self, device_id: DeviceId) -> Optional[Device]: ...
    def send_command(
        self,
        command: str,
        payload: Optional[Mapping[str, str]] = None,
        *,
        device_id: Optional[DeviceId] = None,
    ) -> None: ...  # device_id None -> every attached device
    def send_project_command(self, folder: str, command: str) -> None: ...


class Watcher(Protocol):
    def close(self) -> None: ...


class WorkspacePort(Protocol):
    """Editor workspace: focused document, folders, and file primitives."""

    def active_document(self) -> Optional[Document]: ...
    def workspace_folders(self) -> List[Path]: ...
    def read_text(self, path: Path) -> str: ...
    def write_bytes(self, path: Path, data: bytes) -> None: ...
    def open_file(self, path: Path) -> None: ...
    def watch_folder(self, folder: Path) -> Watcher: ...


class NotifierPort(Protocol):
    """Single user-visible channel for notices, errors, and quick picks."""

    def info(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def quick_pick(self, items: Sequence[str]) -> Optional[str]: ...  # None -> dismissed


class StoragePort(Protocol):
    """Persistence for user settings."""

    def load_user_settings(self) -> Optional[Dict[str, Any]]: ...
    def save_user_settings(self, payload: Mapping[str, Any]) -> None: ...
