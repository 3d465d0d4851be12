"""Value objects shared by the orchestration layer.

All types are immutable. Devices are only ever referenced by snapshot or by
id; the live registry belongs to the transport adapter.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence

DeviceId = str


class CommandName(str, Enum):
    """Logical actions understood by the device runtime."""

    RUN = "run"
    SAVE = "save"
    STOP = "stop"
    STOP_ALL = "stopAll"
    RERUN = "rerun"


class ProjectCommand(str, Enum):
    """Folder-scoped actions forwarded for the active project."""

    RUN_PROJECT = "run_project"
    SAVE_PROJECT = "save_project"


@dataclass(frozen=True)
class Device:
    """Snapshot of an attached device as reported by the transport registry."""

    id: DeviceId
    name: str = ""

    @property
    def label(self) -> str:
        return f"{self.name}: {self.id}"

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class AdbDevice:
    """Device visible to ADB but not necessarily attached to the server."""

    id: DeviceId


@dataclass(frozen=True)
class Document:
    """Focused editor document: path plus the live (possibly unsaved) buffer."""

    path: str
    text: str


@dataclass(frozen=True)
class Target:
    """Filename and script text an action operates on."""

    filename: str
    script: str


@dataclass(frozen=True)
class Command:
    """Canonical command record sent to the server or to one device.

    ``script`` is a snapshot taken at build time; ``stop``/``stopAll`` never
    carry one.
    """

    cmd: CommandName
    id: Optional[str] = None
    name: Optional[str] = None
    script: Optional[str] = None

    def payload(self) -> Dict[str, str]:
        """Return the wire payload without unset fields."""
        out: Dict[str, str] = {}
        if self.id is not None:
            out["id"] = self.id
        if self.name is not None:
            out["name"] = self.name
        if self.script is not None:
            out["script"] = self.script
        return out


@dataclass(frozen=True)
class RecentDevice:
    """Non-owning marker for the last interactively chosen device.

    Holds the id only; callers must look it up in the live list every time.
    """

    device_id: DeviceId

    def index_in(self, devices: Sequence[Device]) -> Optional[int]:
        for index, device in enumerate(devices):
            if device.id == self.device_id:
                return index
        return None


@dataclass(frozen=True)
class TransferredFile:
    """Workspace-relative file delivered by a device."""

    filename: str
    content: bytes


__all__ = [
    "AdbDevice",
    "Command",
    "CommandName",
    "Device",
    "DeviceId",
    "Document",
    "ProjectCommand",
    "RecentDevice",
    "Target",
    "TransferredFile",
]
