"""Domain package exports for value objects and errors."""

from .entities import (
    AdbDevice,
    Command,
    CommandName,
    Device,
    DeviceId,
    Document,
    ProjectCommand,
    RecentDevice,
    Target,
    TransferredFile,
)
from .errors import (
    DecodeError,
    NoActiveTargetError,
    NoDevicesError,
    NoWorkspaceOpenError,
    ReadError,
    SendError,
    UnsafePathError,
)
from .ports import UseCaseError
from .project import Project

__all__ = [
    "AdbDevice",
    "Command",
    "CommandName",
    "DecodeError",
    "Device",
    "DeviceId",
    "Document",
    "NoActiveTargetError",
    "NoDevicesError",
    "NoWorkspaceOpenError",
    "Project",
    "ProjectCommand",
    "ReadError",
    "RecentDevice",
    "SendError",
    "Target",
    "TransferredFile",
    "UnsafePathError",
    "UseCaseError",
]
