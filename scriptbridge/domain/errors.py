"""Domain-level error types for use-case and adapter mapping.

Each subclass pins a stable ``code`` so the controller and tests can branch
on it without parsing messages.
"""
from __future__ import annotations

from typing import Optional

from .ports import UseCaseError


class NoActiveTargetError(UseCaseError):
    def __init__(self, message: str = "No file or active editor to act on.") -> None:
        super().__init__("NO_ACTIVE_TARGET", message)


class ReadError(UseCaseError):
    def __init__(self, path: str, reason: Optional[str] = None) -> None:
        detail = f": {reason}" if reason else ""
        super().__init__("READ_FAILED", f"Could not read {path}{detail}", meta={"path": path})


class NoWorkspaceOpenError(UseCaseError):
    def __init__(self, message: str = "Please open a workspace folder.") -> None:
        super().__init__("NO_WORKSPACE", message)


class SendError(UseCaseError):
    def __init__(self, command: str, reason: str) -> None:
        super().__init__("SEND_FAILED", f"Sending '{command}' failed: {reason}", meta={"command": command})


class DecodeError(UseCaseError):
    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(
            "DECODE_FAILED",
            f"Failed to save file: {filename} is not valid base64 ({reason})",
            meta={"filename": filename},
        )


class NoDevicesError(UseCaseError):
    def __init__(self, message: str = "No devices connected.") -> None:
        super().__init__("NO_DEVICES", message)


class UnsafePathError(UseCaseError):
    def __init__(self, filename: str) -> None:
        super().__init__(
            "UNSAFE_PATH",
            f"Failed to save file: {filename} points outside the workspace",
            meta={"filename": filename},
        )


__all__ = [
    "DecodeError",
    "NoActiveTargetError",
    "NoDevicesError",
    "NoWorkspaceOpenError",
    "ReadError",
    "SendError",
    "UnsafePathError",
    "UseCaseError",
]
