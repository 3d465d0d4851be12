from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class StatusView:
    text: str
    tooltip: str
    command: str
    warning: bool


RUNNING = StatusView(
    text="$(debug-start) Scripts: Running",
    tooltip="Debug server is running. Click to stop.",
    command="stopServer",
    warning=False,
)
STOPPED = StatusView(
    text="$(debug-stop) Scripts: Stopped",
    tooltip="Debug server is stopped. Click to start.",
    command="startServer",
    warning=True,
)


class StatusVM:
    """Server running/stopped state behind the status bar item.

    Repeated updates with the same state are ignored so duplicate
    "already running" signals do not re-render anything.
    """

    def __init__(self, on_changed: Optional[Callable[[StatusView], None]] = None) -> None:
        self.on_changed = on_changed
        self.running = False
        self.view = STOPPED

    def set_running(self, running: bool) -> bool:
        """Return True when the state actually changed."""
        running = bool(running)
        if running == self.running:
            return False
        self.running = running
        self.view = RUNNING if running else STOPPED
        if self.on_changed:
            self.on_changed(self.view)
        return True
