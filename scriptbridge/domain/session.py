from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .entities import RecentDevice
from .project import Project


@dataclass
class SessionContext:
    """Process-wide mutable state of one orchestration instance.

    Only the controller thread writes these fields, and each write happens
    in a single synchronous step.
    """

    recent_device: Optional[RecentDevice] = None
    project: Optional[Project] = None


__all__ = ["SessionContext"]
