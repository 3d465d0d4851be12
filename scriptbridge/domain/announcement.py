"""Announce-once state for newly attached devices."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .entities import Device


class AnnouncePhase(str, Enum):
    PENDING = "pending"
    ANNOUNCED = "announced"


@dataclass
class DeviceAnnouncement:
    """Single Pending -> Announced transition for one device attachment.

    Whichever trigger calls :meth:`fire` first wins; later calls return
    ``None``.
    """

    device: Device
    phase: AnnouncePhase = AnnouncePhase.PENDING

    @property
    def pending(self) -> bool:
        return self.phase is AnnouncePhase.PENDING

    def fire(self, name: Optional[str] = None) -> Optional[Device]:
        if not self.pending:
            return None
        if name:
            self.device = replace(self.device, name=name)
        self.phase = AnnouncePhase.ANNOUNCED
        return self.device


__all__ = ["AnnouncePhase", "DeviceAnnouncement"]
