"""Device ordering and interactive device selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from scriptbridge.domain.entities import Device, RecentDevice
from scriptbridge.domain.errors import NoDevicesError
from scriptbridge.domain.ports import NotifierPort, TransportPort
from scriptbridge.domain.session import SessionContext

LOGGER = logging.getLogger(__name__)


def order_devices(devices: Sequence[Device], recent: Optional[RecentDevice]) -> List[Device]:
    """Return a copy of ``devices`` with the recent device swapped to the front.

    Only positions 0 and i are exchanged; the rest keeps registry order. A
    stale or missing recent device leaves the order untouched.
    """
    ordered = list(devices)
    if recent is None:
        return ordered
    index = recent.index_in(ordered)
    if index is not None and index > 0:
        ordered[0], ordered[index] = ordered[index], ordered[0]
    return ordered


@dataclass
class SelectDevice:
    """Use case: let the user pick one of the attached devices."""

    transport: TransportPort
    notifier: NotifierPort
    context: SessionContext

    def list_ordered(self) -> List[Device]:
        return order_devices(self.transport.devices, self.context.recent_device)

    def __call__(self) -> Optional[Device]:
        """Show the quick pick and return the chosen device.

        Returns:
            The chosen device, or ``None`` when the list is empty or the user
            dismissed the pick. Only a real choice updates the recent device.

        Notes:
            Labels map back by first match, so duplicate labels pick the
            lowest index.
        """
        devices = self.list_ordered()
        labels = [device.label for device in devices]
        choice = self.notifier.quick_pick(labels)
        if not devices:
            self.notifier.info(NoDevicesError().message)
            return None
        if choice is None:
            LOGGER.debug("Device pick dismissed")
            return None
        try:
            index = labels.index(choice)
        except ValueError:
            LOGGER.warning("Quick pick returned unknown entry %r", choice)
            return None
        device = devices[index]
        self.context.recent_device = RecentDevice(device.id)
        return device


__all__ = ["SelectDevice", "order_devices"]
