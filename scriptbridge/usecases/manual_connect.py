"""Manual device connect over ADB and manual disconnect of attached devices."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from scriptbridge.domain.entities import AdbDevice
from scriptbridge.domain.errors import NoDevicesError
from scriptbridge.domain.ports import NotifierPort, TransportPort, UseCaseError
from scriptbridge.usecases.error_mapping import map_error

LOGGER = logging.getLogger(__name__)

BRAND_PROP = "getprop ro.product.brand"
MODEL_PROP = "getprop ro.product.model"


@dataclass
class ConnectAdbDevice:
    """Use case: list ADB devices by brand/model and connect the chosen one."""

    transport: TransportPort
    notifier: NotifierPort

    def __call__(self) -> Optional[str]:
        """Return the connected device id, or ``None`` when nothing was chosen.

        Property queries run one device after another before the pick shows.

        Raises:
            UseCaseError: ``ADB_FAILED`` when listing, querying, or connecting fails.
        """
        try:
            devices = list(self.transport.list_adb_devices())
        except Exception as exc:
            raise map_error(exc, default_code="ADB_FAILED", default_message="Could not list ADB devices") from exc
        if not devices:
            self.notifier.info("No ADB devices found.")
            return None

        labels = self._labels(devices)
        choice = self.notifier.quick_pick(labels)
        if choice is None or choice not in labels:
            return None
        device = devices[labels.index(choice)]
        try:
            self.transport.connect_device(device.id)
        except Exception as exc:
            raise map_error(exc, default_code="ADB_FAILED", default_message=f"Could not connect {device.id}") from exc
        LOGGER.info("Connecting ADB device %s", device.id)
        return device.id

    def _labels(self, devices: List[AdbDevice]) -> List[str]:
        labels: List[str] = []
        for device in devices:
            try:
                brand = self.transport.adb_shell(device.id, BRAND_PROP).strip()
                model = self.transport.adb_shell(device.id, MODEL_PROP).strip()
            except Exception as exc:
                raise map_error(
                    exc,
                    default_code="ADB_FAILED",
                    default_message=f"Could not query {device.id}",
                ) from exc
            labels.append(f"{brand} {model}: {device.id}")
        return labels


@dataclass
class DisconnectDevice:
    """Use case: close the connection of one attached device."""

    transport: TransportPort
    notifier: NotifierPort

    def __call__(self) -> Optional[str]:
        devices = list(self.transport.devices)
        labels = [device.label for device in devices]
        choice = self.notifier.quick_pick(labels)
        if not devices:
            self.notifier.info(NoDevicesError().message)
            return None
        if choice is None or choice not in labels:
            return None
        device = devices[labels.index(choice)]
        if self.transport.get_device_by_id(device.id) is None:
            raise UseCaseError(
                "DEVICE_GONE",
                f"Device {device.label} is no longer connected.",
                meta={"device_id": device.id},
            )
        self.transport.close_device(device.id)
        LOGGER.info("Closed device %s", device.label)
        return device.id


__all__ = ["ConnectAdbDevice", "DisconnectDevice"]
