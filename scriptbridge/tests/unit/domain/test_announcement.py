from dataclasses import fields

from scriptbridge.domain.announcement import AnnouncePhase, DeviceAnnouncement
from scriptbridge.domain.entities import Device


def test_fire_once():
    announcement = DeviceAnnouncement(Device("d1"))
    assert announcement.pending
    assert announcement.fire() == Device("d1")
    assert announcement.phase is AnnouncePhase.ANNOUNCED
    assert announcement.fire("late name") is None


def test_fire_with_name_updates_device():
    announcement = DeviceAnnouncement(Device("d1"))
    assert announcement.fire("Pixel") == Device("d1", "Pixel")


def test_announcement_holds_only_device_and_phase():
    assert [f.name for f in fields(DeviceAnnouncement)] == ["device", "phase"]
