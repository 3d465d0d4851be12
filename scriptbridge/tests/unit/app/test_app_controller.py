from __future__ import annotations

import base64
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

import pytest

from scriptbridge.adapters.transport_memory import InMemoryTransport, SentCommand
from scriptbridge.adapters.workspace_fs import FilesystemWorkspace
from scriptbridge.app.controller import AppController, CommandId
from scriptbridge.app.scheduler import Scheduler
from scriptbridge.domain.entities import Device, Document, RecentDevice
from scriptbridge.domain.events import InboundCommand, InboundFile
from scriptbridge.viewmodels.settings_vm import SettingsVM


class _Notifier:
    def __init__(self) -> None:
        self.infos: List[str] = []
        self.errors: List[str] = []
        self.picks: List[Optional[str]] = []

    def info(self, message: str) -> None:
        self.infos.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def quick_pick(self, items: Sequence[str]) -> Optional[str]:
        return self.picks.pop(0) if self.picks else None


class _FakeTimers:
    def __init__(self) -> None:
        self.callbacks: Dict[int, Callable[[], None]] = {}
        self._next = 0

    def schedule(self, delay_ms, callback):
        self._next += 1
        self.callbacks[self._next] = callback
        return self._next

    def cancel(self, token):
        self.callbacks.pop(token, None)

    def fire_all(self):
        for token in sorted(self.callbacks):
            self.callbacks.pop(token)()


def _controller(tmp_path, **kwargs):
    transport = InMemoryTransport(addresses=["10.0.0.2", "192.168.1.4"])
    workspace = FilesystemWorkspace([tmp_path])
    notifier = _Notifier()
    timers = _FakeTimers()
    controller = AppController(
        transport=transport,
        workspace=workspace,
        notifier=notifier,
        scheduler=Scheduler(timers.schedule, timers.cancel),
        clock=lambda: datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        **kwargs,
    )
    transport.subscribe(controller.handle_event)
    return controller, transport, workspace, notifier, timers


def test_every_command_id_has_a_handler(tmp_path):
    controller, *_ = _controller(tmp_path)
    assert set(controller._commands) == set(CommandId)


def test_unknown_command_id_rejected(tmp_path):
    controller, *_ = _controller(tmp_path)
    with pytest.raises(ValueError):
        controller.execute("launchRockets")


def test_start_server_updates_status_and_notifies(tmp_path):
    controller, _, _, notifier, _ = _controller(tmp_path)

    controller.execute(CommandId.START_ALL_SERVER)
    controller.execute("startServer")

    assert controller.status_vm.running
    assert notifier.infos == [
        "Debug server running on 10.0.0.2:9317 or 192.168.1.4:9317",
        "ADB: Tracking start",
        "Debug server already running",
    ]


def test_run_without_editor_reports_one_error(tmp_path):
    controller, transport, _, notifier, _ = _controller(tmp_path)

    assert controller.execute("run") is None

    assert notifier.errors == ["No file or active editor to act on."]
    assert transport.sent == []


def test_run_sends_focused_buffer(tmp_path):
    controller, transport, workspace, _, _ = _controller(tmp_path)
    workspace.focus(Document("/w/main.js", "log(1)"))

    controller.execute("run")

    assert transport.sent == [
        SentCommand("run", {"id": "/w/main.js", "name": "/w/main.js", "script": "log(1)"})
    ]


def test_run_on_device_remembers_choice(tmp_path):
    controller, transport, workspace, notifier, _ = _controller(tmp_path)
    workspace.focus(Document("/w/main.js", "log(1)"))
    transport.attach(Device("d1", "Pixel"))
    transport.attach(Device("d2", "Tab"))
    notifier.picks = ["Tab: d2"]

    controller.execute("runOnDevice")

    assert transport.sent[0].device_id == "d2"
    assert controller.context.recent_device == RecentDevice("d2")
    assert [d.id for d in controller.uc_select_device.list_ordered()] == ["d2", "d1"]


def test_save_to_device_dismissed_sends_nothing(tmp_path):
    controller, transport, workspace, _, _ = _controller(tmp_path)
    workspace.focus(Document("/w/main.js", "log(1)"))
    transport.attach(Device("d1", "Pixel"))

    controller.execute("saveToDevice")

    assert transport.sent == []


def test_inbound_rerun_flow(tmp_path):
    controller, transport, workspace, _, timers = _controller(tmp_path)
    script = tmp_path / "main.js"
    script.write_text("log(2)", encoding="utf-8")

    controller.handle_event(InboundCommand("rerun", str(script)))
    timers.fire_all()

    assert [s.command for s in transport.sent] == ["stopAll", "run"]
    assert transport.sent[1].payload["script"] == "log(2)"


def test_inbound_save_forwards_project_command(tmp_path):
    controller, transport, *_ = _controller(tmp_path)

    controller.handle_event(InboundCommand("save"))

    assert transport.project_commands == [(str(tmp_path), "save_project")]


def test_inbound_file_lands_in_workspace(tmp_path):
    controller, _, _, notifier, _ = _controller(tmp_path)
    payload = base64.b64encode(b"png-bytes").decode()

    assert controller.handle_event(InboundFile("screenshots/a.png", payload))

    assert (tmp_path / "screenshots" / "a.png").read_bytes() == b"png-bytes"
    assert notifier.infos == ["Received screenshot: screenshots/a.png", "Screenshot saved: screenshots/a.png"]


def test_inbound_file_without_workspace_reports_error(tmp_path):
    controller, _, workspace, notifier, _ = _controller(tmp_path)
    workspace.folders = []

    assert controller.handle_event(InboundFile("a.png", "AAAA")) is False
    assert notifier.errors == ["Please open a workspace folder."]


def test_capture_uses_settings(tmp_path):
    settings = SettingsVM()
    settings.host_address = "192.168.1.50"
    settings.screenshot_dir = "caps"
    controller, transport, _, notifier, _ = _controller(tmp_path, settings_vm=settings)

    filename = controller.execute("captureScreen")

    assert filename == "caps/screenshot_2024-01-02_03-04-05-000Z.png"
    assert "http://192.168.1.50:9317/save" in transport.sent[0].payload["script"]
    assert notifier.infos == ["Capturing screenshot..."]


def test_unexpected_error_is_mapped(tmp_path):
    controller, transport, *_ = _controller(tmp_path)
    notifier = controller.notifier

    def boom():
        raise RuntimeError("kaput")

    transport.listen = boom
    controller.execute("startServer")

    assert notifier.errors == ["Unexpected error: kaput"]


def test_deactivate_releases_everything(tmp_path):
    controller, transport, workspace, notifier, timers = _controller(tmp_path)
    controller.execute("startServer")
    controller.execute("runProject")
    transport.attach(Device("d1", "Pixel"))

    controller.deactivate()
    timers.fire_all()

    assert controller.context.project is None
    assert workspace.watches[0].closed
    assert not transport.listening
    assert not controller.status_vm.running
    assert not any(m.startswith("New device attached") for m in notifier.infos)


def test_device_upload_through_transport_lands_in_workspace(tmp_path):
    controller, transport, _, notifier, _ = _controller(tmp_path)

    transport.device_message("save_file", "/screenshots/b.png", base64.b64encode(b"img").decode())

    assert (tmp_path / "screenshots" / "b.png").read_bytes() == b"img"
    assert notifier.errors == []
