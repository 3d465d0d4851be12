import logging

import pytest

from scriptbridge.adapters.transport_memory import InMemoryTransport, SentCommand
from scriptbridge.adapters.workspace_fs import FilesystemWorkspace
from scriptbridge.domain.entities import Command, CommandName, Device, Document
from scriptbridge.domain.errors import NoActiveTargetError
from scriptbridge.domain.ports import UseCaseError
from scriptbridge.usecases.resolve_target import ResolveTarget
from scriptbridge.usecases.send_command import SendCommand


class _FailingTransport(InMemoryTransport):
    def send_command(self, command, payload=None, *, device_id=None):
        raise ConnectionError("socket closed")


def _use_case(transport):
    workspace = FilesystemWorkspace()
    workspace.focus(Document("/w/main.js", "log(1)"))
    return SendCommand(transport, ResolveTarget(workspace))


def test_run_broadcasts_active_document():
    transport = InMemoryTransport()

    command = _use_case(transport)("run")

    assert command == Command(CommandName.RUN, id="/w/main.js", name="/w/main.js", script="log(1)")
    assert transport.sent == [
        SentCommand("run", {"id": "/w/main.js", "name": "/w/main.js", "script": "log(1)"}, None)
    ]


def test_stop_sends_filename_only():
    transport = InMemoryTransport()
    _use_case(transport)("stop")
    assert transport.sent == [SentCommand("stop", {"id": "/w/main.js"}, None)]


def test_stop_all_needs_no_editor():
    transport = InMemoryTransport()
    SendCommand(transport, ResolveTarget(FilesystemWorkspace()))("stopAll")
    assert transport.sent == [SentCommand("stopAll", {}, None)]


def test_stop_without_editor_raises():
    with pytest.raises(NoActiveTargetError):
        SendCommand(InMemoryTransport(), ResolveTarget(FilesystemWorkspace()))("stop")


def test_device_send_targets_live_device():
    transport = InMemoryTransport()
    transport.attach(Device("d1", "Pixel"))

    _use_case(transport)("save", device=Device("d1", "Pixel"))

    assert transport.sent[0].device_id == "d1"
    assert transport.sent[0].command == "save"


def test_device_gone_before_send():
    transport = InMemoryTransport()

    with pytest.raises(UseCaseError) as info:
        _use_case(transport)("run", device=Device("d1", "Pixel"))

    assert info.value.code == "DEVICE_GONE"
    assert transport.sent == []


def test_send_failure_is_logged_not_raised(caplog):
    with caplog.at_level(logging.ERROR):
        assert _use_case(_FailingTransport())("run") is None
    assert "Sending 'run' failed: socket closed" in caplog.text
