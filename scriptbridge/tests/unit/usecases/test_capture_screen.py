import json
import re
from datetime import datetime, timezone

import pytest

from scriptbridge.adapters.notifier_log import LogNotifier
from scriptbridge.adapters.transport_memory import InMemoryTransport
from scriptbridge.adapters.workspace_fs import FilesystemWorkspace
from scriptbridge.domain.ports import UseCaseError
from scriptbridge.usecases.capture_screen import (
    CaptureScreen,
    build_capture_script,
    validate_host,
    validate_port,
)
from scriptbridge.usecases.resolve_target import ResolveTarget
from scriptbridge.usecases.send_command import SendCommand

NOW = datetime(2024, 5, 6, 7, 8, 9, 10_000, tzinfo=timezone.utc)


def _capture(transport):
    send = SendCommand(transport, ResolveTarget(FilesystemWorkspace()))
    return CaptureScreen(transport, send, LogNotifier(), clock=lambda: NOW)


def test_script_posts_to_save_endpoint():
    script = build_capture_script("192.168.1.20", 9317, "screenshots/a.png")
    assert 'var serverUrl = "http://192.168.1.20:9317/save";' in script
    assert 'var filename = "screenshots/a.png";' in script
    assert "$" not in script


def test_filename_is_escaped_as_literal():
    name = 'shots/a";exit();"b.png'
    script = build_capture_script("host.local", 80, name)
    line = next(l for l in script.splitlines() if l.startswith("var filename"))
    assert json.loads(line[len("var filename = "):-1]) == name


def test_ipv6_host_is_bracketed():
    assert validate_host("::1") == "[::1]"
    assert validate_host("raspberrypi.local") == "raspberrypi.local"


@pytest.mark.parametrize("host", ["", "bad host", "evil\";x", "-lead.example"])
def test_invalid_hosts(host):
    with pytest.raises(UseCaseError) as info:
        validate_host(host)
    assert info.value.code == "INVALID_ADDRESS"


@pytest.mark.parametrize("port", [0, 70000, "abc", True, None])
def test_invalid_ports(port):
    with pytest.raises(UseCaseError):
        validate_port(port)


def test_capture_sends_run_to_all_devices():
    transport = InMemoryTransport(server_port=9400, addresses=["10.0.0.2", "10.0.0.3"])

    filename = _capture(transport)()

    assert filename == "screenshots/screenshot_2024-05-06_07-08-09-010Z.png"
    sent = transport.sent[0]
    assert sent.command == "run"
    assert sent.device_id is None
    assert sent.payload["id"] == sent.payload["name"] == "CaptureScreen.js"
    assert "http://10.0.0.2:9400/save" in sent.payload["script"]
    assert json.dumps(filename) in sent.payload["script"]


def test_configured_host_and_dir_win():
    transport = InMemoryTransport()
    filename = _capture(transport)(host_address="192.168.0.9", screenshot_dir="caps")
    assert re.match(r"^caps/screenshot_.*\.png$", filename)
    assert "http://192.168.0.9:9317/save" in transport.sent[0].payload["script"]


def test_no_host_address():
    transport = InMemoryTransport(addresses=[])
    with pytest.raises(UseCaseError) as info:
        _capture(transport)()
    assert info.value.code == "NO_HOST_ADDRESS"
    assert transport.sent == []
