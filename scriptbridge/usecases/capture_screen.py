"""Screenshot capture: author a device-side script and send it as a ``run``."""

from __future__ import annotations

import ipaddress
import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from string import Template
from typing import Any, Callable

from scriptbridge.domain.entities import Command, CommandName
from scriptbridge.domain.naming import CAPTURE_SCRIPT_NAME, DEFAULT_SCREENSHOT_DIR, make_capture_filename
from scriptbridge.domain.ports import NotifierPort, TransportPort, UseCaseError
from scriptbridge.usecases.send_command import SendCommand

LOGGER = logging.getLogger(__name__)

_HOSTNAME_LABEL = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")

# Values are substituted as JSON literals, never spliced into raw text.
_CAPTURE_TEMPLATE = Template(
    """var serverUrl = $server_url;
var filename = $filename;

console.log("Starting screenshot capture...");

if (!requestScreenCapture()) {
  console.error("Failed to request screen capture permission");
  toast("Screen capture permission denied");
  exit();
}

var img = captureScreen();
if (!img) {
  console.error("Failed to capture screenshot");
  toast("Screenshot failed");
  exit();
}

var base64 = images.toBase64(img, "png", 100);
if (!base64) {
  console.error("Failed to convert image to base64");
  toast("Image conversion failed");
  img.recycle();
  exit();
}
console.log("Image converted, size: " + base64.length + " characters");

console.log("Sending to server: " + serverUrl);
try {
  var response = http.postJson(serverUrl, {
    filename: filename,
    content: base64
  });
  console.log("Server response status: " + response.statusCode);
  if (response.statusCode == 200) {
    console.log("Screenshot saved: " + filename);
    toast("Screenshot saved");
  } else {
    console.error("Failed to save screenshot: " + response.statusCode);
    toast("Save failed");
  }
} catch (error) {
  console.error("Failed to send to server: " + error);
  toast("Send failed: " + error);
}

img.recycle();
console.log("Screenshot process completed");
"""
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_host(host: str) -> str:
    """Return ``host`` formatted for a URL authority.

    Accepts IPv4/IPv6 literals and RFC 1123 host names; IPv6 is bracketed.

    Raises:
        UseCaseError: ``INVALID_ADDRESS`` for anything else.
    """
    text = (host or "").strip()
    try:
        address = ipaddress.ip_address(text.strip("[]"))
    except ValueError:
        labels = text.rstrip(".").split(".")
        if text and len(text) <= 253 and all(_HOSTNAME_LABEL.match(label) for label in labels):
            return text
        raise UseCaseError("INVALID_ADDRESS", f"Invalid server address: {host!r}")
    if address.version == 6:
        return f"[{address.compressed}]"
    return address.compressed


def validate_port(port: Any) -> int:
    if isinstance(port, bool):
        raise UseCaseError("INVALID_ADDRESS", f"Invalid server port: {port!r}")
    try:
        value = int(port)
    except (TypeError, ValueError):
        raise UseCaseError("INVALID_ADDRESS", f"Invalid server port: {port!r}") from None
    if not 1 <= value <= 65535:
        raise UseCaseError("INVALID_ADDRESS", f"Invalid server port: {port!r}")
    return value


def build_capture_script(host: str, port: Any, filename: str) -> str:
    """Render the device-side script that captures, encodes, and POSTs back.

    Pure: no capture happens here. The script posts
    ``{"filename": ..., "content": <base64>}`` to ``http://host:port/save``.
    """
    server_url = f"http://{validate_host(host)}:{validate_port(port)}/save"
    return _CAPTURE_TEMPLATE.substitute(
        server_url=json.dumps(server_url),
        filename=json.dumps(filename),
    )


@dataclass
class CaptureScreen:
    """Use case: send the capture script to every attached device."""

    transport: TransportPort
    send: SendCommand
    notifier: NotifierPort
    clock: Callable[[], datetime] = _utcnow

    def __call__(
        self,
        *,
        host_address: str = "",
        screenshot_dir: str = DEFAULT_SCREENSHOT_DIR,
    ) -> str:
        """Send the script and return the filename the device will upload.

        Args:
            host_address: Configured address; empty picks the transport's
                first host address.
            screenshot_dir: Workspace-relative folder for the capture.

        Raises:
            UseCaseError: ``NO_HOST_ADDRESS`` or ``INVALID_ADDRESS``.
        """
        host = host_address.strip()
        if not host:
            addresses = self.transport.host_addresses()
            if not addresses:
                raise UseCaseError("NO_HOST_ADDRESS", "Could not determine the server address.")
            host = addresses[0]
        filename = make_capture_filename(self.clock(), screenshot_dir)
        script = build_capture_script(host, self.transport.port, filename)
        command = Command(
            cmd=CommandName.RUN,
            id=CAPTURE_SCRIPT_NAME,
            name=CAPTURE_SCRIPT_NAME,
            script=script,
        )
        self.send.dispatch(command)
        LOGGER.info("Requested screenshot %s via %s", filename, host)
        self.notifier.info("Capturing screenshot...")
        return filename


__all__ = ["CaptureScreen", "build_capture_script", "validate_host", "validate_port"]
