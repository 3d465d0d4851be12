"""Device-to-host transfer: decode a base64 payload into the workspace."""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from pathlib import Path

from scriptbridge.domain.entities import TransferredFile
from scriptbridge.domain.errors import DecodeError, NoWorkspaceOpenError, UnsafePathError
from scriptbridge.domain.ports import NotifierPort, WorkspacePort
from scriptbridge.domain.util import workspace_child
from scriptbridge.usecases.error_mapping import map_error

LOGGER = logging.getLogger(__name__)


def decode_transfer(filename: str, base64_content: str) -> TransferredFile:
    """Decode ``base64_content``; line breaks inserted by device encoders are ignored."""
    compact = "".join((base64_content or "").split())
    try:
        content = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(filename, str(exc)) from exc
    return TransferredFile(filename=filename, content=content)


@dataclass
class ReceiveFile:
    """Use case: persist a device-supplied file under the first workspace folder."""

    workspace: WorkspacePort
    notifier: NotifierPort

    def __call__(self, filename: str, base64_content: str) -> Path:
        """Write the decoded file and open it.

        Args:
            filename: Workspace-relative name chosen by the device.
            base64_content: Encoded file bytes.

        Returns:
            Path: Absolute destination path.

        Raises:
            NoWorkspaceOpenError: No workspace folder is open; nothing written.
            UnsafePathError: ``filename`` escapes the workspace root.
            DecodeError: Payload is not valid base64.
            UseCaseError: ``SAVE_FAILED`` on I/O errors (single attempt,
                a partial file may remain).

        Side Effects:
            Creates missing parent directories and overwrites an existing file
            of the same name.
        """
        folders = self.workspace.workspace_folders()
        if not folders:
            raise NoWorkspaceOpenError()
        destination = workspace_child(folders[0], filename)
        if destination is None:
            raise UnsafePathError(filename)

        transferred = decode_transfer(filename, base64_content)
        try:
            self.workspace.write_bytes(destination, transferred.content)
        except Exception as exc:
            raise map_error(exc, default_code="SAVE_FAILED", default_message="Failed to save file") from exc

        LOGGER.info("Saved %d bytes to %s", len(transferred.content), destination)
        self.notifier.info(f"Screenshot saved: {filename}")
        self.workspace.open_file(destination)
        return destination


__all__ = ["ReceiveFile", "decode_transfer"]
