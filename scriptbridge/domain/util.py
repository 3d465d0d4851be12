from __future__ import annotations

import os
import posixpath
import re
from pathlib import Path
from typing import Optional, Union
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

_DRIVE = re.compile(r"^[A-Za-z]:")


def address_to_path(address: Union[str, Path]) -> Path:
    """
    Convert an editor address (``file://`` URI or plain path) to a filesystem path.

    Non-file URIs keep their path component, matching how editors expose
    ``Uri.fsPath`` for them.
    """
    if isinstance(address, Path):
        return address
    text = address.strip()
    parsed = urlparse(text)
    if parsed.scheme and len(parsed.scheme) > 1:
        path = url2pathname(unquote(parsed.path))
        if parsed.netloc and parsed.scheme == "file":
            path = f"//{parsed.netloc}{path}"
        return Path(path)
    return Path(text)


def normalize_folder(folder: Union[str, Path]) -> Path:
    """Return an absolute, normalized folder path used for identity checks."""
    return Path(os.path.normpath(os.path.abspath(str(address_to_path(folder)))))


def workspace_child(root: Path, relative: str) -> Optional[Path]:
    """
    Join a device-supplied name under ``root`` the way a path join would.

    Leading separators are dropped and ``.``/``..`` segments are collapsed,
    so ``/shots/x.png`` and ``shots/../x.png`` stay inside ``root``. Returns
    None when the normalized name is empty, names a drive, or still leaves
    ``root`` (checked on resolved paths, so symlinks count).
    """
    text = relative.replace("\\", "/").lstrip("/")
    if not text or _DRIVE.match(text):
        return None
    normalized = posixpath.normpath(text)
    if normalized in (".", "..") or normalized.startswith("../"):
        return None
    destination = root.joinpath(*normalized.split("/"))
    base = Path(root).resolve()
    if os.path.commonpath([str(base), str(destination.resolve())]) != str(base):
        return None
    return destination


__all__ = ["address_to_path", "normalize_folder", "workspace_child"]
