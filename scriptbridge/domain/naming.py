"""Naming helpers for files authored on behalf of devices."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

CAPTURE_SCRIPT_NAME = "CaptureScreen.js"
DEFAULT_SCREENSHOT_DIR = "screenshots"


def _format_capture_timestamp(now: datetime) -> str:
    """Format as ``YYYY-MM-DD_HH-MM-SS-mmmZ`` in UTC."""

    dt_utc = now.astimezone(timezone.utc)
    millis = dt_utc.microsecond // 1000
    return dt_utc.strftime("%Y-%m-%d_%H-%M-%S") + f"-{millis:03d}Z"


def make_capture_filename(
    now: Optional[datetime] = None,
    directory: str = DEFAULT_SCREENSHOT_DIR,
) -> str:
    """Compose the workspace-relative screenshot path ``{dir}/screenshot_{ts}.png``."""

    stamp = _format_capture_timestamp(now or datetime.now(timezone.utc))
    folder = directory.strip().strip("/") or DEFAULT_SCREENSHOT_DIR
    return f"{folder}/screenshot_{stamp}.png"


__all__ = ["CAPTURE_SCRIPT_NAME", "DEFAULT_SCREENSHOT_DIR", "make_capture_filename"]
