"""Logging setup for the CLI host.

User-visible notices go through the ``scriptbridge.notice`` logger (see
``LogNotifier``); it stays at INFO even when the root logger is quieter so a
headless host still prints every notice once. Environment overrides:

  - SCRIPTBRIDGE_LOG_LEVEL: explicit root level (name or number)
  - SCRIPTBRIDGE_DEBUG: truthy -> DEBUG
"""

from __future__ import annotations

import logging
import os
from typing import Optional

NOTICE_LOGGER = "scriptbridge.notice"

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%H:%M:%S"
_LEVEL_VAR = "SCRIPTBRIDGE_LOG_LEVEL"
_DEBUG_VAR = "SCRIPTBRIDGE_DEBUG"
_UVICORN_LEVELS = ((logging.DEBUG, "debug"), (logging.INFO, "info"), (logging.WARNING, "warning"), (logging.ERROR, "error"))


def _parse_level(text: Optional[str]) -> Optional[int]:
    text = (text or "").strip()
    if not text:
        return None
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else None


def env_level() -> Optional[int]:
    """Level forced by the environment, or None."""
    level = _parse_level(os.getenv(_LEVEL_VAR))
    if level is not None:
        return level
    if (os.getenv(_DEBUG_VAR) or "").strip().lower() in {"1", "true", "yes", "on"}:
        return logging.DEBUG
    return None


def env_forces_debug() -> bool:
    level = env_level()
    return level is not None and level <= logging.DEBUG


def configure_root(default_level: int = logging.INFO) -> int:
    """Install the console handler and return the effective root level."""
    effective = env_level() or default_level
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=effective, format=_FORMAT, datefmt=_DATEFMT)
    root.setLevel(effective)
    _pin_notice_level(effective)
    return effective


def apply_preferences(debug_enabled: bool) -> int:
    """Apply the ``debug_logging`` setting unless the environment overrides it."""
    level = env_level()
    if level is None:
        level = logging.DEBUG if debug_enabled else logging.INFO
    logging.getLogger().setLevel(level)
    _pin_notice_level(level)
    return level


def uvicorn_log_level(level: int) -> str:
    """Map a logging level to the closest name uvicorn accepts."""
    for threshold, name in _UVICORN_LEVELS:
        if level <= threshold:
            return name
    return "critical"


def _pin_notice_level(root_level: int) -> None:
    logging.getLogger(NOTICE_LOGGER).setLevel(min(root_level, logging.INFO))


__all__ = [
    "NOTICE_LOGGER",
    "apply_preferences",
    "configure_root",
    "env_forces_debug",
    "env_level",
    "uvicorn_log_level",
]
