"""Keyed one-shot timers for debounce and delayed follow-up commands.

Callers pass in ``schedule``/``cancel`` callables (an event loop's
``call_later`` or a test fake) so timer state is tracked in one place and can
be cancelled safely on shutdown.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from scriptbridge.domain.ports import CancelFn, ScheduleFn

LOGGER = logging.getLogger(__name__)


@dataclass
class TimerHandle:
    """Timer token associated with a single key.

    Attributes:
        key: Channel key such as ``announce:<device id>`` or ``rerun``.
        token: Token returned by the underlying scheduler.
    """
    key: str
    token: Any


class Scheduler:
    """Manage keyed one-shot timers on top of a schedule/cancel pair."""

    def __init__(self, schedule: ScheduleFn, cancel: CancelFn) -> None:
        self._schedule = schedule
        self._cancel = cancel
        self._handles: Dict[str, TimerHandle] = {}

    def schedule(self, key: str, delay_ms: int, callback: Callable[[], None]) -> None:
        """Schedule ``callback`` under ``key``, replacing a pending one."""
        delay = max(0, int(delay_ms))
        self.cancel(key)
        handle = TimerHandle(key=key, token=None)

        def _fire() -> None:
            if self._handles.get(key) is not handle:
                return
            del self._handles[key]
            callback()

        self._handles[key] = handle
        handle.token = self._schedule(delay, _fire)

    def cancel(self, key: str) -> None:
        handle = self._handles.pop(key, None)
        if not handle:
            return
        try:
            self._cancel(handle.token)
        except Exception:
            LOGGER.debug("Cancelling timer %s failed", key, exc_info=True)

    def cancel_all(self) -> None:
        for key in list(self._handles.keys()):
            self.cancel(key)

    def pending(self, key: str) -> bool:
        return key in self._handles


def loop_timers(loop: Optional[asyncio.AbstractEventLoop] = None) -> Tuple[ScheduleFn, CancelFn]:
    """Return schedule/cancel functions backed by an asyncio event loop.

    Without ``loop`` the running loop is looked up on each call, so every
    callback runs on the loop thread.
    """

    def schedule(delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        target = loop or asyncio.get_running_loop()
        return target.call_later(delay_ms / 1000.0, callback)

    def cancel(handle: asyncio.TimerHandle) -> None:
        handle.cancel()

    return schedule, cancel


__all__ = ["Scheduler", "TimerHandle", "loop_timers"]
