from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from scriptbridge.domain.ports import NotifierPort
from scriptbridge.utils.logging import NOTICE_LOGGER


class LogNotifier(NotifierPort):
    """Headless notifier: notices go to the log, quick picks are dismissed."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._log = logger or logging.getLogger(NOTICE_LOGGER)
        self.messages: List[str] = []

    def info(self, message: str) -> None:
        self.messages.append(message)
        self._log.info(message)

    def error(self, message: str) -> None:
        self.messages.append(message)
        self._log.error(message)

    def quick_pick(self, items: Sequence[str]) -> Optional[str]:
        self._log.info("Selection needed (%d choices); no interactive prompt available", len(items))
        return None
