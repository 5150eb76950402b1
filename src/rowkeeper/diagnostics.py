"""Non-fatal diagnostic sink for lifecycle inconsistencies."""
from __future__ import annotations

import logging
from collections import deque

from rowkeeper.errors import InconsistentState, RowKeeperError

logger = logging.getLogger(__name__)


class Diagnostics:
    """Collects programmer-error reports without aborting the operation.

    Every report is logged at ERROR level and kept in ``messages`` (bounded).
    With ``strict=True`` the report is raised instead, turning the
    log-and-continue policy into a hard failure.
    """

    def __init__(self, strict: bool = False, keep: int = 100) -> None:
        self.strict = strict
        self.messages: deque[str] = deque(maxlen=keep)

    def report(
        self, message: str, error_type: type[RowKeeperError] = InconsistentState,
    ) -> None:
        self.messages.append(message)
        logger.error("%s: %s", error_type.__name__, message)
        if self.strict:
            raise error_type(message)

    def clear(self) -> None:
        self.messages.clear()
