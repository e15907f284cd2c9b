from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, List, Optional

from reviewbot.app.config import safe_dict
from reviewbot.app.models import FailureKind, Notice

logger = logging.getLogger(__name__)

AUTH_RETRY_MESSAGE = "System is waking up. Please retry in ~30 seconds."
TRANSPORT_FAILURE_MESSAGE = "Could not reach the analysis service. Please retry."
SERVER_FAILURE_MESSAGE = "The analysis service returned an unexpected response. Please retry."
SHARE_FAILURE_MESSAGE = "Unable to share or copy the report."

Notifier = Callable[[Notice], None]


def message_for(kind: FailureKind) -> str:
    if kind == FailureKind.AUTH_FAILURE:
        return AUTH_RETRY_MESSAGE
    if kind == FailureKind.TRANSPORT_FAILURE:
        return TRANSPORT_FAILURE_MESSAGE
    if kind == FailureKind.QUOTA_EXCEEDED:
        return "Quota reached. Requests are paused until the cooldown ends."
    if kind == FailureKind.PLATFORM_FAILURE:
        return SHARE_FAILURE_MESSAGE
    return SERVER_FAILURE_MESSAGE


def log_notifier(notice: Notice) -> None:
    logger.warning("[NOTICE] %s", notice.message, extra={"kind": notice.kind.value, "details": safe_dict(notice.details)})


class NoticeBoard:
    """Keeps the most recent user-facing notices for polling surfaces."""

    def __init__(self, capacity: int = 10, forward: Optional[Notifier] = log_notifier) -> None:
        self._items: Deque[Notice] = deque(maxlen=max(1, capacity))
        self._forward = forward

    def __call__(self, notice: Notice) -> None:
        self._items.append(notice)
        if self._forward is not None:
            self._forward(notice)

    @property
    def latest(self) -> Optional[Notice]:
        return self._items[-1] if self._items else None

    def items(self) -> List[Notice]:
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()


__all__ = [
    "AUTH_RETRY_MESSAGE",
    "TRANSPORT_FAILURE_MESSAGE",
    "SERVER_FAILURE_MESSAGE",
    "SHARE_FAILURE_MESSAGE",
    "Notifier",
    "NoticeBoard",
    "log_notifier",
    "message_for",
]
