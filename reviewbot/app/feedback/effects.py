from __future__ import annotations

import logging
from typing import Callable, Optional

from reviewbot.app.cooldown import Handle, Scheduler
from reviewbot.app.feedback.platform import Clipboard, PlatformEffectError, ShareTarget
from reviewbot.app.models import AuditReport, EphemeralFeedback, FailureKind, Notice, OptimizationResult
from reviewbot.app.notices import SHARE_FAILURE_MESSAGE, Notifier, log_notifier
from reviewbot.app.observability import event

logger = logging.getLogger(__name__)

COPY_FEEDBACK_SECONDS = 2.0
SHARE_TITLE = "Review-Bot audit"

OptimizationSource = Callable[[], Optional[OptimizationResult]]
ReportSource = Callable[[], Optional[AuditReport]]


def format_report_summary(report: AuditReport, page_url: str) -> str:
    lines = [
        SHARE_TITLE,
        f"Status: {report.status.value}",
        f"Complexity: {report.complexity_estimate or 'n/a'}",
        f"Hint: {report.hint or 'n/a'}",
    ]
    if page_url:
        lines.append(page_url)
    return "\n".join(lines)


class FeedbackEffects:
    """Copy and share actions with a self-expiring "copied" acknowledgement.

    A successful copy raises `copied` and schedules it to drop after
    `reset_seconds`; a later copy cancels the pending reset and starts a
    fresh window, so only one reset is ever pending.
    """

    def __init__(
        self,
        *,
        scheduler: Scheduler,
        optimization_source: OptimizationSource,
        report_source: ReportSource,
        clipboard: Optional[Clipboard] = None,
        share_target: Optional[ShareTarget] = None,
        page_url: str = "",
        notifier: Optional[Notifier] = None,
        reset_seconds: float = COPY_FEEDBACK_SECONDS,
    ) -> None:
        self._scheduler = scheduler
        self._optimization_source = optimization_source
        self._report_source = report_source
        self._clipboard = clipboard
        self._share_target = share_target
        self._page_url = page_url
        self._notifier = notifier or log_notifier
        self._reset_seconds = reset_seconds
        self._feedback = EphemeralFeedback()
        self._reset_handle: Optional[Handle] = None

    @property
    def feedback(self) -> EphemeralFeedback:
        return self._feedback

    @property
    def copied(self) -> bool:
        return self._feedback.copied

    async def copy_optimized_code(self) -> bool:
        result = self._optimization_source()
        if result is None:
            return False
        if self._clipboard is None:
            logger.warning("[FEEDBACK] clipboard unavailable")
            return False
        try:
            await self._clipboard.write_text(result.rewritten_code)
        except PlatformEffectError as exc:
            logger.warning("[FEEDBACK] copy failed", extra={"error": exc.__class__.__name__})
            event("feedback.copy", {"ok": False})
            return False

        self._feedback = EphemeralFeedback(copied=True)
        if self._reset_handle is not None:
            self._reset_handle.cancel()
        self._reset_handle = self._scheduler.call_later(self._reset_seconds, self._reset_copied)
        event("feedback.copy", {"ok": True})
        return True

    async def share_report(self) -> bool:
        report = self._report_source()
        if report is None:
            return False
        summary = format_report_summary(report, self._page_url)

        if self._share_target is not None:
            try:
                await self._share_target.share(title=SHARE_TITLE, text=summary, url=self._page_url)
            except PlatformEffectError as exc:
                logger.info("[FEEDBACK] native share failed, falling back to clipboard", extra={"error": exc.__class__.__name__})
            else:
                event("feedback.share", {"via": "native", "ok": True})
                return True

        if self._clipboard is not None:
            try:
                await self._clipboard.write_text(summary)
            except PlatformEffectError as exc:
                logger.warning("[FEEDBACK] clipboard fallback failed", extra={"error": exc.__class__.__name__})
            else:
                event("feedback.share", {"via": "clipboard", "ok": True})
                return True

        event("feedback.share", {"via": "none", "ok": False})
        self._notifier(Notice(kind=FailureKind.PLATFORM_FAILURE, message=SHARE_FAILURE_MESSAGE))
        return False

    def _reset_copied(self) -> None:
        self._reset_handle = None
        self._feedback = EphemeralFeedback(copied=False)


__all__ = ["COPY_FEEDBACK_SECONDS", "SHARE_TITLE", "FeedbackEffects", "format_report_summary"]
