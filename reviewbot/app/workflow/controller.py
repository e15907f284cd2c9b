from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Protocol, Union

from reviewbot.app.cooldown import CooldownTimer, Scheduler
from reviewbot.app.gateway.outcomes import (
    AuditOutcome,
    OptimizeOutcome,
    QuotaExceeded,
    ServerFailure,
    Success,
    TransportFailure,
    outcome_label,
)
from reviewbot.app.models import CooldownState, FailureKind, Notice, RequestKind, SessionState
from reviewbot.app.notices import Notifier, log_notifier, message_for
from reviewbot.app.observability import event
from reviewbot.app.session import SessionController
from reviewbot.app.workflow.state import (
    AuditCompleted,
    CooldownExpired,
    CooldownTicked,
    OptimizeCompleted,
    QuotaReached,
    RequestAbandoned,
    RequestDispatched,
    RequestFailed,
    SessionChanged,
    WorkflowEvent,
    WorkflowState,
    can_dispatch,
    can_optimize,
    reduce,
)

logger = logging.getLogger(__name__)

DEFAULT_QUOTA_COOLDOWN_SECONDS = 60

StateListener = Callable[[WorkflowState], None]


class AnalysisService(Protocol):
    def audit(self, code: str) -> Awaitable[AuditOutcome]: ...

    def optimize(self, code: str) -> Awaitable[OptimizeOutcome]: ...


class WorkflowController:
    """Accepts audit/optimize requests and applies their outcomes.

    At most one remote call is outstanding: the in-flight slot is claimed
    before the first suspension point, so a second request issued while the
    first is pending is ignored rather than queued. Requests are also ignored
    while the session is closed or a quota cooldown is counting down.
    """

    def __init__(
        self,
        service: AnalysisService,
        session: SessionController,
        *,
        scheduler: Scheduler,
        notifier: Optional[Notifier] = None,
        quota_cooldown_seconds: int = DEFAULT_QUOTA_COOLDOWN_SECONDS,
        surface_optimize_failures: bool = False,
    ) -> None:
        self._service = service
        self._notifier = notifier or log_notifier
        self._quota_cooldown_seconds = quota_cooldown_seconds
        self._surface_optimize_failures = surface_optimize_failures
        self._listeners: List[StateListener] = []
        self._state = WorkflowState(session=session.state)
        self._timer = CooldownTimer(
            scheduler,
            on_tick=self._on_cooldown_tick,
            on_expire=self._on_cooldown_expired,
        )
        session.add_listener(self._on_session_changed)

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def cooldown_timer(self) -> CooldownTimer:
        return self._timer

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def can_request_audit(self) -> bool:
        return can_dispatch(self._state)

    def can_request_optimize(self) -> bool:
        return can_optimize(self._state)

    async def request_audit(self, code: str) -> bool:
        if not can_dispatch(self._state):
            self._log_ignored(RequestKind.AUDIT)
            return False
        seq = self._claim(RequestKind.AUDIT)
        outcome = await self._call(RequestKind.AUDIT, seq, self._service.audit, code)

        if isinstance(outcome, Success):
            self._dispatch(AuditCompleted(report=outcome.value, seq=seq))
        elif isinstance(outcome, QuotaExceeded):
            self._enter_cooldown(RequestKind.AUDIT, seq)
        else:
            self._dispatch(RequestFailed(kind=RequestKind.AUDIT, failure=outcome.kind, seq=seq))
            self._surface(outcome)
        return True

    async def request_optimize(self, code: str) -> bool:
        if not can_optimize(self._state):
            self._log_ignored(RequestKind.OPTIMIZE)
            return False
        seq = self._claim(RequestKind.OPTIMIZE)
        outcome = await self._call(RequestKind.OPTIMIZE, seq, self._service.optimize, code)

        if isinstance(outcome, Success):
            self._dispatch(OptimizeCompleted(result=outcome.value, seq=seq))
        elif isinstance(outcome, QuotaExceeded):
            self._enter_cooldown(RequestKind.OPTIMIZE, seq)
        else:
            self._dispatch(RequestFailed(kind=RequestKind.OPTIMIZE, failure=outcome.kind, seq=seq))
            if self._surface_optimize_failures:
                self._surface(outcome)
            else:
                logger.warning(
                    "[WORKFLOW] optimize failed",
                    extra={"seq": seq, "outcome": outcome_label(outcome), "reason": outcome.reason},
                )
        return True

    def reset_cooldown(self) -> None:
        self._timer.cancel()
        if self._state.cooldown.active:
            self._dispatch(CooldownExpired())

    def _claim(self, kind: RequestKind) -> int:
        seq = self._state.request_seq + 1
        self._dispatch(RequestDispatched(kind=kind, seq=seq))
        event("workflow.dispatch", {"kind": kind.value, "seq": seq})
        return seq

    async def _call(
        self,
        kind: RequestKind,
        seq: int,
        fn: Callable[[str], Awaitable[Union[AuditOutcome, OptimizeOutcome]]],
        code: str,
    ) -> Union[AuditOutcome, OptimizeOutcome]:
        try:
            outcome = await fn(code)
        except asyncio.CancelledError:
            self._dispatch(RequestAbandoned(kind=kind, seq=seq))
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("[WORKFLOW] %s call raised", kind.value.lower(), extra={"seq": seq})
            outcome = ServerFailure(reason=f"unexpected error: {exc.__class__.__name__}")
        event("workflow.outcome", {"kind": kind.value, "seq": seq, "outcome": outcome_label(outcome)})
        return outcome

    def _enter_cooldown(self, kind: RequestKind, seq: int) -> None:
        seconds = self._quota_cooldown_seconds
        self._dispatch(QuotaReached(kind=kind, seconds=seconds, seq=seq))
        self._timer.start(seconds)

    def _surface(self, outcome: Union[TransportFailure, ServerFailure]) -> None:
        kind: FailureKind = outcome.kind
        self._notifier(Notice(kind=kind, message=message_for(kind), details={"reason": outcome.reason}))

    def _on_session_changed(self, session: SessionState) -> None:
        self._dispatch(SessionChanged(session=session))

    def _on_cooldown_tick(self, cooldown: CooldownState) -> None:
        self._dispatch(CooldownTicked(remaining_seconds=cooldown.remaining_seconds))

    def _on_cooldown_expired(self) -> None:
        self._dispatch(CooldownExpired())

    def _dispatch(self, ev: WorkflowEvent) -> None:
        self._state = reduce(self._state, ev)
        for listener in list(self._listeners):
            listener(self._state)

    def _log_ignored(self, kind: RequestKind) -> None:
        s = self._state
        logger.debug(
            "[WORKFLOW] %s request ignored",
            kind.value.lower(),
            extra={
                "session": s.session.value,
                "in_flight": s.in_flight.value,
                "cooldown_remaining": s.cooldown.remaining_seconds,
            },
        )


__all__ = ["AnalysisService", "DEFAULT_QUOTA_COOLDOWN_SECONDS", "StateListener", "WorkflowController"]
