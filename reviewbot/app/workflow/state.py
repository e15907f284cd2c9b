"""
Workflow state and its transition function.

Every mutation of the workflow goes through `reduce`, which is pure: given
the current `WorkflowState` and one event it returns the next state. The
controller owns the single live state value and the side effects (remote
calls, cooldown timer, notices).

Guards:
- a request may be dispatched only when the session is LOGGED_IN, nothing is
  in flight and no cooldown is active;
- an optimize request additionally needs a CLEAN report from the service.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Union

from reviewbot.app.models import (
    AuditReport,
    CooldownState,
    FailureKind,
    OptimizationResult,
    RequestKind,
    SessionState,
)


@dataclass(frozen=True)
class WorkflowState:
    session: SessionState = SessionState.LOGGED_OUT
    in_flight: RequestKind = RequestKind.NONE
    cooldown: CooldownState = CooldownState()
    report: Optional[AuditReport] = None
    optimization: Optional[OptimizationResult] = None
    request_seq: int = 0
    last_failure: Optional[FailureKind] = None


@dataclass(frozen=True)
class SessionChanged:
    session: SessionState


@dataclass(frozen=True)
class RequestDispatched:
    kind: RequestKind
    seq: int


@dataclass(frozen=True)
class AuditCompleted:
    report: AuditReport
    seq: int


@dataclass(frozen=True)
class OptimizeCompleted:
    result: OptimizationResult
    seq: int


@dataclass(frozen=True)
class QuotaReached:
    kind: RequestKind
    seconds: int
    seq: int


@dataclass(frozen=True)
class RequestFailed:
    kind: RequestKind
    failure: FailureKind
    seq: int


@dataclass(frozen=True)
class RequestAbandoned:
    kind: RequestKind
    seq: int


@dataclass(frozen=True)
class CooldownTicked:
    remaining_seconds: int


@dataclass(frozen=True)
class CooldownExpired:
    pass


WorkflowEvent = Union[
    SessionChanged,
    RequestDispatched,
    AuditCompleted,
    OptimizeCompleted,
    QuotaReached,
    RequestFailed,
    RequestAbandoned,
    CooldownTicked,
    CooldownExpired,
]


def can_dispatch(state: WorkflowState) -> bool:
    return (
        state.session == SessionState.LOGGED_IN
        and state.in_flight == RequestKind.NONE
        and not state.cooldown.active
    )


def can_optimize(state: WorkflowState) -> bool:
    report = state.report
    return can_dispatch(state) and report is not None and report.is_clean and not report.is_synthetic


def reduce(state: WorkflowState, ev: WorkflowEvent) -> WorkflowState:
    if isinstance(ev, SessionChanged):
        return replace(state, session=ev.session)

    if isinstance(ev, RequestDispatched):
        if ev.kind == RequestKind.NONE:
            raise ValueError("cannot dispatch RequestKind.NONE")
        if ev.kind == RequestKind.AUDIT:
            # optimized code belongs to the previous audit
            return replace(state, in_flight=ev.kind, request_seq=ev.seq, optimization=None, last_failure=None)
        return replace(state, in_flight=ev.kind, request_seq=ev.seq, last_failure=None)

    if isinstance(ev, AuditCompleted):
        return replace(state, in_flight=RequestKind.NONE, report=ev.report)

    if isinstance(ev, OptimizeCompleted):
        return replace(state, in_flight=RequestKind.NONE, optimization=ev.result)

    if isinstance(ev, QuotaReached):
        cooldown = CooldownState.counting(ev.seconds)
        if ev.kind == RequestKind.AUDIT:
            return replace(
                state,
                in_flight=RequestKind.NONE,
                cooldown=cooldown,
                report=AuditReport.quota_reached(ev.seconds),
                last_failure=FailureKind.QUOTA_EXCEEDED,
            )
        return replace(
            state,
            in_flight=RequestKind.NONE,
            cooldown=cooldown,
            last_failure=FailureKind.QUOTA_EXCEEDED,
        )

    if isinstance(ev, RequestFailed):
        if ev.kind == RequestKind.AUDIT:
            return replace(state, in_flight=RequestKind.NONE, report=None, last_failure=ev.failure)
        return replace(state, in_flight=RequestKind.NONE, last_failure=ev.failure)

    if isinstance(ev, RequestAbandoned):
        return replace(state, in_flight=RequestKind.NONE)

    if isinstance(ev, CooldownTicked):
        return replace(state, cooldown=CooldownState.counting(ev.remaining_seconds))

    if isinstance(ev, CooldownExpired):
        return replace(state, cooldown=CooldownState.idle())

    raise TypeError(f"unknown workflow event: {ev!r}")


__all__ = [
    "WorkflowState",
    "WorkflowEvent",
    "SessionChanged",
    "RequestDispatched",
    "AuditCompleted",
    "OptimizeCompleted",
    "QuotaReached",
    "RequestFailed",
    "RequestAbandoned",
    "CooldownTicked",
    "CooldownExpired",
    "can_dispatch",
    "can_optimize",
    "reduce",
]
