from dataclasses import replace

import pytest

from reviewbot.app.models import (
    QUOTA_REACHED_ISSUE,
    AuditReport,
    CooldownState,
    FailureKind,
    ReportOrigin,
    ReportStatus,
    RequestKind,
    SessionState,
)
from reviewbot.app.workflow import (
    AuditCompleted,
    CooldownExpired,
    CooldownTicked,
    OptimizeCompleted,
    QuotaReached,
    RequestAbandoned,
    RequestDispatched,
    RequestFailed,
    SessionChanged,
    WorkflowState,
    can_dispatch,
    can_optimize,
    reduce,
)
from reviewbot.tests._fakes import CLEAN_REPORT, FLAGGED_REPORT, REWRITE

READY = WorkflowState(session=SessionState.LOGGED_IN)

PRIOR_STATES = [
    READY,
    replace(READY, report=CLEAN_REPORT),
    replace(READY, report=CLEAN_REPORT, optimization=REWRITE),
    replace(READY, report=FLAGGED_REPORT, optimization=REWRITE, request_seq=7),
    replace(READY, report=AuditReport.quota_reached(60), optimization=REWRITE),
]


def test_guard_requires_login_idle_and_no_cooldown():
    assert can_dispatch(READY)
    assert not can_dispatch(WorkflowState())
    assert not can_dispatch(replace(READY, session=SessionState.AUTHENTICATING))
    assert not can_dispatch(replace(READY, in_flight=RequestKind.AUDIT))
    assert not can_dispatch(replace(READY, in_flight=RequestKind.OPTIMIZE))
    assert not can_dispatch(replace(READY, cooldown=CooldownState.counting(5)))


def test_optimize_guard_needs_remote_clean_report():
    assert not can_optimize(READY)
    assert not can_optimize(replace(READY, report=FLAGGED_REPORT))
    assert not can_optimize(replace(READY, report=AuditReport.quota_reached(60)))
    assert can_optimize(replace(READY, report=CLEAN_REPORT))
    assert not can_optimize(replace(READY, report=CLEAN_REPORT, cooldown=CooldownState.counting(1)))


@pytest.mark.parametrize("prior", PRIOR_STATES)
def test_dispatching_audit_always_clears_optimization(prior):
    nxt = reduce(prior, RequestDispatched(kind=RequestKind.AUDIT, seq=prior.request_seq + 1))
    assert nxt.optimization is None
    assert nxt.in_flight == RequestKind.AUDIT
    assert nxt.report == prior.report
    assert nxt.request_seq == prior.request_seq + 1


def test_dispatching_optimize_keeps_report_and_result():
    prior = replace(READY, report=CLEAN_REPORT, optimization=REWRITE)
    nxt = reduce(prior, RequestDispatched(kind=RequestKind.OPTIMIZE, seq=1))
    assert nxt.in_flight == RequestKind.OPTIMIZE
    assert nxt.report == CLEAN_REPORT
    assert nxt.optimization == REWRITE


def test_dispatching_none_is_rejected():
    with pytest.raises(ValueError):
        reduce(READY, RequestDispatched(kind=RequestKind.NONE, seq=1))


def test_audit_completion_replaces_report_wholesale():
    prior = replace(READY, in_flight=RequestKind.AUDIT, report=FLAGGED_REPORT)
    nxt = reduce(prior, AuditCompleted(report=CLEAN_REPORT, seq=1))
    assert nxt.report == CLEAN_REPORT
    assert nxt.in_flight == RequestKind.NONE


def test_audit_quota_stores_synthetic_report_and_cooldown():
    prior = replace(READY, in_flight=RequestKind.AUDIT, report=CLEAN_REPORT)
    nxt = reduce(prior, QuotaReached(kind=RequestKind.AUDIT, seconds=60, seq=1))
    assert nxt.cooldown == CooldownState(active=True, remaining_seconds=60)
    assert nxt.in_flight == RequestKind.NONE
    assert nxt.report.status == ReportStatus.FLAGGED
    assert nxt.report.issues == (QUOTA_REACHED_ISSUE,)
    assert nxt.report.hint == "Wait 60s"
    assert nxt.report.origin == ReportOrigin.SYNTHETIC
    assert nxt.last_failure == FailureKind.QUOTA_EXCEEDED


@pytest.mark.parametrize("prior_result", [None, REWRITE])
def test_optimize_quota_keeps_report_and_optimization(prior_result):
    prior = replace(READY, in_flight=RequestKind.OPTIMIZE, report=CLEAN_REPORT, optimization=prior_result)
    nxt = reduce(prior, QuotaReached(kind=RequestKind.OPTIMIZE, seconds=60, seq=1))
    assert nxt.cooldown == CooldownState(active=True, remaining_seconds=60)
    assert nxt.report == CLEAN_REPORT
    assert nxt.optimization == prior_result


@pytest.mark.parametrize("failure", [FailureKind.TRANSPORT_FAILURE, FailureKind.SERVER_FAILURE])
def test_audit_failure_clears_report(failure):
    prior = replace(READY, in_flight=RequestKind.AUDIT, report=CLEAN_REPORT)
    nxt = reduce(prior, RequestFailed(kind=RequestKind.AUDIT, failure=failure, seq=1))
    assert nxt.report is None
    assert nxt.in_flight == RequestKind.NONE
    assert nxt.last_failure == failure


def test_optimize_failure_only_releases_in_flight():
    prior = replace(READY, in_flight=RequestKind.OPTIMIZE, report=CLEAN_REPORT, optimization=REWRITE)
    nxt = reduce(prior, RequestFailed(kind=RequestKind.OPTIMIZE, failure=FailureKind.SERVER_FAILURE, seq=1))
    assert nxt.report == CLEAN_REPORT
    assert nxt.optimization == REWRITE
    assert nxt.in_flight == RequestKind.NONE


def test_optimize_completion_stores_result():
    prior = replace(READY, in_flight=RequestKind.OPTIMIZE, report=CLEAN_REPORT)
    nxt = reduce(prior, OptimizeCompleted(result=REWRITE, seq=1))
    assert nxt.optimization == REWRITE
    assert nxt.in_flight == RequestKind.NONE


def test_abandoned_request_releases_slot_without_touching_results():
    prior = replace(READY, in_flight=RequestKind.AUDIT, report=CLEAN_REPORT)
    nxt = reduce(prior, RequestAbandoned(kind=RequestKind.AUDIT, seq=1))
    assert nxt == replace(prior, in_flight=RequestKind.NONE)


def test_cooldown_ticks_down_and_expires():
    state = replace(READY, cooldown=CooldownState.counting(2))
    state = reduce(state, CooldownTicked(remaining_seconds=1))
    assert state.cooldown == CooldownState(active=True, remaining_seconds=1)
    state = reduce(state, CooldownTicked(remaining_seconds=0))
    assert state.cooldown == CooldownState.idle()
    assert can_dispatch(state)
    assert reduce(state, CooldownExpired()).cooldown == CooldownState.idle()


def test_session_change_is_recorded():
    nxt = reduce(WorkflowState(), SessionChanged(session=SessionState.LOGGED_IN))
    assert nxt.session == SessionState.LOGGED_IN


def test_unknown_event_is_rejected():
    with pytest.raises(TypeError):
        reduce(READY, object())
