from __future__ import annotations

from enum import Enum
from typing import Optional

from reviewbot.app.models import AuditReport, RequestKind, SessionState
from reviewbot.app.workflow.state import WorkflowState

AUDIT_LABEL = "Run AI Audit"
AUDIT_BUSY_LABEL = "Analyzing..."


class UXState(str, Enum):
    LOGGED_OUT = "LOGGED_OUT"
    AUTHENTICATING = "AUTHENTICATING"
    READY = "READY"
    AUDITING = "AUDITING"
    OPTIMIZING = "OPTIMIZING"
    COOLDOWN = "COOLDOWN"


def decide_ux_state(state: WorkflowState) -> UXState:
    if state.session == SessionState.LOGGED_OUT:
        return UXState.LOGGED_OUT
    if state.session == SessionState.AUTHENTICATING:
        return UXState.AUTHENTICATING

    if state.in_flight == RequestKind.AUDIT:
        return UXState.AUDITING
    if state.in_flight == RequestKind.OPTIMIZE:
        return UXState.OPTIMIZING

    if state.cooldown.active:
        return UXState.COOLDOWN

    return UXState.READY


def cooldown_label(seconds: int) -> str:
    return f"Wait {seconds}s"


def audit_button_label(state: WorkflowState) -> str:
    if state.in_flight == RequestKind.AUDIT:
        return AUDIT_BUSY_LABEL
    if state.cooldown.active:
        return cooldown_label(state.cooldown.remaining_seconds)
    return AUDIT_LABEL


def verdict_headline(report: Optional[AuditReport]) -> Optional[str]:
    if report is None:
        return None
    if report.is_synthetic:
        return report.issues[0]
    if report.is_clean:
        return "Code Clean"
    return "Bugs Found"


def build_ux_headers(ux_state: UXState, cooldown_seconds: Optional[int]) -> dict[str, str]:
    hdrs = {"X-UX-State": ux_state.value}
    if cooldown_seconds is not None:
        hdrs["X-Cooldown-Seconds"] = str(cooldown_seconds)
    return hdrs


__all__ = [
    "AUDIT_LABEL",
    "AUDIT_BUSY_LABEL",
    "UXState",
    "decide_ux_state",
    "cooldown_label",
    "audit_button_label",
    "verdict_headline",
    "build_ux_headers",
]
