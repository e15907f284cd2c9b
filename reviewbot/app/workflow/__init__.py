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
from reviewbot.app.workflow.controller import (
    DEFAULT_QUOTA_COOLDOWN_SECONDS,
    AnalysisService,
    StateListener,
    WorkflowController,
)

__all__ = [
    "AuditCompleted",
    "CooldownExpired",
    "CooldownTicked",
    "OptimizeCompleted",
    "QuotaReached",
    "RequestAbandoned",
    "RequestDispatched",
    "RequestFailed",
    "SessionChanged",
    "WorkflowEvent",
    "WorkflowState",
    "can_dispatch",
    "can_optimize",
    "reduce",
    "DEFAULT_QUOTA_COOLDOWN_SECONDS",
    "AnalysisService",
    "StateListener",
    "WorkflowController",
]
