"""Domain types shared by the session, workflow and feedback controllers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

QUOTA_REACHED_ISSUE = "Quota Reached"


class SessionState(str, Enum):
    LOGGED_OUT = "LOGGED_OUT"
    AUTHENTICATING = "AUTHENTICATING"
    LOGGED_IN = "LOGGED_IN"


class RequestKind(str, Enum):
    NONE = "NONE"
    AUDIT = "AUDIT"
    OPTIMIZE = "OPTIMIZE"


class ReportStatus(str, Enum):
    CLEAN = "CLEAN"
    FLAGGED = "FLAGGED"


class ReportOrigin(str, Enum):
    REMOTE = "REMOTE"
    SYNTHETIC = "SYNTHETIC"


class FailureKind(str, Enum):
    AUTH_FAILURE = "AUTH_FAILURE"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"
    SERVER_FAILURE = "SERVER_FAILURE"
    PLATFORM_FAILURE = "PLATFORM_FAILURE"


@dataclass(frozen=True)
class VisitorIdentity:
    name: str
    email: str


@dataclass(frozen=True)
class AuditReport:
    """Verdict shown for the code most recently audited.

    A CLEAN report carries the complexity estimate and hint; a FLAGGED report
    carries at least one issue. Reports built locally (quota exhaustion) are
    marked SYNTHETIC so they are never mistaken for a remote verdict.
    """

    status: ReportStatus
    complexity_estimate: Optional[str] = None
    hint: str = ""
    issues: Tuple[str, ...] = ()
    origin: ReportOrigin = ReportOrigin.REMOTE

    def __post_init__(self) -> None:
        if self.status == ReportStatus.FLAGGED and not self.issues:
            raise ValueError("flagged report requires at least one issue")
        if self.status == ReportStatus.CLEAN and self.complexity_estimate is None:
            raise ValueError("clean report requires a complexity estimate")

    @classmethod
    def quota_reached(cls, seconds: int) -> AuditReport:
        return cls(
            status=ReportStatus.FLAGGED,
            hint=f"Wait {seconds}s",
            issues=(QUOTA_REACHED_ISSUE,),
            origin=ReportOrigin.SYNTHETIC,
        )

    @property
    def is_clean(self) -> bool:
        return self.status == ReportStatus.CLEAN

    @property
    def is_synthetic(self) -> bool:
        return self.origin == ReportOrigin.SYNTHETIC


@dataclass(frozen=True)
class OptimizationResult:
    rewritten_code: str


@dataclass(frozen=True)
class CooldownState:
    active: bool = False
    remaining_seconds: int = 0

    def __post_init__(self) -> None:
        if self.remaining_seconds < 0:
            raise ValueError("remaining_seconds must be >= 0")
        if self.active and self.remaining_seconds == 0:
            raise ValueError("an active cooldown must have time remaining")

    @classmethod
    def idle(cls) -> CooldownState:
        return cls(active=False, remaining_seconds=0)

    @classmethod
    def counting(cls, remaining_seconds: int) -> CooldownState:
        if remaining_seconds <= 0:
            return cls.idle()
        return cls(active=True, remaining_seconds=remaining_seconds)


@dataclass(frozen=True)
class EphemeralFeedback:
    copied: bool = False


@dataclass(frozen=True)
class Notice:
    kind: FailureKind
    message: str
    details: dict = field(default_factory=dict, compare=False)


__all__ = [
    "QUOTA_REACHED_ISSUE",
    "SessionState",
    "RequestKind",
    "ReportStatus",
    "ReportOrigin",
    "FailureKind",
    "VisitorIdentity",
    "AuditReport",
    "OptimizationResult",
    "CooldownState",
    "EphemeralFeedback",
    "Notice",
]
