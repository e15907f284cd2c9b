from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from reviewbot.app.models import AuditReport, FailureKind, OptimizationResult

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class QuotaExceeded:
    retry_after: Optional[int] = None

    kind = FailureKind.QUOTA_EXCEEDED


@dataclass(frozen=True)
class TransportFailure:
    reason: str

    kind = FailureKind.TRANSPORT_FAILURE


@dataclass(frozen=True)
class ServerFailure:
    reason: str
    status_code: Optional[int] = None

    kind = FailureKind.SERVER_FAILURE


AuditOutcome = Union[Success[AuditReport], QuotaExceeded, TransportFailure, ServerFailure]
OptimizeOutcome = Union[Success[OptimizationResult], QuotaExceeded, TransportFailure, ServerFailure]


def outcome_label(outcome: object) -> str:
    if isinstance(outcome, Success):
        return "success"
    kind = getattr(outcome, "kind", None)
    if isinstance(kind, FailureKind):
        return kind.value.lower()
    return "unknown"


__all__ = [
    "Success",
    "QuotaExceeded",
    "TransportFailure",
    "ServerFailure",
    "AuditOutcome",
    "OptimizeOutcome",
    "outcome_label",
]
