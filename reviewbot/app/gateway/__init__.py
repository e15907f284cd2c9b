from .errors import GatewayError, QuotaExceededError, ServerError, TransportError
from .outcomes import (
    AuditOutcome,
    OptimizeOutcome,
    QuotaExceeded,
    ServerFailure,
    Success,
    TransportFailure,
)
from .client import AnalysisGateway, classify_status, parse_audit_payload, parse_optimize_payload

__all__ = [
    "GatewayError",
    "QuotaExceededError",
    "ServerError",
    "TransportError",
    "AuditOutcome",
    "OptimizeOutcome",
    "QuotaExceeded",
    "ServerFailure",
    "Success",
    "TransportFailure",
    "AnalysisGateway",
    "classify_status",
    "parse_audit_payload",
    "parse_optimize_payload",
]
