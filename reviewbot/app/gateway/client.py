"""HTTP gateway to the remote analysis and registration service."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import httpx
from pydantic import ValidationError

from reviewbot.app.config import get_settings, safe_error_detail
from reviewbot.app.gateway.errors import QuotaExceededError, ServerError, TransportError
from reviewbot.app.gateway.outcomes import (
    AuditOutcome,
    OptimizeOutcome,
    QuotaExceeded,
    ServerFailure,
    Success,
    TransportFailure,
    outcome_label,
)
from reviewbot.app.models import AuditReport, OptimizationResult, ReportStatus, VisitorIdentity
from reviewbot.app.observability import counter, hash_subject
from reviewbot.app.schemas import AuditPayload, CodeRequest, OptimizePayload, RegisterRequest

logger = logging.getLogger(__name__)

QUOTA_STATUS = 429


def extract_retry_after(headers: Mapping[str, str] | None) -> Optional[int]:
    if not headers:
        return None
    raw = headers.get("Retry-After")
    if raw is None:
        return None
    try:
        return max(0, int(str(raw).strip()))
    except ValueError:
        return None


def classify_status(status_code: int, headers: Mapping[str, str] | None = None) -> None:
    """Raise the gateway error matching a non-2xx status; return for 2xx."""
    if 200 <= status_code < 300:
        return
    if status_code == QUOTA_STATUS:
        raise QuotaExceededError(extract_retry_after(headers))
    raise ServerError(f"unexpected HTTP status {status_code}", status_code=status_code)


def parse_audit_payload(data: Any) -> AuditReport:
    try:
        payload = AuditPayload.model_validate(data)
    except ValidationError as exc:
        raise ServerError(f"audit payload invalid: {exc.error_count()} error(s)") from exc

    if payload.status == "SUCCESS":
        if payload.complexity is None:
            raise ServerError("audit payload missing complexity")
        return AuditReport(
            status=ReportStatus.CLEAN,
            complexity_estimate=payload.complexity,
            hint=payload.hint or "",
        )

    issues = tuple(item for item in (payload.errors or []) if item.strip())
    if not issues:
        raise ServerError("audit payload flagged without issues")
    return AuditReport(
        status=ReportStatus.FLAGGED,
        complexity_estimate=payload.complexity,
        hint=payload.hint or "",
        issues=issues,
    )


def parse_optimize_payload(data: Any) -> OptimizationResult:
    try:
        payload = OptimizePayload.model_validate(data)
    except ValidationError as exc:
        raise ServerError(f"optimize payload invalid: {exc.error_count()} error(s)") from exc
    return OptimizationResult(rewritten_code=payload.optimized_code)


class AnalysisGateway:
    """Issues register/audit/optimize calls and normalizes their outcomes.

    Remote failures never raise out of the public methods: they come back as
    `QuotaExceeded`, `TransportFailure` or `ServerFailure`. Nothing is retried
    here.
    """

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        connect_timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        s = get_settings()
        self.base_url = (base_url or s.api_base_url).rstrip("/")
        self.timeout_seconds = timeout_seconds or s.request_timeout_seconds
        self.connect_timeout_seconds = connect_timeout_seconds or s.connect_timeout_seconds
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout_seconds, connect=self.connect_timeout_seconds),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post(self, path: str, payload: Dict[str, Any]) -> httpx.Response:
        # The status is classified before the body is read; a 429 or error
        # body is never decoded.
        request = self._client.build_request("POST", path, json=payload)
        try:
            resp = await self._client.send(request, stream=True)
        except httpx.TimeoutException as exc:
            raise TransportError(f"request to {path} timed out") from exc
        except httpx.RequestError as exc:
            raise TransportError(f"request to {path} failed: {safe_error_detail(exc)}") from exc

        try:
            classify_status(resp.status_code, resp.headers)
            await resp.aread()
        except httpx.DecodingError as exc:
            raise ServerError(
                f"response from {path} could not be decoded", status_code=resp.status_code
            ) from exc
        except httpx.TimeoutException as exc:
            raise TransportError(f"reading response from {path} timed out") from exc
        except httpx.RequestError as exc:
            raise TransportError(f"reading response from {path} failed: {safe_error_detail(exc)}") from exc
        finally:
            await resp.aclose()
        return resp

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise ServerError("service returned non-JSON response", status_code=resp.status_code) from exc

    async def register(self, identity: VisitorIdentity) -> bool:
        body = RegisterRequest(name=identity.name, email=identity.email).model_dump()
        subject = hash_subject(identity.email)
        try:
            # only the status matters; the body is never read
            resp = await self._client.send(self._client.build_request("POST", "/register", json=body), stream=True)
            await resp.aclose()
        except httpx.RequestError as exc:
            logger.warning(
                "[GATEWAY] register transport error",
                extra={"subject": subject, "error": safe_error_detail(exc)},
            )
            counter("gateway.register", labels={"outcome": "transport_failure"})
            return False

        ok = resp.status_code == 200
        if not ok:
            logger.warning(
                "[GATEWAY] register rejected",
                extra={"subject": subject, "http_status": resp.status_code},
            )
        counter("gateway.register", labels={"outcome": "success" if ok else "rejected"})
        return ok

    async def audit(self, code: str) -> AuditOutcome:
        outcome: AuditOutcome
        try:
            resp = await self._post("/audit", CodeRequest(code=code).model_dump())
            outcome = Success(parse_audit_payload(self._json(resp)))
        except QuotaExceededError as exc:
            outcome = QuotaExceeded(retry_after=exc.retry_after)
        except TransportError as exc:
            outcome = TransportFailure(reason=str(exc))
        except ServerError as exc:
            outcome = ServerFailure(reason=str(exc), status_code=exc.status_code)
        self._record("audit", outcome)
        return outcome

    async def optimize(self, code: str) -> OptimizeOutcome:
        outcome: OptimizeOutcome
        try:
            resp = await self._post("/optimize", CodeRequest(code=code).model_dump())
            outcome = Success(parse_optimize_payload(self._json(resp)))
        except QuotaExceededError as exc:
            outcome = QuotaExceeded(retry_after=exc.retry_after)
        except TransportError as exc:
            outcome = TransportFailure(reason=str(exc))
        except ServerError as exc:
            outcome = ServerFailure(reason=str(exc), status_code=exc.status_code)
        self._record("optimize", outcome)
        return outcome

    def _record(self, operation: str, outcome: object) -> None:
        label = outcome_label(outcome)
        counter(f"gateway.{operation}", labels={"outcome": label})
        if isinstance(outcome, (TransportFailure, ServerFailure)):
            logger.error(
                "[GATEWAY] %s failed",
                operation,
                extra={"outcome": label, "reason": outcome.reason},
            )
        elif isinstance(outcome, QuotaExceeded):
            logger.info(
                "[GATEWAY] %s quota exceeded",
                operation,
                extra={"retry_after": outcome.retry_after},
            )


__all__ = [
    "AnalysisGateway",
    "classify_status",
    "extract_retry_after",
    "parse_audit_payload",
    "parse_optimize_payload",
]
