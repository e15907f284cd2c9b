from __future__ import annotations

from typing import Any, Dict

from reviewbot.app.observability.logging import structured_log


def _safe_structured(payload: Dict[str, Any]) -> None:
    # structured_log redacts the fields and labels sections and never raises
    structured_log(payload)


def counter(name: str, value: int = 1, labels: dict[str, str] | None = None) -> None:
    payload = {"type": "metric", "metric_type": "counter", "name": name, "value": int(value), "labels": labels or {}}
    _safe_structured(payload)


def gauge(name: str, value: float, labels: dict[str, str] | None = None) -> None:
    payload = {"type": "metric", "metric_type": "gauge", "name": name, "value": float(value), "labels": labels or {}}
    _safe_structured(payload)


def event(name: str, fields: Dict[str, Any]) -> None:
    payload = {"type": "event", "name": name, "fields": dict(fields)}
    _safe_structured(payload)


__all__ = ["counter", "gauge", "event"]
