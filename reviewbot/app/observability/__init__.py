from __future__ import annotations

from .logging import structured_log, safe_redact, hash_subject
from .metrics import counter, gauge, event

__all__ = [
    "structured_log",
    "safe_redact",
    "hash_subject",
    "counter",
    "gauge",
    "event",
]
