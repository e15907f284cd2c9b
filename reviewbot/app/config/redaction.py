from __future__ import annotations

import re
from typing import Any, Dict

_SENSITIVE_KEYS = {"code", "optimized_code", "rewritten_code", "name", "email", "body", "text", "authorization"}
_EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}")


def redact_secrets(s: str) -> str:
    if not s:
        return s
    return _EMAIL_PATTERN.sub("[redacted-email]", s)


def safe_error_detail(exc: BaseException) -> str:
    text = str(exc) or exc.__class__.__name__
    text = redact_secrets(text)
    return text[:200]


def safe_dict(d: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(d, dict):
        return {}
    cleaned: Dict[str, Any] = {}
    for k, v in d.items():
        if str(k).lower() in _SENSITIVE_KEYS:
            continue
        cleaned[k] = v
    return cleaned


__all__ = ["redact_secrets", "safe_error_detail", "safe_dict"]
