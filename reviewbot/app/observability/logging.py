from __future__ import annotations

import hashlib
import json
import logging
import os
from typing import Any, Dict

logger = logging.getLogger(__name__)

_OBS_SALT = (os.getenv("REVIEWBOT_HASH_SALT") or "obs-salt").encode("utf-8")

# payload sections that may carry visitor data; the envelope (type, name, value) is kept
_PAYLOAD_SECTIONS = ("fields", "labels")
_REDACTED_KEYS = ("code", "optimized_code", "rewritten_code", "name", "email", "body", "summary")


def hash_subject(subject: str | None) -> str:
    h = hashlib.sha256()
    h.update(_OBS_SALT)
    h.update((subject or "anon").strip().lower().encode("utf-8"))
    return h.hexdigest()[:16]


def safe_redact(event: Dict[str, Any]) -> Dict[str, Any]:
    # Shallow redact: visitor input and service payloads never reach the log
    redacted = dict(event) if isinstance(event, dict) else {}
    for key in _REDACTED_KEYS:
        if key in redacted:
            redacted.pop(key)
    return redacted


def structured_log(event: Dict[str, Any]) -> None:
    try:
        safe_event = dict(event)
        for section in _PAYLOAD_SECTIONS:
            if isinstance(safe_event.get(section), dict):
                safe_event[section] = safe_redact(safe_event[section])
        logger.info(json.dumps(safe_event, separators=(",", ":"), default=str))
    except Exception:
        # logging must never break the request path
        return


__all__ = ["hash_subject", "structured_log", "safe_redact"]
