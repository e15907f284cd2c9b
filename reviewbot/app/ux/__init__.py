from reviewbot.app.ux.state import (
    AUDIT_BUSY_LABEL,
    AUDIT_LABEL,
    UXState,
    audit_button_label,
    build_ux_headers,
    cooldown_label,
    decide_ux_state,
    verdict_headline,
)

__all__ = [
    "AUDIT_BUSY_LABEL",
    "AUDIT_LABEL",
    "UXState",
    "audit_button_label",
    "build_ux_headers",
    "cooldown_label",
    "decide_ux_state",
    "verdict_headline",
]
