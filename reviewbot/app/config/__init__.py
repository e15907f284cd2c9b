from .settings import (
    DEFAULT_API_BASE_URL,
    DEFAULT_PAGE_URL,
    Settings,
    get_settings,
    settings_public_summary,
)
from .redaction import redact_secrets, safe_error_detail, safe_dict

__all__ = [
    "DEFAULT_API_BASE_URL",
    "DEFAULT_PAGE_URL",
    "Settings",
    "get_settings",
    "settings_public_summary",
    "redact_secrets",
    "safe_error_detail",
    "safe_dict",
]
