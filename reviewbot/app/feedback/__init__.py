from reviewbot.app.feedback.platform import Clipboard, PlatformEffectError, ShareTarget
from reviewbot.app.feedback.effects import COPY_FEEDBACK_SECONDS, SHARE_TITLE, FeedbackEffects, format_report_summary

__all__ = [
    "Clipboard",
    "PlatformEffectError",
    "ShareTarget",
    "COPY_FEEDBACK_SECONDS",
    "SHARE_TITLE",
    "FeedbackEffects",
    "format_report_summary",
]
