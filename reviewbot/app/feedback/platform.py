from __future__ import annotations

from typing import Awaitable, Protocol


class PlatformEffectError(Exception):
    """Raised by a clipboard or share primitive that could not complete."""


class Clipboard(Protocol):
    def write_text(self, text: str) -> Awaitable[None]: ...


class ShareTarget(Protocol):
    def share(self, *, title: str, text: str, url: str) -> Awaitable[None]: ...


__all__ = ["PlatformEffectError", "Clipboard", "ShareTarget"]
