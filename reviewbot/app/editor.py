from __future__ import annotations

from typing import Callable, List

DEFAULT_EDITOR_TEXT = "// Paste C++ or Java code here..."

ChangeListener = Callable[[str], None]


class EditorBuffer:
    """Text held by the code editor, with change notification."""

    def __init__(self, value: str = DEFAULT_EDITOR_TEXT) -> None:
        self._value = value
        self._listeners: List[ChangeListener] = []

    @property
    def value(self) -> str:
        return self._value

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def set(self, value: str | None) -> None:
        # the editor reports a cleared document as None
        text = value or ""
        if text == self._value:
            return
        self._value = text
        for listener in list(self._listeners):
            listener(text)


__all__ = ["DEFAULT_EDITOR_TEXT", "EditorBuffer"]
