from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Protocol

from reviewbot.app.models import FailureKind, Notice, SessionState, VisitorIdentity
from reviewbot.app.notices import AUTH_RETRY_MESSAGE, Notifier, log_notifier
from reviewbot.app.observability import event, hash_subject

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionState], None]


class Registrar(Protocol):
    def register(self, identity: VisitorIdentity) -> Awaitable[bool]: ...


class SessionController:
    """Gate in front of the workflow: closed until registration succeeds.

    The session only moves forward. A failed registration drops back to
    LOGGED_OUT with an advisory notice and the visitor may resubmit as often
    as they like. Once LOGGED_IN it stays open for the process lifetime.
    """

    def __init__(self, registrar: Registrar, *, notifier: Optional[Notifier] = None) -> None:
        self._registrar = registrar
        self._notifier = notifier or log_notifier
        self._state = SessionState.LOGGED_OUT
        self._identity: Optional[VisitorIdentity] = None
        self._last_error: Optional[Notice] = None
        self._listeners: List[SessionListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def identity(self) -> Optional[VisitorIdentity]:
        return self._identity

    @property
    def last_error(self) -> Optional[Notice]:
        return self._last_error

    @property
    def is_open(self) -> bool:
        return self._state == SessionState.LOGGED_IN

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    async def submit_login(self, identity: VisitorIdentity) -> SessionState:
        if self._state != SessionState.LOGGED_OUT:
            # already open, or a registration is still outstanding
            return self._state

        subject = hash_subject(identity.email)
        self._set_state(SessionState.AUTHENTICATING)
        try:
            ok = await self._registrar.register(identity)
        except asyncio.CancelledError:
            self._set_state(SessionState.LOGGED_OUT)
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("[SESSION] registrar raised", extra={"subject": subject})
            ok = False
            reason = exc.__class__.__name__
        else:
            reason = None if ok else "rejected"
        if ok:
            self._identity = identity
            self._last_error = None
            self._set_state(SessionState.LOGGED_IN)
        else:
            self._last_error = Notice(kind=FailureKind.AUTH_FAILURE, message=AUTH_RETRY_MESSAGE)
            self._set_state(SessionState.LOGGED_OUT)
            self._notifier(self._last_error)

        event(
            "session.login",
            {"subject": subject, "ok": ok, "reason": reason},
        )
        return self._state

    def _set_state(self, state: SessionState) -> None:
        if state == self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            listener(state)


__all__ = ["Registrar", "SessionController", "SessionListener"]
