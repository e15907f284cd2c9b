"""Login gate endpoint."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel

from reviewbot.app.models import SessionState
from reviewbot.app.schemas import LoginBody, NoticeView

router = APIRouter(prefix="/api", tags=["session"])
logger = logging.getLogger(__name__)


class LoginResponse(BaseModel):
    ok: bool
    session: str
    error: NoticeView | None = None


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginBody, request: Request) -> LoginResponse:
    service = request.app.state.service
    session = await service.login(body.name, body.email)
    if session == SessionState.LOGGED_IN:
        return LoginResponse(ok=True, session=session.value)

    err = service.session.last_error
    return LoginResponse(
        ok=False,
        session=session.value,
        error=NoticeView(kind=err.kind.value, message=err.message) if err else None,
    )


__all__ = ["router", "LoginResponse"]
