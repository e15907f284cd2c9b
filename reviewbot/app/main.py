from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from logging.config import dictConfig
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from reviewbot.app.config import get_settings, settings_public_summary
from reviewbot.app.routers.session import router as session_router
from reviewbot.app.schemas import ActionResponse, CodeBody, StateSnapshot
from reviewbot.app.service import ReviewBotService
from reviewbot.app.ux import UXState, build_ux_headers

APP_VERSION = "1.0.0"


def _logging_config(level: str) -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            }
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
    }


logger = logging.getLogger(__name__)
_start_time = time.monotonic()


def _service(request: Request) -> ReviewBotService:
    return request.app.state.service


def _with_ux_headers(payload: Dict[str, Any], snapshot: StateSnapshot) -> JSONResponse:
    cooldown = snapshot.cooldown_remaining_seconds if snapshot.cooldown_active else None
    headers = build_ux_headers(UXState(snapshot.ux_state), cooldown)
    return JSONResponse(content=payload, headers=headers)


def create_app(service: Optional[ReviewBotService] = None) -> FastAPI:
    settings = service.settings if service is not None else get_settings()
    dictConfig(_logging_config(settings.log_level))
    logger.info("[CFG] loaded", extra={"summary": settings_public_summary(settings)})

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.service.aclose()

    app = FastAPI(title="Review-Bot", version=APP_VERSION, lifespan=lifespan)
    app.state.service = service or ReviewBotService(settings=settings)

    origins = settings.cors_origins_list()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(session_router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {
            "status": "ok",
            "version": APP_VERSION,
            "uptime_seconds": int(time.monotonic() - _start_time),
        }

    @app.get("/api/state")
    async def state(request: Request) -> JSONResponse:
        snapshot = _service(request).snapshot()
        return _with_ux_headers(snapshot.model_dump(), snapshot)

    @app.put("/api/code")
    async def put_code(body: CodeBody, request: Request) -> JSONResponse:
        svc = _service(request)
        svc.update_code(body.code)
        snapshot = svc.snapshot()
        return _with_ux_headers(snapshot.model_dump(), snapshot)

    @app.post("/api/audit")
    async def audit(body: CodeBody, request: Request) -> JSONResponse:
        svc = _service(request)
        accepted = await svc.audit(body.code)
        snapshot = svc.snapshot()
        return _with_ux_headers(ActionResponse(accepted=accepted, state=snapshot).model_dump(), snapshot)

    @app.post("/api/optimize")
    async def optimize(body: CodeBody, request: Request) -> JSONResponse:
        svc = _service(request)
        accepted = await svc.optimize(body.code)
        snapshot = svc.snapshot()
        return _with_ux_headers(ActionResponse(accepted=accepted, state=snapshot).model_dump(), snapshot)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("reviewbot.app.main:app", host="127.0.0.1", port=8080)


__all__ = ["APP_VERSION", "app", "create_app", "run"]
