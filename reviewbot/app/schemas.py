from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Wire payloads exchanged with the remote analysis service


class RegisterRequest(BaseModel):
    name: str
    email: str


class CodeRequest(BaseModel):
    code: str


class AuditPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: Literal["ERROR", "SUCCESS"]
    errors: Optional[List[str]] = None
    complexity: Optional[str] = None
    hint: Optional[str] = None


class OptimizePayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    optimized_code: str


# HTTP surface of this process


class LoginBody(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def require_at_sign(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v


class CodeBody(BaseModel):
    code: Optional[str] = None


class ReportView(BaseModel):
    status: str
    headline: str
    complexity_estimate: Optional[str] = None
    hint: str = ""
    issues: List[str] = Field(default_factory=list)
    synthetic: bool = False


class NoticeView(BaseModel):
    kind: str
    message: str


class StateSnapshot(BaseModel):
    session: str
    ux_state: str
    in_flight: str
    cooldown_active: bool
    cooldown_remaining_seconds: int
    audit_button_label: str
    report: Optional[ReportView] = None
    optimized_code: Optional[str] = None
    copied: bool = False
    last_notice: Optional[NoticeView] = None


class ActionResponse(BaseModel):
    accepted: bool
    state: StateSnapshot


__all__ = [
    "RegisterRequest",
    "CodeRequest",
    "AuditPayload",
    "OptimizePayload",
    "LoginBody",
    "CodeBody",
    "ReportView",
    "NoticeView",
    "StateSnapshot",
    "ActionResponse",
]
