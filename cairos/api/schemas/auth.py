from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    access_token: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    token: str


class LogoutResponse(BaseModel):
    success: bool
