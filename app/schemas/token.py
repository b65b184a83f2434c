"""Pydantic schemas for JWT tokens."""

from __future__ import annotations

from pydantic import BaseModel

from app.models.user import Role


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenClaims(BaseModel):
    """Verified claims of an access token.

    ``center_id`` is a snapshot taken at issuance and may be stale.
    """

    sub: str
    email: str
    role: Role
    center_id: str | None = None


class RefreshRequest(BaseModel):
    refresh_token: str
