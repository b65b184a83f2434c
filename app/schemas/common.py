"""Shared pydantic types and small response schemas."""

from __future__ import annotations

import re
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

ID_RE = re.compile(r"^[a-z0-9]{20,32}$")
_MIN_PASSWORD = 8


def validate_id(v: str) -> str:
    v = v.strip()
    if not ID_RE.match(v):
        raise ValueError("ID must be 20-32 lowercase alphanumeric characters")
    return v


def normalise_email(v: str) -> str:
    v = v.strip().lower()
    local, _, domain = v.partition("@")
    if not local or "." not in domain or len(v) > 320:
        raise ValueError("Invalid email address")
    return v


def _check_password(v: str) -> str:
    if len(v) < _MIN_PASSWORD:
        raise ValueError(f"Password must be at least {_MIN_PASSWORD} characters")
    return v


def _check_name(v: str) -> str:
    v = v.strip()
    if len(v) < 2:
        raise ValueError("Name must be at least 2 characters")
    if len(v) > 200:
        raise ValueError("Name must not exceed 200 characters")
    return v


def _blank_url_to_none(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    if not v:
        return None
    if not v.startswith(("http://", "https://")) or len(v) > 500:
        raise ValueError("Must be an http(s) URL")
    return v


EntityId = Annotated[str, AfterValidator(validate_id)]
Email = Annotated[str, AfterValidator(normalise_email)]
Password = Annotated[str, AfterValidator(_check_password)]
PersonName = Annotated[str, AfterValidator(_check_name)]
# Blank strings clear the field.
OptionalUrl = Annotated[str | None, AfterValidator(_blank_url_to_none)]
# 0 = Sunday
DayOfWeek = Annotated[int, Field(ge=0, le=6)]


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class HealthResponse(BaseModel):
    status: str
    db: bool
    redis: bool
    version: str
