"""
Declarative base shared by every ORM model.
"""

from __future__ import annotations

from uuid import uuid4

from sqlalchemy.orm import DeclarativeBase


def generate_id() -> str:
    """Return a new 32-char lowercase hex primary key."""
    return uuid4().hex


class Base(DeclarativeBase):
    # Models annotate plain ``Column`` attributes instead of ``Mapped[...]``.
    __allow_unmapped__ = True
