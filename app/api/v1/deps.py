"""
FastAPI dependencies: auth guards and database session.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable, Coroutine
from typing import Any, Optional

from fastapi import Cookie, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.permissions import ensure_role, policy_roles
from app.core.security import verify_access_token
from app.db.session import async_session_factory
from app.models.user import Role, User, UserStatus

# We use auto_error=False so we can manually check for the cookie if header is missing
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


def _token_from_cookie(access_token: str | None) -> str | None:
    if not access_token:
        return None
    if access_token.startswith("Bearer "):
        return access_token.split(" ", 1)[1]
    return access_token


# ── Auth dependencies ───────────────────────────────────────────────
async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(default=None),  # Read from HttpOnly Cookie
    db: AsyncSession = Depends(get_db),
) -> User:
    """Verify the JWT from header OR cookie, then load the authoritative user row."""
    # Priority: Header > Cookie
    claims = verify_access_token(token or _token_from_cookie(access_token))

    result = await db.execute(select(User).where(User.id == claims.sub))
    user = result.scalar_one_or_none()
    if user is None:
        raise AuthenticationError()
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Reject pending and inactive accounts."""
    if current_user.status != UserStatus.ACTIVE:
        raise AuthorizationError("User account is not active")
    return current_user


def require_roles(*roles: Role) -> Callable[..., Coroutine[Any, Any, User]]:
    """Build a dependency that only lets the given roles through."""

    async def dependency(current_user: User = Depends(get_current_active_user)) -> User:
        ensure_role(current_user, roles)
        return current_user

    return dependency


def require_policy(key: str) -> Callable[..., Coroutine[Any, Any, User]]:
    """Build a dependency enforcing the ``ROUTE_POLICIES`` entry *key*."""
    return require_roles(*policy_roles(key))
