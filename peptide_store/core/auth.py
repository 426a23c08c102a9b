"""
Admin authentication: bearer JWTs issued by POST /auth/token.
Claims: sub (user id), email, role, exp. The role is re-read from the users table on every
request, so demoting or deleting an account takes effect before its token expires.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from peptide_store.config import get_settings
from peptide_store.models.user import User, UserRole

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{get_settings().api_prefix}/auth/token")


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(user: User) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_access_token_expire_minutes)
    claims = {"sub": str(user.id), "email": user.email, "role": UserRole(user.role).value, "exp": expire}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_user_id(token: str) -> UUID:
    """Subject of a valid, unexpired token; raises 401 otherwise."""
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        return UUID(claims["sub"])
    except (JWTError, KeyError, ValueError) as e:
        logger.info("token_rejected: %s", e)
        raise _unauthorized()


async def get_current_user(token: Annotated[str, Depends(oauth2_scheme)]) -> User:
    from peptide_store.db import session_scope
    from peptide_store.repositories.user_repo import UserRepository

    user_id = decode_user_id(token)
    async with session_scope() as session:
        user = await UserRepository(session).get_by_id(user_id)
    if user is None:
        logger.info("token_rejected: unknown user", extra={"user_id": user_id})
        raise _unauthorized()
    return user


def require_role(*allowed: UserRole):
    """Dependency: current user must hold one of the allowed roles (403 otherwise)."""

    async def _require(current_user: Annotated[User, Depends(get_current_user)]) -> User:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return Depends(_require)
