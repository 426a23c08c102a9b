"""
POST /api/v1/auth/token: admin login, returns a bearer JWT (sub, email, role, exp).
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from peptide_store.config import get_settings
from peptide_store.core.auth import create_access_token
from peptide_store.core.security import verify_password
from peptide_store.db import get_db
from peptide_store.repositories.user_repo import UserRepository
from peptide_store.schemas.auth import TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/token",
    response_model=TokenResponse,
    summary="Login",
    description="Exchange admin email and password for a bearer token.",
)
async def login(
    form: OAuth2PasswordRequestForm = Depends(),
    session: AsyncSession = Depends(get_db),
) -> TokenResponse:
    repo = UserRepository(session)
    user = await repo.get_by_email(form.username)
    if user is None or not verify_password(form.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    await repo.record_login(user.id)
    logger.info("admin_login", extra={"user_id": user.id})
    return TokenResponse(
        access_token=create_access_token(user),
        expires_in=get_settings().jwt_access_token_expire_minutes * 60,
    )
