from __future__ import annotations

from pydantic import BaseModel


class TokenResponse(BaseModel):
    """POST /api/v1/auth/token response (OAuth2 password flow)."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
