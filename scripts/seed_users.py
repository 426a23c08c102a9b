#!/usr/bin/env python3
"""
Create (or reset the password of) the admin account used by the admin console.
Credentials come from SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD; the defaults are for local dev only.
Run after migrations: python -m scripts.seed_users
"""
from __future__ import annotations

import asyncio

from peptide_store.config import get_settings
from peptide_store.core.security import hash_password
from peptide_store.db import session_scope
from peptide_store.models import User, UserRole
from peptide_store.repositories.user_repo import UserRepository


async def seed_admin() -> None:
    settings = get_settings()
    async with session_scope() as session:
        user = await UserRepository(session).get_by_email(settings.seed_admin_email)
        hashed = hash_password(settings.seed_admin_password)
        if user is None:
            session.add(User(email=settings.seed_admin_email, hashed_password=hashed, role=UserRole.ADMIN))
            action = "created"
        else:
            user.hashed_password = hashed
            action = "password reset"
    print(f"Admin user {settings.seed_admin_email}: {action}.")


if __name__ == "__main__":
    asyncio.run(seed_admin())
