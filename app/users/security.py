# app/users/security.py

import secrets
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Response
from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from app.helpers.time import utcnow
from config.appconfig import AppSettings


# Password hashing context
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

# A valid hash of a random secret; verified against when the email is unknown
# so both login failure paths cost the same
_DUMMY_HASH = pwd_context.hash(secrets.token_urlsafe(16))


# ============================================================
# ✅ Verify Password
# ============================================================
async def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its hash (off the event loop)."""
    return await run_in_threadpool(pwd_context.verify, plain_password, hashed_password or _DUMMY_HASH)


# ============================================================
# ✅ Get Password Hash
# ============================================================
async def get_password_hash(password: str) -> str:
    """Hash a password (off the event loop)."""
    return await run_in_threadpool(pwd_context.hash, password)


# ============================================================
# ✅ Generate Session Token
# ============================================================
def generate_session_token() -> str:
    """Opaque, unguessable session identifier."""
    return secrets.token_urlsafe(32)


# ============================================================
# ✅ Get Session Expiry
# ============================================================
def session_lifetime(settings: AppSettings) -> timedelta:
    return timedelta(days=settings.SESSION_EXPIRY_DAYS)


def get_session_expiry(lifetime: timedelta) -> datetime:
    return utcnow() + lifetime


# ============================================================
# ✅ Session Cookie
# ============================================================
def set_session_cookie(response: Response, token: str, expires_at: datetime, settings: AppSettings) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        expires=expires_at,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )


def clear_session_cookie(response: Response, settings: AppSettings) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )
