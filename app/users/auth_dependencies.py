# app/users/auth_dependencies.py
# Centralized Authentication Dependencies

from typing import Callable, Optional

from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.users.auth_services import authorize, validate_session
from app.users.security import session_lifetime, set_session_cookie
from app.users.user_models.user_model import User
from config.appconfig import AppSettings


def get_settings(request: Request) -> AppSettings:
    """Settings the running app was built with."""
    return request.app.state.settings


async def get_current_user_optional(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
    settings: AppSettings = Depends(get_settings),
) -> Optional[User]:
    """
    Get user if the session cookie is valid, otherwise None.
    Anonymous is a normal outcome here, not an error.
    """
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    user, session, refreshed = await validate_session(token, db, session_lifetime(settings))
    if session is not None:
        request.state.session_id = session.id
        if refreshed:
            set_session_cookie(response, session.id, session.expires_at, settings)
    return user


async def get_current_user(
    current_user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    """Require an authenticated session (401 otherwise)."""
    return authorize(current_user)


def require_roles(*roles: str) -> Callable:
    """
    Dependency factory: authenticated user whose role is one of `roles`.
    Raises 401 without a session, 403 for any other role.
    """

    async def dependency(
        current_user: Optional[User] = Depends(get_current_user_optional),
    ) -> User:
        return authorize(current_user, roles)

    return dependency


get_current_clinician = require_roles("admin", "doctor")
