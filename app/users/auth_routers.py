# app/users/auth_routers.py

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.users.auth_dependencies import get_current_user, get_settings
from app.users.auth_services import invalidate_session, login_user, signup_user
from app.users.security import clear_session_cookie, session_lifetime, set_session_cookie
from app.users.user_models.schemas import (
    UserLogin,
    UserLoginResponse,
    UserLogoutResponse,
    UserMeResponse,
    UserResponse,
    UserSignup,
    UserSignupResponse,
)
from app.users.user_models.user_model import User
from config.appconfig import AppSettings

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================
# ✅ SIGNUP
# ============================================================
@router.post("/signup", response_model=UserSignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(user_data: UserSignup, db: AsyncSession = Depends(get_db)) -> UserSignupResponse:
    user = await signup_user(user_data, db)
    return UserSignupResponse(message="User created successfully", user=UserResponse.model_validate(user))


# ============================================================
# ✅ LOGIN
# ============================================================
@router.post("/login", response_model=UserLoginResponse)
async def login(
    user_data: UserLogin,
    response: Response,
    db: AsyncSession = Depends(get_db),
    settings: AppSettings = Depends(get_settings),
) -> UserLoginResponse:
    session, user = await login_user(user_data, db, session_lifetime(settings))
    set_session_cookie(response, session.id, session.expires_at, settings)
    return UserLoginResponse(message="Login successful", user=UserResponse.model_validate(user))


# ============================================================
# ✅ LOGOUT
# ============================================================
@router.post("/logout", response_model=UserLogoutResponse)
async def logout(
    request: Request,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: AppSettings = Depends(get_settings),
) -> UserLogoutResponse:
    await invalidate_session(request.state.session_id, db)
    clear_session_cookie(response, settings)
    logger.info(f"👋 User {current_user.id} logged out")
    return UserLogoutResponse(message="Logged out successfully")


# ============================================================
# ✅ CURRENT USER
# ============================================================
@router.get("/me", response_model=UserMeResponse)
async def me(current_user: User = Depends(get_current_user)) -> UserMeResponse:
    return UserMeResponse(user=UserResponse.model_validate(current_user))
