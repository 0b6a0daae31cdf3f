import logging
from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.helpers.exceptions import DuplicateEmail, Forbidden, InvalidCredentials, Unauthorized
from app.helpers.time import as_utc, utcnow
from app.users.auth_session_model.session_model import Session
from app.users.security import (
    generate_session_token,
    get_password_hash,
    get_session_expiry,
    verify_password,
)
from app.users.user_models.schemas import UserLogin, UserSignup
from app.users.user_models.user_model import User

logger = logging.getLogger(__name__)


# ============================================================
# ✅ SIGNUP A NEW USER
# ============================================================
async def signup_user(user_data: UserSignup, db: AsyncSession) -> User:
    # Check if user already exists
    result = await db.execute(select(User).where(User.email == user_data.email))
    if result.scalars().first():
        raise DuplicateEmail()

    new_user = User(
        email=user_data.email,
        hashed_password=await get_password_hash(user_data.password),
        role=user_data.role,
    )

    db.add(new_user)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise DuplicateEmail() from exc
    await db.refresh(new_user)

    logger.info(f"👤 Registered user {new_user.id} ({new_user.role})")
    return new_user


# ============================================================
# ✅ AUTHENTICATE USER
# ============================================================
async def authenticate_user(email: str, password: str, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalars().first()

    # Always run a verification so unknown emails take as long as wrong passwords
    valid = await verify_password(password, user.hashed_password if user else None)
    if not user or not valid:
        return None

    return user


# ============================================================
# ✅ CREATE SESSION
# ============================================================
async def create_session(user: User, db: AsyncSession, lifetime: timedelta) -> Session:
    session = Session(id=generate_session_token(), user_id=user.id, expires_at=get_session_expiry(lifetime))
    db.add(session)
    await db.commit()
    return session


# ============================================================
# ✅ LOGIN USER
# ============================================================
async def login_user(user_data: UserLogin, db: AsyncSession, lifetime: timedelta) -> Tuple[Session, User]:
    user = await authenticate_user(user_data.email, user_data.password, db)
    if not user:
        logger.info("🔒 Failed login attempt")
        raise InvalidCredentials()

    session = await create_session(user, db, lifetime)
    logger.info(f"🔓 User {user.id} logged in")
    return session, user


# ============================================================
# ✅ VALIDATE SESSION
# ============================================================
async def validate_session(
    token: Optional[str], db: AsyncSession, lifetime: timedelta
) -> Tuple[Optional[User], Optional[Session], bool]:
    """
    Resolve a session token to its user.

    Returns (user, session, refreshed). Anonymous requests get (None, None, False);
    this never raises for a missing, unknown or expired token.
    `refreshed` is True when the expiry was pushed forward and the cookie
    should be re-issued.
    """
    if not token:
        return None, None, False

    result = await db.execute(
        select(Session).where(Session.id == token).execution_options(populate_existing=True)
    )
    session = result.scalars().first()
    if not session:
        return None, None, False

    if session.is_expired() or session.user is None:
        await db.delete(session)
        await db.commit()
        return None, None, False

    # Sliding expiry: once past half its lifetime, extend the session
    refreshed = False
    if as_utc(session.expires_at) - utcnow() < lifetime / 2:
        session.expires_at = utcnow() + lifetime
        await db.commit()
        refreshed = True

    return session.user, session, refreshed


# ============================================================
# ✅ LOGOUT USER
# ============================================================
async def invalidate_session(token: str, db: AsyncSession) -> None:
    await db.execute(delete(Session).where(Session.id == token))
    await db.commit()


# ============================================================
# ✅ AUTHORIZE
# ============================================================
def authorize(user: Optional[User], allowed_roles: Optional[Tuple[str, ...]] = None) -> User:
    if user is None:
        raise Unauthorized()
    if allowed_roles and user.role not in allowed_roles:
        raise Forbidden()
    return user
