import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tareas_api.config import settings
from tareas_api.models.user import User

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash."""
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


def issue_token(user: User) -> str:
    """Issue the bearer token used by the mobile app."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "userId": user.id,
        "email": user.email,
        "iat": now,
        "exp": now + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> int:
    """Verify a bearer token. Returns the user id."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise ValueError("Invalid or expired token")

    user_id = payload.get("userId")
    if not isinstance(user_id, int):
        raise ValueError("Invalid or expired token")
    return user_id


async def register_user(db: AsyncSession, email: str, password: str) -> User:
    """Register a new user with email/password."""
    email = email.lower()
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none() is not None:
        raise ValueError("An account with this email already exists")

    user = User(email=email, password_hash=hash_password(password))
    db.add(user)
    await db.flush()
    await db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


async def login_with_email(db: AsyncSession, email: str, password: str) -> User:
    """Authenticate user with email/password."""
    result = await db.execute(select(User).where(User.email == email.lower()))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(password, user.password_hash):
        raise ValueError("Invalid email or password")

    return user
