import os
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, Request
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from database import get_db
from exceptions import AuthenticationError, PermissionDeniedError
from models.users import User, UserRole
from utils.dates import aware_now

load_dotenv()

logger = logging.getLogger(__name__)

# Secret key used to sign the session cookie
SECRET_KEY = os.getenv("SECRET_KEY", "dev-insecure-secret-change-me")
# Algorithm used to sign the session cookie
ALGORITHM = "HS256"
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "session")
SESSION_EXPIRE_HOURS = int(os.getenv("SESSION_EXPIRE_HOURS", "24"))

bcrypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class RequestContext:
    """The authenticated caller, resolved once per request and passed to handlers."""
    user_id: int
    email: str
    name: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def hash_password(password: str) -> str:
    return bcrypt_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt_context.verify(password, hashed_password)
    except ValueError:
        # Unparseable hashes (e.g. placeholder seed values) never match
        return False


def create_session_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    expire = aware_now() + (expires_delta or timedelta(hours=SESSION_EXPIRE_HOURS))
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "name": user.name,
        "role": user.role.value,
        "exp": expire,
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def decode_session_token(token: str) -> dict:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise AuthenticationError("Session has expired")
    except JWTError:
        raise AuthenticationError("Invalid session")


def get_current_user(request: Request, db: Session = Depends(get_db)) -> RequestContext:
    """
    FastAPI dependency that resolves the session cookie into a RequestContext.

    The user is re-read from the database so that deleted accounts and role
    changes take effect without waiting for the cookie to expire.
    """
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        raise AuthenticationError("Not authenticated")

    payload = decode_session_token(token)
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid session")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        logger.warning("Session presented for missing user id %s", user_id)
        raise AuthenticationError("Invalid session")

    return RequestContext(user_id=user.id, email=user.email, name=user.name, role=user.role)


def require_admin(ctx: RequestContext = Depends(get_current_user)) -> RequestContext:
    if not ctx.is_admin:
        logger.warning("User %s (%s) denied admin-only access", ctx.email, ctx.role.value)
        raise PermissionDeniedError("Unauthorized")
    return ctx


def get_user_identifier(ctx: RequestContext) -> str:
    return ctx.email or str(ctx.user_id)
