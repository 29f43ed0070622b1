from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

import crud.users as crud_users
from database import get_db
from exceptions import AuthenticationError
from schemas.users import LoginRequest, User as UserSchema
from utils.auth_utils import (
    SESSION_COOKIE_NAME,
    SESSION_EXPIRE_HOURS,
    RequestContext,
    create_session_token,
    get_current_user,
    verify_password,
)

import logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
def login(credentials: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Verify the credentials and set the session cookie."""
    user = crud_users.get_user_by_email(db, credentials.email)
    if user is None or not verify_password(credentials.password, user.hashed_password):
        logger.warning("Failed login attempt for %s", credentials.email)
        raise AuthenticationError("Invalid credentials")

    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=create_session_token(user),
        max_age=SESSION_EXPIRE_HOURS * 60 * 60,
        httponly=True,
        samesite="lax",
    )
    logger.info("User %s logged in", user.email)
    return {"success": True}


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {"success": True}


@router.get("/me", response_model=UserSchema)
def me(ctx: RequestContext = Depends(get_current_user), db: Session = Depends(get_db)):
    return crud_users.get_user(db, ctx.user_id)
