from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from starlette import status

import crud.users as crud_users
from database import get_db
from schemas.users import User as UserSchema, UserCreate, UserUpdate
from utils.auth_utils import RequestContext, get_user_identifier, require_admin

import logging
logger = logging.getLogger(__name__)

# Employee management is restricted to administrators
router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=List[UserSchema])
def get_users(db: Session = Depends(get_db), ctx: RequestContext = Depends(require_admin)):
    return crud_users.get_users(db)


@router.post("", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_admin)):
    db_user = crud_users.create_user(db, user)
    logger.info(f"User '{db_user.email}' ({db_user.role.value}) created by {get_user_identifier(ctx)}")
    return db_user


@router.patch("/{user_id}", response_model=UserSchema)
def update_user(
    user_id: int,
    user: UserUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_admin),
):
    db_user = crud_users.update_user(db, user_id, user)
    logger.info(f"User '{db_user.email}' (ID: {user_id}) updated by {get_user_identifier(ctx)}")
    return db_user


@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_admin)):
    db_user = crud_users.delete_user(db, user_id, acting_user_id=ctx.user_id)
    logger.info(f"User '{db_user.email}' (ID: {user_id}) deleted by {get_user_identifier(ctx)}")
    return {"success": True}
