from typing import List

from sqlalchemy.orm import Session

from exceptions import ConflictError, NotFoundError, ValidationError
from models.users import User
from schemas.users import UserCreate, UserUpdate
from utils.auth_utils import hash_password


def get_user(db: Session, user_id: int) -> User:
    db_user = db.query(User).filter(User.id == user_id).first()
    if db_user is None:
        raise NotFoundError("User not found")
    return db_user


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email.strip().lower()).first()


def get_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


def create_user(db: Session, user: UserCreate) -> User:
    if get_user_by_email(db, user.email):
        raise ConflictError("User already exists")
    db_user = User(
        email=user.email,
        hashed_password=hash_password(user.password),
        name=user.name,
        role=user.role,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_user(db: Session, user_id: int, user: UserUpdate) -> User:
    db_user = get_user(db, user_id)
    if user.email and user.email != db_user.email:
        if get_user_by_email(db, user.email):
            raise ConflictError("User already exists")
        db_user.email = user.email
    if user.name:
        db_user.name = user.name
    if user.role is not None:
        db_user.role = user.role
    if user.password:
        db_user.hashed_password = hash_password(user.password)
    db.commit()
    db.refresh(db_user)
    return db_user


def delete_user(db: Session, user_id: int, acting_user_id: int) -> User:
    if user_id == acting_user_id:
        raise ValidationError("Cannot delete yourself")
    db_user = get_user(db, user_id)
    db.delete(db_user)
    db.commit()
    return db_user
