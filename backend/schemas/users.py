from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from models.users import UserRole
from schemas.base import CamelModel, check_choice


def _validate_role(v):
    return check_choice(v, UserRole, "Invalid role")


class LoginRequest(BaseModel):
    email: str
    password: str


class UserCreate(CamelModel):
    email: str
    password: str
    name: str
    role: UserRole

    @field_validator('email', 'password', 'name', mode='before')
    @classmethod
    def validate_present(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError('Missing fields')
        return v

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()

    @field_validator('role', mode='before')
    @classmethod
    def validate_role(cls, v):
        if v is None or v == "":
            raise ValueError('Missing fields')
        return _validate_role(v)


class UserUpdate(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    role: Optional[UserRole] = None

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if v else v

    @field_validator('role', mode='before')
    @classmethod
    def validate_role(cls, v):
        if v is None or v == "":
            return None
        return _validate_role(v)


class User(CamelModel):
    id: int
    email: str
    name: str
    role: UserRole
    created_at: Optional[datetime] = None
