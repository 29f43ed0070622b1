from datetime import date, datetime
from typing import Optional

from pydantic import field_validator

from models.cattle import CattleCategory, CattleStatus, Gender
from schemas.base import CamelModel, blank_to_none, check_choice


class CattleSummary(CamelModel):
    id: int
    tag_number: str
    name: Optional[str] = None


class CattleBrief(CattleSummary):
    breed: Optional[str] = None
    category: Optional[CattleCategory] = None


class CattleBase(CamelModel):
    tag_number: str
    name: Optional[str] = None
    gender: Gender
    breed: str
    date_of_birth: date
    weight: Optional[float] = None  # kg
    image_url: Optional[str] = None
    status: CattleStatus = CattleStatus.ACTIVE
    category: CattleCategory
    mother_id: Optional[int] = None

    @field_validator('tag_number', 'breed')
    @classmethod
    def validate_required_text(cls, v, info):
        if not v.strip():
            label = "Tag number" if info.field_name == 'tag_number' else "Breed"
            raise ValueError(f"{label} is required")
        return v.strip()

    @field_validator('gender', mode='before')
    @classmethod
    def validate_gender(cls, v):
        return check_choice(v, Gender, "Valid gender (MALE or FEMALE) is required")

    @field_validator('category', mode='before')
    @classmethod
    def validate_category(cls, v):
        return check_choice(v, CattleCategory, "Valid category is required")

    @field_validator('status', mode='before')
    @classmethod
    def validate_status(cls, v):
        if v is None or v == "":
            return CattleStatus.ACTIVE
        return check_choice(v, CattleStatus, "Invalid status value")

    @field_validator('name', 'image_url', 'mother_id', 'weight', mode='before')
    @classmethod
    def empty_as_null(cls, v):
        return blank_to_none(v)

    @field_validator('weight')
    @classmethod
    def validate_weight(cls, v):
        if v is not None and v <= 0:
            raise ValueError('Weight must be greater than 0')
        return v


class CattleCreate(CattleBase):
    pass


class CattleUpdate(CattleBase):
    pass


class Cattle(CattleBase):
    id: int
    mother: Optional[CattleSummary] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
