from datetime import date, datetime
from typing import List, Optional

from pydantic import field_validator

from models.milk_record import MilkQuality, MilkSession
from schemas.base import CamelModel, blank_to_none, check_choice
from schemas.cattle import CattleBrief


class MilkRecordBase(CamelModel):
    cattle_id: Optional[int] = None
    date: date
    liters: float
    session: MilkSession
    quality: MilkQuality = MilkQuality.GOOD
    notes: Optional[str] = None

    @field_validator('cattle_id', 'notes', mode='before')
    @classmethod
    def empty_as_null(cls, v):
        return blank_to_none(v)

    @field_validator('liters')
    @classmethod
    def validate_liters(cls, v):
        if v <= 0:
            raise ValueError('Valid liters amount (greater than 0) is required')
        return v

    @field_validator('session', mode='before')
    @classmethod
    def validate_session(cls, v):
        return check_choice(v, MilkSession, "Valid session (MORNING, AFTERNOON, or EVENING) is required")

    @field_validator('quality', mode='before')
    @classmethod
    def validate_quality(cls, v):
        if v is None or v == "":
            return MilkQuality.GOOD
        return check_choice(v, MilkQuality, "Invalid quality value")


class MilkRecordCreate(MilkRecordBase):
    pass


class MilkRecord(MilkRecordBase):
    id: int
    cattle: Optional[CattleBrief] = None
    created_at: datetime


class MilkChartPoint(CamelModel):
    period: str
    key: str
    liters: float
    trend: float = 0.0


class TopPerformer(CamelModel):
    id: int
    tag_number: str
    name: str
    avg_daily: float
    total: float
    trend: float


class MilkSummary(CamelModel):
    view: str
    start_date: date
    end_date: date
    chart: List[MilkChartPoint]
    total_production: float
    average_production: float
    overall_trend: float
    top_performers: List[TopPerformer]
