from datetime import datetime
from typing import Optional

from pydantic import field_validator

from models.health_record import HealthRecordType, HealthStatus, VaccinationType
from schemas.base import CamelModel, blank_to_none, check_choice
from schemas.cattle import CattleBrief
from utils.dates import as_datetime


class HealthRecordBase(CamelModel):
    cattle_id: int
    record_type: HealthRecordType
    vaccination_type: Optional[VaccinationType] = None
    description: str
    scheduled_date: datetime
    completed_date: Optional[datetime] = None
    status: HealthStatus = HealthStatus.PENDING
    veterinarian: Optional[str] = None
    cost: Optional[float] = None
    notes: Optional[str] = None

    @field_validator('vaccination_type', 'completed_date', 'veterinarian', 'cost', 'notes', mode='before')
    @classmethod
    def empty_as_null(cls, v):
        return blank_to_none(v)

    @field_validator('record_type', mode='before')
    @classmethod
    def validate_record_type(cls, v):
        return check_choice(v, HealthRecordType, "Valid record type is required")

    @field_validator('vaccination_type', mode='before')
    @classmethod
    def validate_vaccination_type(cls, v):
        if v is None or v == "":
            return None
        return check_choice(v, VaccinationType, "Invalid vaccination type")

    @field_validator('status', mode='before')
    @classmethod
    def validate_status(cls, v):
        if v is None or v == "":
            return HealthStatus.PENDING
        return check_choice(v, HealthStatus, "Invalid status value")

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        if not v.strip():
            raise ValueError('Description is required')
        return v

    @field_validator('scheduled_date', 'completed_date')
    @classmethod
    def as_local_time(cls, v):
        # Stored naive, in APP_TIMEZONE wall-clock time
        return as_datetime(v) if v is not None else v

    @field_validator('cost')
    @classmethod
    def validate_cost(cls, v):
        if v is not None and v < 0:
            raise ValueError('Cost must be 0 or greater')
        return v


class HealthRecordCreate(HealthRecordBase):
    pass


class HealthRecordUpdate(HealthRecordBase):
    pass


class HealthRecordComplete(CamelModel):
    id: int
    notes: Optional[str] = None


class HealthRecord(HealthRecordBase):
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class HealthRecordWithCattle(HealthRecord):
    cattle: Optional[CattleBrief] = None
    days_until_due: Optional[int] = None


class HealthStats(CamelModel):
    total: int
    pending: int
    overdue: int
    completed: int
    due_today: int
    due_this_week: int
    total_cost: float
