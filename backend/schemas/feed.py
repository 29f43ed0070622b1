from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, field_validator

from models.feed_inventory import FeedType
from schemas.base import CamelModel, blank_to_none, check_choice
from utils.dates import as_datetime


class FeedInventoryBase(CamelModel):
    feed_type: FeedType
    quantity: float
    unit: str = "kg"
    min_threshold: float
    cost: Optional[float] = None
    supplier: Optional[str] = None
    last_restocked: Optional[datetime] = None
    expiry_date: Optional[datetime] = None

    @field_validator('cost', 'supplier', 'last_restocked', 'expiry_date', mode='before')
    @classmethod
    def empty_as_null(cls, v):
        return blank_to_none(v)

    @field_validator('unit', mode='before')
    @classmethod
    def default_unit(cls, v):
        return blank_to_none(v) or "kg"

    @field_validator('feed_type', mode='before')
    @classmethod
    def validate_feed_type(cls, v):
        return check_choice(v, FeedType, "Valid feed type is required")

    @field_validator('min_threshold')
    @classmethod
    def validate_min_threshold(cls, v):
        if v < 0:
            raise ValueError('Valid minimum threshold (0 or greater) is required')
        return v

    @field_validator('last_restocked', 'expiry_date')
    @classmethod
    def as_local_time(cls, v):
        return as_datetime(v) if v is not None else v


class FeedInventoryCreate(FeedInventoryBase):
    @field_validator('quantity')
    @classmethod
    def validate_quantity(cls, v):
        if v <= 0:
            raise ValueError('Valid quantity (greater than 0) is required')
        return v


class FeedInventoryUpdate(FeedInventoryBase):
    @field_validator('quantity')
    @classmethod
    def validate_quantity(cls, v):
        if v < 0:
            raise ValueError('Valid quantity (0 or greater) is required')
        return v


class FeedInventoryBrief(CamelModel):
    id: int
    feed_type: FeedType


class FeedRecordBase(CamelModel):
    inventory_id: int
    date: date
    quantity_used: float
    notes: Optional[str] = None


class FeedRecord(FeedRecordBase):
    id: int
    created_at: datetime


class FeedRecordWithInventory(FeedRecord):
    inventory: Optional[FeedInventoryBrief] = None


class FeedUsageCreate(FeedRecordBase):
    @field_validator('notes', mode='before')
    @classmethod
    def empty_as_null(cls, v):
        return blank_to_none(v)

    @field_validator('quantity_used')
    @classmethod
    def validate_quantity_used(cls, v):
        if v <= 0:
            raise ValueError('Valid quantity used (greater than 0) is required')
        return v


class FeedRestock(CamelModel):
    inventory_id: int
    quantity_added: float
    cost: Optional[float] = None
    supplier: Optional[str] = None
    expiry_date: Optional[datetime] = None

    @field_validator('cost', 'supplier', 'expiry_date', mode='before')
    @classmethod
    def empty_as_null(cls, v):
        return blank_to_none(v)

    @field_validator('quantity_added')
    @classmethod
    def validate_quantity_added(cls, v):
        if v <= 0:
            raise ValueError('Valid quantity added (greater than 0) is required')
        return v

    @field_validator('expiry_date')
    @classmethod
    def as_local_time(cls, v):
        return as_datetime(v) if v is not None else v


class FeedCounts(CamelModel):
    feed_records: int


class FeedInventory(FeedInventoryBase):
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class FeedInventoryDetail(FeedInventory):
    feed_records: List[FeedRecord] = []
    counts: Optional[FeedCounts] = Field(default=None, alias="_count")
    stock_status: str
    days_until_restock: Optional[int] = None
    expiring_soon: bool = False


class FeedStats(CamelModel):
    total_items: int
    low_stock: int
    expired: int
    total_value: float
    total_quantity: float
    expiring_soon: int
