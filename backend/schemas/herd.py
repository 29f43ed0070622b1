from typing import List, Optional

from pydantic import Field

from schemas.base import CamelModel
from schemas.cattle import Cattle, CattleSummary
from schemas.health_record import HealthRecord
from schemas.milk_record import MilkRecordBase


class CattleCounts(CamelModel):
    offspring: int
    milk_records: int


class HerdMilkRecord(MilkRecordBase):
    id: int


class CattleDetail(Cattle):
    offspring: List[CattleSummary] = []
    # At most one entry: the earliest open (PENDING/OVERDUE) record
    health_records: List[HealthRecord] = []
    milk_records: List[HerdMilkRecord] = []
    counts: CattleCounts = Field(alias="_count")
    average_daily_milk: float = 0.0
    days_until_next_due: Optional[int] = None


class HerdStats(CamelModel):
    total: int
    active: int
    females: int
    males: int
    total_offspring: int
    total_milk: float
    medication_due: int
