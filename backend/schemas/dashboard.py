from typing import List

from schemas.base import CamelModel


class CattleChartPoint(CamelModel):
    period: str
    key: str
    count: int
    # True when no daily summary covers the period and the current herd size was used
    estimated: bool = False


class MilkChartPoint(CamelModel):
    period: str
    key: str
    liters: int


class CattleTotals(CamelModel):
    total: int
    male: int
    female: int
    calves: int
    chart_data: List[CattleChartPoint]


class MilkTotals(CamelModel):
    today: float
    this_week: float
    avg_per_cow: float
    chart_data: List[MilkChartPoint]


class HealthTotals(CamelModel):
    due: int


class FeedTotals(CamelModel):
    total: float
    hay: float
    concentrate: float
    silage: float
    silage_low: bool


class DashboardStats(CamelModel):
    cattle: CattleTotals
    milk: MilkTotals
    health: HealthTotals
    feed: FeedTotals
