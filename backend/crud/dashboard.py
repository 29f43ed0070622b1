"""
Dashboard aggregator.

Builds the rollups behind ``GET /api/dashboard/stats``: gap-filled milk and herd
size series per day, month or year, plus point-in-time totals for the herd,
milk, upcoming health work and feed levels.
"""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

import crud.feed as crud_feed
import crud.health_record as crud_health
import crud.milk_record as crud_milk
from exceptions import ValidationError
from models.cattle import Cattle, CattleCategory, CattleStatus, Gender
from models.daily_summary import DailySummary
from models.feed_inventory import FeedType
from schemas.dashboard import (
    CattleChartPoint,
    CattleTotals,
    DashboardStats,
    FeedTotals,
    HealthTotals,
    MilkChartPoint,
    MilkTotals,
)
from utils.stats import (
    DAILY,
    MAX_PERIODS,
    MONTHLY,
    YEARLY,
    bucket_totals,
    enumerate_periods,
    period_count,
    period_key,
    round_half_up,
    window_start,
)

logger = logging.getLogger(__name__)

DASHBOARD_VIEWS = (DAILY, MONTHLY, YEARLY)
HEALTH_DUE_DAYS = 7


def normalize_view(view: Optional[str]) -> str:
    return view if view in DASHBOARD_VIEWS else DAILY


def validate_range(view: str, start: date, end: date):
    if start > end:
        raise ValidationError("startDate must not be after endDate")
    if period_count(view, start, end) > MAX_PERIODS:
        raise ValidationError(f"Date range is limited to {MAX_PERIODS} {view} periods")


def milk_window(view: str, today: date, start: Optional[date] = None, end: Optional[date] = None):
    """An explicit range is only honored for the daily view and only when both ends are set."""
    if view == DAILY and start is not None and end is not None:
        validate_range(view, start, end)
        return start, end
    return window_start(view, today), today


def count_active(db: Session, *criteria) -> int:
    return db.query(Cattle).filter(Cattle.status == CattleStatus.ACTIVE, *criteria).count()


def milk_chart(db: Session, view: str, start: date, end: date) -> List[MilkChartPoint]:
    daily_totals = crud_milk.liters_by_day(db, start, end)
    buckets = bucket_totals(view, start, end, daily_totals)
    return [
        MilkChartPoint(period=b["period"], key=b["key"], liters=int(round_half_up(b["value"])))
        for b in buckets
    ]


def cattle_chart(db: Session, view: str, start: date, end: date, fallback_total: int) -> List[CattleChartPoint]:
    """
    Herd size per period from the daily summaries.

    Monthly and yearly buckets take the last summary of the period. Periods
    without any summary report the current active herd size and are marked
    ``estimated``.
    """
    summaries = (
        db.query(DailySummary)
        .filter(DailySummary.date.between(start, end))
        .order_by(DailySummary.date.asc())
        .all()
    )
    by_period = {}
    for summary in summaries:
        by_period[period_key(view, summary.date, start)] = summary.total_cattle

    chart = []
    for key, label in enumerate_periods(view, start, end):
        count = by_period.get(key)
        chart.append(CattleChartPoint(
            period=label,
            key=key,
            count=fallback_total if count is None else count,
            estimated=count is None,
        ))
    return chart


def get_dashboard_stats(
    db: Session,
    now: datetime,
    milk_view: Optional[str] = None,
    cattle_view: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> DashboardStats:
    today = now.date()
    milk_view = normalize_view(milk_view)
    cattle_view = normalize_view(cattle_view)

    total_cattle = count_active(db)
    cattle = CattleTotals(
        total=total_cattle,
        male=count_active(db, Cattle.gender == Gender.MALE),
        female=count_active(db, Cattle.gender == Gender.FEMALE),
        calves=count_active(db, Cattle.category == CattleCategory.CALF),
        chart_data=cattle_chart(db, cattle_view, window_start(cattle_view, today), today, total_cattle),
    )

    milk_start, milk_end = milk_window(milk_view, today, start_date, end_date)
    week_liters = crud_milk.sum_liters(db, crud_milk.week_start(today), today)
    active_cows = count_active(db, Cattle.category == CattleCategory.COW)
    avg_per_cow = round_half_up(week_liters / active_cows / 7, 1) if active_cows and week_liters else 0.0
    milk = MilkTotals(
        today=crud_milk.sum_liters(db, today, today),
        this_week=week_liters,
        avg_per_cow=avg_per_cow,
        chart_data=milk_chart(db, milk_view, milk_start, milk_end),
    )

    health = HealthTotals(due=crud_health.count_due_between(db, now, now + timedelta(days=HEALTH_DUE_DAYS)))

    feed_levels = crud_feed.get_feed_levels(db)
    first_of_type = {}
    for item in feed_levels:
        first_of_type.setdefault(item.feed_type, item)
    silage = first_of_type.get(FeedType.SILAGE)
    feed = FeedTotals(
        total=sum(item.quantity for item in feed_levels),
        hay=first_of_type[FeedType.HAY].quantity if FeedType.HAY in first_of_type else 0.0,
        concentrate=first_of_type[FeedType.CONCENTRATE].quantity if FeedType.CONCENTRATE in first_of_type else 0.0,
        silage=silage.quantity if silage else 0.0,
        silage_low=bool(silage) and silage.quantity < silage.min_threshold,
    )

    logger.info(
        "Dashboard stats computed (milk_view=%s, cattle_view=%s, milk window %s..%s)",
        milk_view, cattle_view, milk_start, milk_end,
    )
    return DashboardStats(cattle=cattle, milk=milk, health=health, feed=feed)
