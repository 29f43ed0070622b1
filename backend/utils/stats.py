"""
Derived indicators for the herd, milk, health and feed views.

Everything here is a pure function over data that has already been fetched;
values are recomputed on every request and never persisted.
"""
import math
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from utils.dates import add_months, as_datetime

DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
YEARLY = "yearly"

STOCK_GOOD = "GOOD"
STOCK_LOW = "LOW"
STOCK_EXPIRED = "EXPIRED"

RESTOCK_USAGE_WINDOW = 7
EXPIRY_WARNING_DAYS = 30
DUE_SOON_DAYS = 7
TREND_MIN = -100.0
TREND_MAX = 1000.0
# Upper bound on buckets produced for an explicit date range
MAX_PERIODS = 500

SECONDS_PER_DAY = 24 * 60 * 60


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _days_between(target, now: datetime) -> float:
    return (as_datetime(target) - now).total_seconds() / SECONDS_PER_DAY


# --- Feed ---------------------------------------------------------------

def days_until_restock(quantity: float, min_threshold: float, usage: Sequence[float]) -> Optional[int]:
    """
    Days until ``quantity`` falls to ``min_threshold`` at the recent usage rate.

    ``usage`` holds quantity-used values newest first; only the latest seven
    count towards the average. Returns None without usage history or when the
    average is not positive.
    """
    recent = list(usage)[:RESTOCK_USAGE_WINDOW]
    if not recent:
        return None
    avg_usage = sum(recent) / len(recent)
    if avg_usage <= 0:
        return None
    return math.floor((quantity - min_threshold) / avg_usage)


def stock_status(quantity: float, min_threshold: float, expiry_date, now: datetime) -> str:
    if expiry_date is not None and as_datetime(expiry_date) < now:
        return STOCK_EXPIRED
    if quantity <= min_threshold:
        return STOCK_LOW
    return STOCK_GOOD


def is_expiring_soon(expiry_date, now: datetime) -> bool:
    if expiry_date is None:
        return False
    days = math.ceil(_days_between(expiry_date, now))
    return 0 <= days <= EXPIRY_WARNING_DAYS


def feed_inventory_stats(items, now: datetime) -> dict:
    statuses = [stock_status(i.quantity, i.min_threshold, i.expiry_date, now) for i in items]
    return {
        "totalItems": len(items),
        "lowStock": statuses.count(STOCK_LOW),
        "expired": statuses.count(STOCK_EXPIRED),
        "totalValue": sum(i.cost * i.quantity for i in items if i.cost),
        "totalQuantity": sum(i.quantity for i in items),
        "expiringSoon": sum(1 for i in items if is_expiring_soon(i.expiry_date, now)),
    }


# --- Health -------------------------------------------------------------

def days_until_due(scheduled, now: datetime) -> int:
    """Whole days until ``scheduled``, rounded up; negative means overdue."""
    return math.ceil(_days_between(scheduled, now))


def is_due_soon(scheduled, now: datetime) -> bool:
    return 0 <= days_until_due(scheduled, now) <= DUE_SOON_DAYS


def health_stats(records, now: datetime) -> dict:
    pending = [r for r in records if r.status.value == "PENDING"]
    return {
        "total": len(records),
        "pending": len(pending),
        "overdue": sum(1 for r in records if r.status.value == "OVERDUE"),
        "completed": sum(1 for r in records if r.status.value == "COMPLETED"),
        "dueToday": sum(1 for r in pending if days_until_due(r.scheduled_date, now) == 0),
        "dueThisWeek": sum(1 for r in pending if is_due_soon(r.scheduled_date, now)),
        "totalCost": sum(r.cost or 0 for r in records),
    }


# --- Herd ---------------------------------------------------------------

def total_milk(milk_records) -> float:
    return sum(r.liters or 0 for r in milk_records)


def average_milk(milk_records) -> float:
    if not milk_records:
        return 0.0
    return total_milk(milk_records) / len(milk_records)


def herd_stats(herd, next_due_lookup, milk_lookup, now: datetime) -> dict:
    """
    Herd page totals.

    ``next_due_lookup`` maps cattle id to its earliest open health record and
    ``milk_lookup`` to its recent milk records.
    """
    medication_due = 0
    for animal in herd:
        next_record = next_due_lookup.get(animal.id)
        if next_record is not None and is_due_soon(next_record.scheduled_date, now):
            medication_due += 1
    return {
        "total": len(herd),
        "active": sum(1 for c in herd if c.status.value == "ACTIVE"),
        "females": sum(1 for c in herd if c.gender.value == "FEMALE"),
        "males": sum(1 for c in herd if c.gender.value == "MALE"),
        "totalOffspring": sum(len(c.offspring) for c in herd),
        "totalMilk": sum(total_milk(milk_lookup.get(c.id, [])) for c in herd),
        "medicationDue": medication_due,
    }


# --- Milk trends --------------------------------------------------------

def trend_percent(current: float, previous: float) -> float:
    """Period-over-period change in percent, clamped to [-100, 1000]."""
    if not previous or previous <= 0:
        return 0.0
    trend = (current - previous) / previous * 100
    if not math.isfinite(trend):
        return 0.0
    return max(TREND_MIN, min(TREND_MAX, trend))


def overall_trend(values: Sequence[float]) -> float:
    """Change of the last period against the one before it."""
    if len(values) < 2:
        return 0.0
    last, previous = values[-1] or 0, values[-2] or 0
    if not (math.isfinite(last) and math.isfinite(previous)):
        return 0.0
    if previous == 0:
        return 100.0 if last > 0 else 0.0
    return trend_percent(last, previous)


# --- Period bucketing ---------------------------------------------------

def window_start(view: str, today: date) -> date:
    if view == MONTHLY:
        return add_months(today.replace(day=1), -5)
    if view == YEARLY:
        return date(today.year - 4, 1, 1)
    if view == WEEKLY:
        return today - timedelta(days=27)
    return today - timedelta(days=6)


def period_key(view: str, day: date, start: date) -> str:
    if view == MONTHLY:
        return day.strftime("%Y-%m")
    if view == YEARLY:
        return str(day.year)
    if view == WEEKLY:
        return f"W{(day - start).days // 7 + 1}"
    return day.isoformat()


def period_label(view: str, day: date, start: date) -> str:
    if view == MONTHLY:
        return day.strftime("%b")
    if view == DAILY:
        return day.strftime("%a")
    return period_key(view, day, start)


def period_count(view: str, start: date, end: date) -> int:
    """Number of buckets ``enumerate_periods`` yields for the range, without the cap."""
    if end < start:
        return 0
    if view == MONTHLY:
        return (end.year * 12 + end.month) - (start.year * 12 + start.month) + 1
    if view == YEARLY:
        return end.year - start.year + 1
    if view == WEEKLY:
        return (end - start).days // 7 + 1
    return (end - start).days + 1


def enumerate_periods(view: str, start: date, end: date) -> List[Tuple[str, str]]:
    """
    Every (key, label) between ``start`` and ``end`` inclusive, one per step.

    Months and years are enumerated from the first day of the period that
    contains ``start`` so that a mid-period start still yields its bucket.
    """
    if view == MONTHLY:
        current = start.replace(day=1)
    elif view == YEARLY:
        current = date(start.year, 1, 1)
    else:
        current = start

    periods = []
    while current <= end and len(periods) < MAX_PERIODS:
        periods.append((period_key(view, current, start), period_label(view, current, start)))
        if view == MONTHLY:
            current = add_months(current, 1)
        elif view == YEARLY:
            current = date(current.year + 1, 1, 1)
        elif view == WEEKLY:
            current = current + timedelta(days=7)
        else:
            current = current + timedelta(days=1)
    return periods


def bucket_totals(view: str, start: date, end: date, entries: Iterable[Tuple[date, float]]) -> List[dict]:
    """Sum ``(day, value)`` pairs into gap-filled period buckets."""
    periods = enumerate_periods(view, start, end)
    totals = {key: 0.0 for key, _ in periods}
    for day, value in entries:
        if day < start or day > end:
            continue
        key = period_key(view, day, start)
        if key in totals:
            totals[key] += value or 0
    return [{"period": label, "key": key, "value": totals[key]} for key, label in periods]


def milk_chart(records, view: str, today: date, start: Optional[date] = None, end: Optional[date] = None) -> List[dict]:
    """Milk Production chart: liters per period with the change against the previous period."""
    if start is None or end is None:
        start, end = window_start(view, today), today
    buckets = bucket_totals(view, start, end, ((r.date, r.liters) for r in records))
    chart = []
    previous = None
    for bucket in buckets:
        liters = bucket["value"]
        trend = trend_percent(liters, previous) if previous is not None else 0.0
        chart.append({"period": bucket["period"], "key": bucket["key"], "liters": liters, "trend": trend})
        previous = liters
    return chart


def top_performers(records, now: datetime, limit: int = 5) -> List[dict]:
    """
    Best cows by average liters per record.

    The trend compares the average of the last seven days with the seven days
    before that. Records without a cow are ignored.
    """
    one_week_ago = now - timedelta(days=7)
    two_weeks_ago = now - timedelta(days=14)
    per_cow = {}
    for record in records:
        if record.cattle is None:
            continue
        stats = per_cow.setdefault(record.cattle.id, {
            "tagNumber": record.cattle.tag_number,
            "name": record.cattle.name or "",
            "total": 0.0, "count": 0,
            "recentTotal": 0.0, "recentCount": 0,
            "previousTotal": 0.0, "previousCount": 0,
        })
        liters = record.liters or 0
        stats["total"] += liters
        stats["count"] += 1
        recorded_at = as_datetime(record.date)
        if recorded_at >= one_week_ago:
            stats["recentTotal"] += liters
            stats["recentCount"] += 1
        elif recorded_at >= two_weeks_ago:
            stats["previousTotal"] += liters
            stats["previousCount"] += 1

    performers = []
    for cattle_id, stats in per_cow.items():
        recent_avg = stats["recentTotal"] / stats["recentCount"] if stats["recentCount"] else 0.0
        previous_avg = stats["previousTotal"] / stats["previousCount"] if stats["previousCount"] else 0.0
        performers.append({
            "id": cattle_id,
            "tagNumber": stats["tagNumber"],
            "name": stats["name"],
            "avgDaily": stats["total"] / stats["count"] if stats["count"] else 0.0,
            "total": stats["total"],
            "trend": trend_percent(recent_avg, previous_avg),
        })
    performers.sort(key=lambda p: p["avgDaily"], reverse=True)
    return performers[:limit]
