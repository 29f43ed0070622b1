import os
from datetime import date, datetime

import pytz
from dotenv import load_dotenv

load_dotenv()

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "UTC")


def local_tz():
    return pytz.timezone(APP_TIMEZONE)


def aware_now() -> datetime:
    """Timezone-aware now, used for persisted timestamps."""
    return datetime.now(local_tz())


def local_now() -> datetime:
    """Naive wall-clock now in the farm's timezone, used for date arithmetic."""
    return aware_now().replace(tzinfo=None)


def local_today() -> date:
    return local_now().date()


def as_datetime(value) -> datetime:
    """Promote a date to midnight; strip tzinfo from aware datetimes."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(local_tz()).replace(tzinfo=None)
        return value
    return datetime(value.year, value.month, value.day)


def add_months(day: date, months: int) -> date:
    """Shift a first-of-month date by a number of months."""
    month_index = day.year * 12 + (day.month - 1) + months
    return date(month_index // 12, month_index % 12 + 1, 1)
