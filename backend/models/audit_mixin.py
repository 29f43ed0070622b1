from sqlalchemy import Column, DateTime
from utils.dates import aware_now


class TimestampMixin:
    """Mixin that provides created/updated timestamps.

    DateTime(timezone=True) keeps the APP_TIMEZONE offset on databases that
    support it. ``created_at`` drives the newest-first ordering of list endpoints.
    """
    created_at = Column(DateTime(timezone=True), default=aware_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=aware_now, onupdate=aware_now)
