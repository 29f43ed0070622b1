from sqlalchemy import Column, Integer, Float, Date
from database import Base
from models.audit_mixin import TimestampMixin


class DailySummary(Base, TimestampMixin):
    """One rollup row per calendar day; feeds the herd-size chart on the dashboard."""
    __tablename__ = "daily_summaries"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, unique=True, index=True, nullable=False)
    total_cattle = Column(Integer, default=0, nullable=False)
    male_count = Column(Integer, default=0, nullable=False)
    female_count = Column(Integer, default=0, nullable=False)
    calf_count = Column(Integer, default=0, nullable=False)
    total_milk_liters = Column(Float, default=0.0, nullable=False)
    avg_milk_per_cow = Column(Float, default=0.0, nullable=False)
    feed_hay_used = Column(Float, default=0.0, nullable=False)
    feed_concentrate_used = Column(Float, default=0.0, nullable=False)
    feed_silage_used = Column(Float, default=0.0, nullable=False)
