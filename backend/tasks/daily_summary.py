import logging
from datetime import date

from sqlalchemy.orm import Session

from crud.feed import usage_by_type
from crud.milk_record import sum_liters
from database import SessionLocal
from models.cattle import Cattle, CattleCategory, CattleStatus, Gender
from models.daily_summary import DailySummary
from models.feed_inventory import FeedType
from utils.dates import local_today
from utils.stats import round_half_up

logger = logging.getLogger(__name__)


def build_daily_summary(db: Session, day: date) -> DailySummary:
    """
    Create or refresh the DailySummary row for ``day`` from live data.

    Herd counts are taken as of the moment the job runs; milk and feed totals
    are those recorded for ``day``.
    """
    active = db.query(Cattle).filter(Cattle.status == CattleStatus.ACTIVE).all()
    total_milk = sum_liters(db, day, day)
    feed_used = usage_by_type(db, day)

    summary = db.query(DailySummary).filter(DailySummary.date == day).first()
    if summary is None:
        summary = DailySummary(date=day)
        db.add(summary)

    summary.total_cattle = len(active)
    summary.male_count = sum(1 for c in active if c.gender == Gender.MALE)
    summary.female_count = sum(1 for c in active if c.gender == Gender.FEMALE)
    summary.calf_count = sum(1 for c in active if c.category == CattleCategory.CALF)
    summary.total_milk_liters = round_half_up(total_milk, 1)
    summary.avg_milk_per_cow = round_half_up(total_milk / len(active), 1) if active else 0.0
    summary.feed_hay_used = round_half_up(feed_used.get(FeedType.HAY, 0.0), 1)
    summary.feed_concentrate_used = round_half_up(feed_used.get(FeedType.CONCENTRATE, 0.0), 1)
    summary.feed_silage_used = round_half_up(feed_used.get(FeedType.SILAGE, 0.0), 1)

    db.commit()
    db.refresh(summary)
    return summary


def run_daily_summary():
    """Scheduler entry point: snapshot today's figures in a session of its own."""
    day = local_today()
    logger.info(f"Building daily summary for {day}")
    db: Session = SessionLocal()
    try:
        summary = build_daily_summary(db, day)
        logger.info(
            f"Daily summary for {day}: {summary.total_cattle} active cattle, "
            f"{summary.total_milk_liters} L milk"
        )
    except Exception:
        db.rollback()
        logger.exception(f"Failed to build daily summary for {day}")
        raise
    finally:
        db.close()
