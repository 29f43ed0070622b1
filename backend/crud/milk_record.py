from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from exceptions import ValidationError
from models.cattle import Cattle
from models.milk_record import MilkRecord, MilkSession
from schemas.milk_record import MilkRecordCreate

MILK_RECORD_LIMIT = 100


def get_milk_records(
    db: Session,
    cattle_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    session: Optional[MilkSession] = None,
    limit: Optional[int] = MILK_RECORD_LIMIT,
) -> List[MilkRecord]:
    query = db.query(MilkRecord).options(joinedload(MilkRecord.cattle))
    if cattle_id is not None:
        query = query.filter(MilkRecord.cattle_id == cattle_id)
    # A date range only applies when both ends are given
    if start_date is not None and end_date is not None:
        query = query.filter(MilkRecord.date.between(start_date, end_date))
    if session is not None:
        query = query.filter(MilkRecord.session == session)
    query = query.order_by(MilkRecord.date.desc(), MilkRecord.id.desc())
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def create_milk_record(db: Session, record: MilkRecordCreate) -> MilkRecord:
    if record.cattle_id is not None:
        if db.query(Cattle.id).filter(Cattle.id == record.cattle_id).first() is None:
            raise ValidationError("Invalid cattle ID")

    db_record = MilkRecord(**record.model_dump())
    db.add(db_record)
    db.commit()
    db.refresh(db_record)
    return db_record


def sum_liters(db: Session, start: date, end: date) -> float:
    """Total liters collected between two days, inclusive."""
    total = db.query(func.sum(MilkRecord.liters)).filter(MilkRecord.date.between(start, end)).scalar()
    return float(total or 0)


def liters_by_day(db: Session, start: date, end: date):
    return (
        db.query(MilkRecord.date, func.sum(MilkRecord.liters))
        .filter(MilkRecord.date.between(start, end))
        .group_by(MilkRecord.date)
        .all()
    )


def week_start(today: date) -> date:
    """Sunday of the current week."""
    return today - timedelta(days=(today.weekday() + 1) % 7)
