from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from exceptions import NotFoundError, ValidationError
from models.cattle import Cattle
from models.health_record import HealthRecord, HealthRecordType, HealthStatus
from schemas.health_record import HealthRecordCreate, HealthRecordUpdate


def get_health_record(db: Session, record_id: int) -> HealthRecord:
    db_record = (
        db.query(HealthRecord)
        .options(joinedload(HealthRecord.cattle))
        .filter(HealthRecord.id == record_id)
        .first()
    )
    if db_record is None:
        raise NotFoundError("Health record not found")
    return db_record


def get_health_records(
    db: Session,
    status: Optional[HealthStatus] = None,
    record_type: Optional[HealthRecordType] = None,
) -> List[HealthRecord]:
    query = db.query(HealthRecord).options(joinedload(HealthRecord.cattle))
    if status is not None:
        query = query.filter(HealthRecord.status == status)
    if record_type is not None:
        query = query.filter(HealthRecord.record_type == record_type)
    return query.order_by(HealthRecord.created_at.desc(), HealthRecord.id.desc()).all()


def _check_cattle(db: Session, cattle_id: int):
    if db.query(Cattle.id).filter(Cattle.id == cattle_id).first() is None:
        raise ValidationError("Invalid cattle ID")


def create_health_record(db: Session, record: HealthRecordCreate) -> HealthRecord:
    _check_cattle(db, record.cattle_id)
    db_record = HealthRecord(**record.model_dump())
    db.add(db_record)
    db.commit()
    db.refresh(db_record)
    return db_record


def update_health_record(db: Session, record_id: int, record: HealthRecordUpdate) -> HealthRecord:
    db_record = get_health_record(db, record_id)
    if record.cattle_id != db_record.cattle_id:
        _check_cattle(db, record.cattle_id)

    for key, value in record.model_dump().items():
        setattr(db_record, key, value)

    db.commit()
    db.refresh(db_record)
    return db_record


def complete_health_record(db: Session, record_id: int, completed_at: datetime, notes: Optional[str] = None) -> HealthRecord:
    db_record = get_health_record(db, record_id)
    db_record.status = HealthStatus.COMPLETED
    db_record.completed_date = completed_at
    if notes:
        db_record.notes = notes
    db.commit()
    db.refresh(db_record)
    return db_record


def delete_health_record(db: Session, record_id: int) -> HealthRecord:
    db_record = get_health_record(db, record_id)
    db.delete(db_record)
    db.commit()
    return db_record


def count_due_between(db: Session, start: datetime, end: datetime) -> int:
    return (
        db.query(HealthRecord)
        .filter(
            HealthRecord.status == HealthStatus.PENDING,
            HealthRecord.scheduled_date >= start,
            HealthRecord.scheduled_date <= end,
        )
        .count()
    )
