import logging
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from exceptions import ConflictError, NotFoundError, ValidationError
from models.cattle import Cattle
from models.health_record import HealthRecord, HealthStatus
from models.milk_record import MilkRecord
from schemas.cattle import CattleCreate, CattleUpdate

logger = logging.getLogger(__name__)

RECENT_MILK_RECORDS = 30
OPEN_HEALTH_STATUSES = (HealthStatus.PENDING, HealthStatus.OVERDUE)


def get_cattle(db: Session, cattle_id: int):
    return db.query(Cattle).filter(Cattle.id == cattle_id).first()


def get_cattle_or_404(db: Session, cattle_id: int) -> Cattle:
    db_cattle = get_cattle(db, cattle_id)
    if db_cattle is None:
        raise NotFoundError("Cattle not found")
    return db_cattle


def get_all_cattle(db: Session) -> List[Cattle]:
    return (
        db.query(Cattle)
        .options(selectinload(Cattle.offspring), selectinload(Cattle.mother))
        .order_by(Cattle.created_at.desc(), Cattle.id.desc())
        .all()
    )


def get_next_due_health_records(db: Session) -> Dict[int, HealthRecord]:
    """Earliest open (PENDING/OVERDUE) health record per animal."""
    ranked = (
        db.query(
            HealthRecord.id.label("id"),
            func.row_number().over(
                partition_by=HealthRecord.cattle_id,
                order_by=(HealthRecord.scheduled_date.asc(), HealthRecord.id.asc()),
            ).label("rn"),
        )
        .filter(HealthRecord.status.in_(OPEN_HEALTH_STATUSES))
        .subquery()
    )
    records = db.query(HealthRecord).join(ranked, HealthRecord.id == ranked.c.id).filter(ranked.c.rn == 1).all()
    return {r.cattle_id: r for r in records}


def get_recent_milk_records(db: Session, limit: int = RECENT_MILK_RECORDS) -> Dict[int, List[MilkRecord]]:
    """The latest ``limit`` milk records per animal, newest first."""
    ranked = (
        db.query(
            MilkRecord.id.label("id"),
            func.row_number().over(
                partition_by=MilkRecord.cattle_id,
                order_by=(MilkRecord.date.desc(), MilkRecord.id.desc()),
            ).label("rn"),
        )
        .filter(MilkRecord.cattle_id.isnot(None))
        .subquery()
    )
    records = (
        db.query(MilkRecord)
        .join(ranked, MilkRecord.id == ranked.c.id)
        .filter(ranked.c.rn <= limit)
        .order_by(MilkRecord.date.desc(), MilkRecord.id.desc())
        .all()
    )
    grouped: Dict[int, List[MilkRecord]] = {}
    for record in records:
        grouped.setdefault(record.cattle_id, []).append(record)
    return grouped


def count_milk_records(db: Session) -> Dict[int, int]:
    rows = (
        db.query(MilkRecord.cattle_id, func.count(MilkRecord.id))
        .filter(MilkRecord.cattle_id.isnot(None))
        .group_by(MilkRecord.cattle_id)
        .all()
    )
    return {cattle_id: count for cattle_id, count in rows}


def _check_tag_available(db: Session, tag_number: str, exclude_id: int = None):
    query = db.query(Cattle.id).filter(Cattle.tag_number == tag_number)
    if exclude_id is not None:
        query = query.filter(Cattle.id != exclude_id)
    if query.first():
        raise ConflictError("A cattle with this tag number already exists")


def _check_mother(db: Session, mother_id, cattle_id: int = None):
    if mother_id is None:
        return
    if cattle_id is not None and mother_id == cattle_id:
        raise ValidationError("Invalid mother reference", details="An animal cannot be its own mother")
    mother = get_cattle(db, mother_id)
    if mother is None:
        raise ValidationError("Invalid mother reference")
    if cattle_id is None:
        return

    # The animal must not already be an ancestor of its new mother
    seen = {mother.id}
    ancestor_id = mother.mother_id
    while ancestor_id is not None and ancestor_id not in seen:
        if ancestor_id == cattle_id:
            raise ValidationError("Invalid mother reference", details="An animal cannot descend from itself")
        seen.add(ancestor_id)
        ancestor_id = db.query(Cattle.mother_id).filter(Cattle.id == ancestor_id).scalar()


def create_cattle(db: Session, cattle: CattleCreate) -> Cattle:
    _check_tag_available(db, cattle.tag_number)
    _check_mother(db, cattle.mother_id)
    db_cattle = Cattle(**cattle.model_dump())
    db.add(db_cattle)
    db.commit()
    db.refresh(db_cattle)
    return db_cattle


def update_cattle(db: Session, cattle_id: int, cattle: CattleUpdate) -> Cattle:
    db_cattle = get_cattle_or_404(db, cattle_id)
    _check_tag_available(db, cattle.tag_number, exclude_id=cattle_id)
    _check_mother(db, cattle.mother_id, cattle_id=cattle_id)

    for key, value in cattle.model_dump().items():
        setattr(db_cattle, key, value)

    db.commit()
    db.refresh(db_cattle)
    return db_cattle


def delete_cattle(db: Session, cattle_id: int) -> Cattle:
    db_cattle = get_cattle_or_404(db, cattle_id)
    # Offspring and milk records keep their rows; their references are cleared
    # by the relationship, health records are removed with the animal.
    db.delete(db_cattle)
    db.commit()
    return db_cattle
