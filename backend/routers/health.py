from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from starlette import status

import crud.health_record as crud_health
from database import get_db
from exceptions import ValidationError
from models.health_record import HealthRecordType, HealthStatus
from schemas.health_record import (
    HealthRecordComplete,
    HealthRecordCreate,
    HealthRecordUpdate,
    HealthRecordWithCattle,
    HealthStats,
)
from utils.auth_utils import RequestContext, get_current_user, get_user_identifier
from utils.dates import local_now
from utils.stats import days_until_due, health_stats

import logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/health", tags=["Health Records"])


def _with_due(record, now) -> HealthRecordWithCattle:
    result = HealthRecordWithCattle.model_validate(record)
    result.days_until_due = days_until_due(record.scheduled_date, now)
    return result


def _parse_filter(value: Optional[str], enum_cls, message: str):
    if not value or value == "all":
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(message)


@router.get("", response_model=List[HealthRecordWithCattle])
def get_health_records(
    status_filter: Optional[str] = Query(None, alias="status"),
    record_type: Optional[str] = Query(None, alias="recordType"),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_current_user),
):
    records = crud_health.get_health_records(
        db,
        status=_parse_filter(status_filter, HealthStatus, "Invalid status value"),
        record_type=_parse_filter(record_type, HealthRecordType, "Valid record type is required"),
    )
    now = local_now()
    return [_with_due(r, now) for r in records]


@router.get("/stats", response_model=HealthStats)
def get_health_stats(db: Session = Depends(get_db), ctx: RequestContext = Depends(get_current_user)):
    """Counters shown above the health schedule."""
    records = crud_health.get_health_records(db)
    return HealthStats.model_validate(health_stats(records, local_now()))


@router.post("", response_model=HealthRecordWithCattle, status_code=status.HTTP_201_CREATED)
def create_health_record(
    record: HealthRecordCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_current_user),
):
    db_record = crud_health.create_health_record(db, record)
    logger.info(
        f"Health record {db_record.id} ({db_record.record_type.value}) for cattle {db_record.cattle_id} "
        f"created by user {get_user_identifier(ctx)}"
    )
    return _with_due(db_record, local_now())


@router.post("/complete", response_model=HealthRecordWithCattle)
def complete_health_record(
    body: HealthRecordComplete,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_current_user),
):
    now = local_now()
    db_record = crud_health.complete_health_record(db, body.id, completed_at=now, notes=body.notes)
    logger.info(f"Health record {body.id} marked completed by user {get_user_identifier(ctx)}")
    return _with_due(db_record, now)


@router.get("/{record_id}", response_model=HealthRecordWithCattle)
def get_health_record(record_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_current_user)):
    return _with_due(crud_health.get_health_record(db, record_id), local_now())


@router.put("/{record_id}", response_model=HealthRecordWithCattle)
def update_health_record(
    record_id: int,
    record: HealthRecordUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_current_user),
):
    db_record = crud_health.update_health_record(db, record_id, record)
    logger.info(f"Health record {record_id} updated by user {get_user_identifier(ctx)}")
    return _with_due(db_record, local_now())


@router.delete("/{record_id}")
def delete_health_record(record_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_current_user)):
    crud_health.delete_health_record(db, record_id)
    logger.info(f"Health record {record_id} deleted by user {get_user_identifier(ctx)}")
    return {"success": True}
