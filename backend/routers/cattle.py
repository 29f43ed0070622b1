from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from starlette import status

import crud.cattle as crud_cattle
from database import get_db
from schemas.cattle import Cattle as CattleSchema, CattleCreate, CattleSummary, CattleUpdate
from schemas.health_record import HealthRecord as HealthRecordSchema
from schemas.herd import CattleCounts, CattleDetail, HerdMilkRecord, HerdStats
from utils.auth_utils import RequestContext, get_current_user, get_user_identifier
from utils.dates import local_now
from utils.stats import average_milk, days_until_due, herd_stats

# --- Logging Configuration (import and get logger) ---
import logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cattle", tags=["Cattle"])


@router.get("", response_model=List[CattleDetail])
def get_all_cattle(db: Session = Depends(get_db), ctx: RequestContext = Depends(get_current_user)):
    """
    List the herd, newest first, with offspring, the next open health record
    and the last 30 milk records of each animal.
    """
    herd = crud_cattle.get_all_cattle(db)
    next_due = crud_cattle.get_next_due_health_records(db)
    recent_milk = crud_cattle.get_recent_milk_records(db)
    milk_counts = crud_cattle.count_milk_records(db)
    now = local_now()

    result = []
    for animal in herd:
        next_record = next_due.get(animal.id)
        milk_records = recent_milk.get(animal.id, [])
        result.append(CattleDetail(
            **CattleSchema.model_validate(animal).model_dump(),
            offspring=[CattleSummary.model_validate(o) for o in animal.offspring],
            health_records=[HealthRecordSchema.model_validate(next_record)] if next_record else [],
            milk_records=[HerdMilkRecord.model_validate(r) for r in milk_records],
            counts=CattleCounts(offspring=len(animal.offspring), milk_records=milk_counts.get(animal.id, 0)),
            average_daily_milk=average_milk(milk_records),
            days_until_next_due=days_until_due(next_record.scheduled_date, now) if next_record else None,
        ))
    logger.info("Fetched %d cattle records", len(result))
    return result


@router.get("/stats", response_model=HerdStats)
def get_herd_stats(db: Session = Depends(get_db), ctx: RequestContext = Depends(get_current_user)):
    """Totals shown above the herd table."""
    herd = crud_cattle.get_all_cattle(db)
    stats = herd_stats(
        herd,
        crud_cattle.get_next_due_health_records(db),
        crud_cattle.get_recent_milk_records(db),
        local_now(),
    )
    return HerdStats.model_validate(stats)


@router.get("/{cattle_id}", response_model=CattleSchema)
def get_cattle(cattle_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_current_user)):
    return crud_cattle.get_cattle_or_404(db, cattle_id)


@router.post("", response_model=CattleSchema, status_code=status.HTTP_201_CREATED)
def create_cattle(
    cattle: CattleCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_current_user),
):
    db_cattle = crud_cattle.create_cattle(db, cattle)
    logger.info(f"Cattle '{db_cattle.tag_number}' (ID: {db_cattle.id}) created by user {get_user_identifier(ctx)}")
    return db_cattle


@router.put("/{cattle_id}", response_model=CattleSchema)
def update_cattle(
    cattle_id: int,
    cattle: CattleUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_current_user),
):
    db_cattle = crud_cattle.update_cattle(db, cattle_id, cattle)
    logger.info(f"Cattle '{db_cattle.tag_number}' (ID: {cattle_id}) updated by user {get_user_identifier(ctx)}")
    return db_cattle


@router.delete("/{cattle_id}")
def delete_cattle(cattle_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_current_user)):
    db_cattle = crud_cattle.delete_cattle(db, cattle_id)
    logger.info(f"Cattle '{db_cattle.tag_number}' (ID: {cattle_id}) deleted by user {get_user_identifier(ctx)}")
    return {"success": True}
