from datetime import date, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from starlette import status

import crud.milk_record as crud_milk
from crud.dashboard import validate_range
from database import get_db
from exceptions import ValidationError
from models.milk_record import MilkSession
from schemas.milk_record import MilkRecord as MilkRecordSchema, MilkRecordCreate, MilkSummary
from utils.auth_utils import RequestContext, get_current_user, get_user_identifier
from utils.dates import local_now
from utils.stats import DAILY, MONTHLY, WEEKLY, milk_chart, overall_trend, top_performers, window_start

import logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/milk", tags=["Milk Production"])

SUMMARY_VIEWS = (DAILY, WEEKLY, MONTHLY)


def _parse_session(session: Optional[str]) -> Optional[MilkSession]:
    if not session or session == "all":
        return None
    try:
        return MilkSession(session)
    except ValueError:
        raise ValidationError("Valid session (MORNING, AFTERNOON, or EVENING) is required")


@router.get("", response_model=List[MilkRecordSchema])
def get_milk_records(
    cattle_id: Optional[int] = Query(None, alias="cattleId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    session: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_current_user),
):
    """Most recent milk records (at most 100), newest first."""
    return crud_milk.get_milk_records(
        db,
        cattle_id=cattle_id,
        start_date=start_date,
        end_date=end_date,
        session=_parse_session(session),
    )


@router.get("/summary", response_model=MilkSummary)
def get_milk_summary(
    view: str = Query(DAILY),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    session: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_current_user),
):
    """Production chart with period-over-period trends and the top five cows."""
    if view not in SUMMARY_VIEWS:
        view = DAILY
    now = local_now()
    today = now.date()
    if start_date is not None and end_date is not None:
        validate_range(view, start_date, end_date)
        start, end = start_date, end_date
    else:
        start, end = window_start(view, today), today

    # Two full weeks are needed for the per-cow trend
    fetch_from = min(start, today - timedelta(days=14))
    records = crud_milk.get_milk_records(
        db,
        start_date=fetch_from,
        end_date=max(end, today),
        session=_parse_session(session),
        limit=None,
    )

    chart = milk_chart(records, view, today, start, end)
    total = sum(point["liters"] for point in chart)
    return MilkSummary(
        view=view,
        start_date=start,
        end_date=end,
        chart=chart,
        total_production=total,
        average_production=total / len(chart) if chart else 0.0,
        overall_trend=overall_trend([point["liters"] for point in chart]),
        top_performers=top_performers(records, now),
    )


@router.post("", response_model=MilkRecordSchema, status_code=status.HTTP_201_CREATED)
def create_milk_record(
    record: MilkRecordCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_current_user),
):
    db_record = crud_milk.create_milk_record(db, record)
    logger.info(
        "Milk record %s (%s L, %s) logged by user %s",
        db_record.id, db_record.liters, db_record.session.value, get_user_identifier(ctx),
    )
    return db_record
