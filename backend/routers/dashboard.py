from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from crud.dashboard import get_dashboard_stats
from database import get_db
from schemas.dashboard import DashboardStats
from utils.auth_utils import RequestContext, get_current_user
from utils.dates import local_now

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(
    milk_view: Optional[str] = Query("daily", alias="milkView"),
    cattle_view: Optional[str] = Query("daily", alias="cattleView"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_current_user),
):
    """
    Herd, milk, health and feed rollups for the landing dashboard.

    ``startDate``/``endDate`` only apply to the daily milk chart.
    """
    return get_dashboard_stats(
        db,
        now=local_now(),
        milk_view=milk_view,
        cattle_view=cattle_view,
        start_date=start_date,
        end_date=end_date,
    )
