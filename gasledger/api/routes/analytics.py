"""Analytics routes (admin only)."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gasledger.api.dependencies import require_admin
from gasledger.core.clock import get_display_timezone
from gasledger.core.config import settings
from gasledger.core.database import get_db
from gasledger.schemas.analytics import DailyReadingCount, OverallStats
from gasledger.schemas.storage import StorageResponse
from gasledger.services import analytics as analytics_service
from gasledger.services import storages as storage_service

router = APIRouter(prefix="/analytics", tags=["analytics"], dependencies=[Depends(require_admin)])


@router.get("/stats", response_model=OverallStats)
def get_overall_stats(db: Session = Depends(get_db)):
    """Get overall reading statistics."""
    return analytics_service.get_overall_stats(db)


@router.get("/readings-over-time", response_model=list[DailyReadingCount])
def get_readings_over_time(
    start_date: date = Query(..., description="First day, inclusive"),
    end_date: date = Query(..., description="Last day, inclusive"),
    db: Session = Depends(get_db),
):
    """Get reading counts per day over a date range."""
    return analytics_service.get_readings_over_time(
        db, start_date, end_date, get_display_timezone(settings.DISPLAY_TIMEZONE)
    )


@router.get("/relevant-storages", response_model=list[StorageResponse])
def get_relevant_storages(
    customer_code: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    """Get the mobile storages plus the customer's fixed storages."""
    return storage_service.get_relevant_storages(db, customer_code)
