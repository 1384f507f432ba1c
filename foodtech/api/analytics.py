"""Analytics API router: per-user activity, daily timeline, summary."""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from foodtech.db.session import get_db
from foodtech.schemas.schemas import ActivitySummaryOut, TimelinePointOut, UserActivityOut
from foodtech.services.analytics_service import analytics_service
from foodtech.core.security import require_admin

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/users", response_model=List[UserActivityOut])
async def user_activity(
    days: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db),
    payload: dict = Depends(require_admin),
):
    """Activity counters per user, most active first."""
    return [analytics_service.stats_to_dict(s) for s in analytics_service.user_stats(db, days)]


@router.get("/timeline", response_model=List[TimelinePointOut])
async def activity_timeline(
    days: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db),
    payload: dict = Depends(require_admin),
):
    return [point.to_dict() for point in analytics_service.timeline(db, days)]


@router.get("/summary", response_model=ActivitySummaryOut)
async def activity_summary(
    days: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db),
    payload: dict = Depends(require_admin),
):
    return analytics_service.summary(db, days)
