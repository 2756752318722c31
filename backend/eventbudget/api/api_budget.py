from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services import BudgetBreakdownManager, BudgetRecommendationService, budget_tracking
from .dependencies import get_breakdown_manager, get_current_actor_id, get_recommendation_service

router = APIRouter(tags=["budget"])


@router.get("/events/{event_id}/budget/breakdown", response_model=schemas.BreakdownRead)
def get_budget_breakdown(
    event_id: str,
    categories: Optional[str] = Query(None, description="Comma separated category slugs"),
    actor_id: str = Depends(get_current_actor_id),
    manager: BudgetBreakdownManager = Depends(get_breakdown_manager),
):
    wanted = categories.split(",") if categories is not None else None
    return manager.get_breakdown(event_id, categories=wanted, actor_id=actor_id)


@router.post("/events/{event_id}/budget/adjustments", response_model=schemas.AdjustmentResult)
def adjust_budget(
    event_id: str,
    request: schemas.AdjustmentRequest,
    actor_id: str = Depends(get_current_actor_id),
    manager: BudgetBreakdownManager = Depends(get_breakdown_manager),
):
    return manager.apply_adjustments(event_id, request.adjustments, actor_id)


@router.get("/budget/recommendations", response_model=schemas.BudgetCalculation)
def get_budget_recommendations(
    event_type: str = Query(""),
    attendee_count: Optional[int] = Query(None),
    duration: Optional[int] = Query(None, description="Event length in hours"),
    location: Optional[str] = Query(None, description="JSON object with lat/lng"),
    event_date: Optional[date] = Query(None),
    service: BudgetRecommendationService = Depends(get_recommendation_service),
):
    return service.calculate(
        event_type,
        location=location,
        attendee_count=attendee_count,
        duration_hours=duration,
        event_date=event_date,
    )


@router.post("/events/{event_id}/budget/tracking", response_model=List[schemas.TrackingRead])
def track_budget(
    event_id: str,
    request: schemas.TrackingRequest,
    actor_id: str = Depends(get_current_actor_id),
    db: Session = Depends(get_db),
):
    return budget_tracking.track_variance(db, event_id, request.actual_costs, actor_id)


@router.get("/events/{event_id}/budget/insights", response_model=schemas.BudgetInsights)
def get_budget_insights(
    event_id: str,
    actor_id: str = Depends(get_current_actor_id),
    db: Session = Depends(get_db),
):
    return budget_tracking.get_insights(db, event_id, actor_id)
