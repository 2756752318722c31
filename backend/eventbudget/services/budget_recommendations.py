from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..crud import crud_pricing, storage_errors
from ..schemas.budget import (
    BudgetCalculation,
    BudgetMultipliers,
    CalculationMetadata,
    DraftBreakdownEntry,
    RecommendationRead,
)
from ..utils.errors import InvalidArgumentError, NotFoundError
from ..utils.money import round_money, sum_money, to_decimal
from .common import coerce_location, require_text
from .pricing_factors import (
    AdjustmentFactor,
    FactorRequest,
    default_location_factor,
    default_seasonal_calendar,
)

logger = logging.getLogger(__name__)

ONE = Decimal("1")
REFERENCE_ATTENDEES = Decimal("50")
ATTENDEE_EXPONENT = Decimal("0.8")
MIN_ATTENDEE_MULTIPLIER = Decimal("0.5")
MAX_ATTENDEE_MULTIPLIER = Decimal("2.0")
CONFIDENCE_DISCOUNT = Decimal("0.9")

# Venue hire does not grow with headcount in the same way
ATTENDEE_EXEMPT = frozenset({"venue"})
HOURLY_CATEGORIES = frozenset({"photography", "music", "entertainment", "security", "staffing"})


def attendee_multiplier(attendee_count: Optional[int]) -> Decimal:
    if attendee_count is None:
        return ONE
    raw = (Decimal(attendee_count) / REFERENCE_ATTENDEES) ** ATTENDEE_EXPONENT
    clamped = max(MIN_ATTENDEE_MULTIPLIER, min(MAX_ATTENDEE_MULTIPLIER, raw))
    return clamped.quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)


class BudgetRecommendationService:
    """Scale stored per-category recommendations to a concrete event."""

    def __init__(
        self,
        db: Session,
        location_factor: Optional[AdjustmentFactor] = None,
        seasonal_factor: Optional[AdjustmentFactor] = None,
    ) -> None:
        self.db = db
        self.location_factor = location_factor or default_location_factor()
        self.seasonal_factor = seasonal_factor or default_seasonal_calendar()

    def calculate(
        self,
        event_type: str,
        location: Any = None,
        attendee_count: Optional[int] = None,
        duration_hours: Optional[int] = None,
        event_date: Optional[date] = None,
    ) -> BudgetCalculation:
        event_type = require_text(event_type, "event_type", "Event type is required")
        loc = coerce_location(location)
        if attendee_count is not None and attendee_count <= 0:
            raise InvalidArgumentError("Attendee count must be positive", {"attendee_count": "invalid"})
        if duration_hours is not None and duration_hours <= 0:
            raise InvalidArgumentError("Duration must be positive", {"duration": "invalid"})

        with storage_errors(self.db, "recommendation lookup"):
            rows = crud_pricing.get_recommendations(self.db, event_type)
        if not rows:
            raise NotFoundError("No budget recommendations for event type", {"event_type": "not_found"})

        attendees = attendee_multiplier(attendee_count)
        request = FactorRequest(service_type="general", location=loc, on_date=event_date)
        location_multiplier = self.location_factor.factor(request) if loc is not None else ONE
        seasonal_multiplier = self.seasonal_factor.factor(request) if event_date is not None else ONE
        duration_scale = ONE
        if duration_hours is not None:
            duration_scale = Decimal(duration_hours) / Decimal(settings.STANDARD_EVENT_HOURS)

        recommendations: list[RecommendationRead] = []
        for row in rows:
            amount = to_decimal(row.recommended_amount) * location_multiplier * seasonal_multiplier
            if row.service_category not in ATTENDEE_EXEMPT:
                amount *= attendees
            if row.service_category in HOURLY_CATEGORIES:
                amount *= duration_scale
            confidence = min(ONE, to_decimal(row.confidence_score) * CONFIDENCE_DISCOUNT)
            recommendations.append(
                RecommendationRead(
                    id=row.id,
                    event_type=row.event_type,
                    service_category=row.service_category,
                    recommended_amount=round_money(amount),
                    confidence_score=confidence.quantize(Decimal("0.001"), rounding=ROUND_HALF_UP),
                    pricing_source=row.pricing_source,
                )
            )

        logger.debug("Calculated %d recommendations for %s", len(recommendations), event_type)
        return BudgetCalculation(
            recommendations=recommendations,
            total_budget=sum_money(r.recommended_amount for r in recommendations),
            breakdown=[
                DraftBreakdownEntry(service_category=r.service_category, estimated_cost=r.recommended_amount)
                for r in recommendations
            ],
            adjustments=BudgetMultipliers(
                attendee_multiplier=attendees,
                location_multiplier=location_multiplier,
                seasonal_multiplier=seasonal_multiplier,
            ),
            metadata=CalculationMetadata(
                event_type=event_type,
                location=loc,
                attendee_count=attendee_count,
                duration=duration_hours,
                event_date=event_date,
                calculation_timestamp=datetime.now(timezone.utc).isoformat(),
            ),
        )
