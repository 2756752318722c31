from __future__ import annotations

import enum
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .pricing import LocationData


class AdjustmentType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class AdjustmentOperation(str, enum.Enum):
    ADJUST = "adjust"
    # The category had no entry; one was created at zero cost first
    CREATE_THEN_ADJUST = "create_then_adjust"


class BudgetAdjustment(BaseModel):
    service_category: str = Field(min_length=1)
    adjustment_type: AdjustmentType
    adjustment_value: Decimal
    reason: Optional[str] = None

    @field_validator("service_category")
    def strip_category(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("service_category must not be blank")
        return v


class AdjustmentRequest(BaseModel):
    adjustments: List[BudgetAdjustment] = Field(min_length=1)


class BreakdownEntryRead(BaseModel):
    id: str
    event_id: str
    service_category: str
    estimated_cost: Decimal
    adjustment_reason: Optional[str] = None
    package_applied: bool
    package_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BreakdownRead(BaseModel):
    entries: List[BreakdownEntryRead]
    total: Decimal


class AdjustmentOutcome(BaseModel):
    service_category: str
    operation: AdjustmentOperation
    adjustment_type: AdjustmentType
    adjustment_value: Decimal
    cost_before: Decimal
    cost_after: Decimal
    clamped: bool = False
    reason: Optional[str] = None


class AdjustmentResult(BaseModel):
    entries: List[AdjustmentOutcome]
    # Rounded sum of the event's whole breakdown after every adjustment
    total: Decimal


class RecommendationRead(BaseModel):
    id: str
    event_type: str
    service_category: str
    recommended_amount: Decimal
    confidence_score: Decimal
    pricing_source: str


class DraftBreakdownEntry(BaseModel):
    service_category: str
    estimated_cost: Decimal
    package_applied: bool = False


class BudgetMultipliers(BaseModel):
    attendee_multiplier: Decimal
    location_multiplier: Decimal
    seasonal_multiplier: Decimal


class CalculationMetadata(BaseModel):
    event_type: str
    location: Optional[LocationData] = None
    attendee_count: Optional[int] = None
    duration: Optional[int] = None
    event_date: Optional[date] = None
    calculation_timestamp: str


class BudgetCalculation(BaseModel):
    recommendations: List[RecommendationRead]
    total_budget: Decimal
    breakdown: List[DraftBreakdownEntry]
    adjustments: BudgetMultipliers
    metadata: CalculationMetadata


class TrackingRequest(BaseModel):
    actual_costs: Dict[str, Decimal] = Field(min_length=1)


class TrackingRead(BaseModel):
    service_category: str
    estimated_cost: Decimal
    actual_cost: Decimal
    variance: Decimal
    tracking_date: Optional[datetime] = None

    model_config = {"from_attributes": True}


class VarianceItem(BaseModel):
    service_category: str
    variance: Decimal
    variance_percentage: Decimal


class BudgetInsights(BaseModel):
    total_estimated: Decimal
    total_actual: Decimal
    total_variance: Decimal
    variance_percentage: Decimal
    top_overruns: List[VarianceItem]
    top_savings: List[VarianceItem]
