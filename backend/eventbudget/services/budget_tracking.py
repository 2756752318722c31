from __future__ import annotations

from decimal import Decimal
import logging
from typing import Any, Mapping

from sqlalchemy.orm import Session

from ..crud import crud_breakdown, crud_tracking, storage_errors
from ..models.base import utcnow
from ..schemas.budget import BudgetInsights, TrackingRead, VarianceItem
from ..utils.errors import InvalidArgumentError
from ..utils.money import HUNDRED, ZERO, round_money, sum_money, to_decimal
from .common import get_owned_event

logger = logging.getLogger(__name__)

TOP_N = 3


def variance_percentage(variance: Decimal, estimated: Decimal) -> Decimal:
    if estimated == ZERO:
        return ZERO
    return round_money(variance / estimated * HUNDRED)


def track_variance(
    db: Session,
    event_id: str,
    actual_costs: Mapping[str, Any],
    actor_id: str,
) -> list[TrackingRead]:
    """Record actual spend per category against the current breakdown."""
    if not actual_costs:
        raise InvalidArgumentError("At least one actual cost is required", {"actual_costs": "required"})
    parsed: dict[str, Decimal] = {}
    for category, raw in actual_costs.items():
        if not isinstance(category, str) or not category.strip():
            raise InvalidArgumentError("Service category is required", {"actual_costs": "invalid_category"})
        try:
            actual = to_decimal(raw)
        except ValueError as exc:
            raise InvalidArgumentError("Actual cost must be a number", {category: "invalid"}) from exc
        if actual < ZERO:
            raise InvalidArgumentError("Actual cost cannot be negative", {category: "negative"})
        parsed[category.strip()] = round_money(actual)

    event = get_owned_event(db, event_id, actor_id)
    now = utcnow()
    with storage_errors(db, "budget tracking"):
        estimates = {
            e.service_category: to_decimal(e.estimated_cost, ZERO)
            for e in crud_breakdown.get_entries(db, event.id, list(parsed))
        }
        rows = []
        for category, actual in parsed.items():
            estimated = estimates.get(category, ZERO)
            rows.append(
                crud_tracking.upsert_tracking(
                    db,
                    event.id,
                    category,
                    estimated_cost=estimated,
                    actual_cost=actual,
                    variance=actual - estimated,
                    tracking_date=now,
                )
            )
        db.commit()
        result = [TrackingRead.model_validate(row) for row in rows]
    logger.info("Tracked %d actual costs for event %s", len(result), event.id)
    return result


def get_insights(db: Session, event_id: str, actor_id: str) -> BudgetInsights:
    event = get_owned_event(db, event_id, actor_id)
    with storage_errors(db, "budget insights"):
        rows = crud_tracking.get_tracking(db, event.id)
        items = [
            (row.service_category, to_decimal(row.estimated_cost, ZERO), to_decimal(row.variance, ZERO))
            for row in rows
        ]
        total_actual = sum_money(to_decimal(row.actual_cost, ZERO) for row in rows)

    total_estimated = sum_money(estimated for _, estimated, _ in items)
    total_variance = round_money(total_actual - total_estimated)

    def _item(entry: tuple[str, Decimal, Decimal]) -> VarianceItem:
        category, estimated, variance = entry
        return VarianceItem(
            service_category=category,
            variance=variance,
            variance_percentage=variance_percentage(variance, estimated),
        )

    overruns = sorted((i for i in items if i[2] > ZERO), key=lambda i: i[2], reverse=True)
    savings = sorted((i for i in items if i[2] < ZERO), key=lambda i: i[2])
    return BudgetInsights(
        total_estimated=total_estimated,
        total_actual=total_actual,
        total_variance=total_variance,
        variance_percentage=variance_percentage(total_variance, total_estimated),
        top_overruns=[_item(i) for i in overruns[:TOP_N]],
        top_savings=[_item(i) for i in savings[:TOP_N]],
    )
