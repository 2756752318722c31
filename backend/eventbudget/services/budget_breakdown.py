from __future__ import annotations

from decimal import Decimal
import logging
from typing import Any, Iterable, Optional, Sequence

from pydantic import ValidationError
from sqlalchemy.orm import Session

from .. import models
from ..crud import crud_breakdown, storage_errors
from ..schemas.budget import (
    AdjustmentOperation,
    AdjustmentOutcome,
    AdjustmentResult,
    AdjustmentType,
    BreakdownEntryRead,
    BreakdownRead,
    BudgetAdjustment,
)
from ..utils.errors import InvalidArgumentError
from ..utils.money import HUNDRED, ZERO, round_money, sum_money, to_decimal
from .common import coerce_categories, get_owned_event

logger = logging.getLogger(__name__)


def adjusted_cost(cost: Decimal, adjustment: BudgetAdjustment) -> tuple[Decimal, bool]:
    """Return the new cost and whether it was floored at zero."""
    if adjustment.adjustment_type == AdjustmentType.PERCENTAGE:
        new_cost = cost * (Decimal("1") + adjustment.adjustment_value / HUNDRED)
    else:
        new_cost = cost + adjustment.adjustment_value
    if new_cost < ZERO:
        return ZERO, True
    return new_cost, False


def _coerce_adjustments(adjustments: Sequence[Any]) -> list[BudgetAdjustment]:
    if not adjustments:
        raise InvalidArgumentError("At least one adjustment is required", {"adjustments": "required"})
    parsed: list[BudgetAdjustment] = []
    for index, raw in enumerate(adjustments):
        if isinstance(raw, BudgetAdjustment):
            parsed.append(raw)
            continue
        try:
            parsed.append(BudgetAdjustment.model_validate(raw))
        except ValidationError as exc:
            fields = {
                f"adjustments.{index}.{err['loc'][0] if err.get('loc') else 'value'}": err["type"]
                for err in exc.errors()
            }
            raise InvalidArgumentError("Invalid budget adjustment", fields) from exc
    return parsed


class BudgetBreakdownManager:
    """Read and adjust an event's per-category budget allocation."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_breakdown(
        self,
        event_id: str,
        categories: Optional[Iterable[Any]] = None,
        actor_id: Optional[str] = None,
    ) -> BreakdownRead:
        get_owned_event(self.db, event_id, actor_id)
        wanted = coerce_categories(categories)
        with storage_errors(self.db, "breakdown read"):
            entries = crud_breakdown.get_entries(self.db, event_id, wanted or None)
            rows = [BreakdownEntryRead.model_validate(e) for e in entries]
        return BreakdownRead(entries=rows, total=sum_money(r.estimated_cost for r in rows))

    def apply_adjustments(
        self,
        event_id: str,
        adjustments: Sequence[Any],
        actor_id: str,
    ) -> AdjustmentResult:
        """Apply adjustments in input order and rewrite the event total.

        Repeated categories compound. Costs are carried unrounded between
        adjustments and rounded to cents when stored. Everything is written
        in one transaction.
        """
        parsed = _coerce_adjustments(adjustments)
        event = get_owned_event(self.db, event_id, actor_id)

        outcomes: list[AdjustmentOutcome] = []
        with storage_errors(self.db, "budget adjustment"):
            entries: dict[str, models.ServiceBudgetBreakdown] = {
                e.service_category: e for e in crud_breakdown.get_entries(self.db, event.id)
            }
            running: dict[str, Decimal] = {
                category: to_decimal(e.estimated_cost, ZERO) for category, e in entries.items()
            }
            for adjustment in parsed:
                category = adjustment.service_category
                operation = AdjustmentOperation.ADJUST
                if category not in entries:
                    entries[category] = crud_breakdown.new_entry(self.db, event.id, category)
                    running[category] = ZERO
                    operation = AdjustmentOperation.CREATE_THEN_ADJUST
                before = running[category]
                after, clamped = adjusted_cost(before, adjustment)
                running[category] = after

                entry = entries[category]
                entry.estimated_cost = round_money(after)
                if adjustment.reason is not None:
                    entry.adjustment_reason = adjustment.reason
                if clamped:
                    logger.info("Adjustment on %s/%s clamped at zero", event.id, category)
                outcomes.append(
                    AdjustmentOutcome(
                        service_category=category,
                        operation=operation,
                        adjustment_type=adjustment.adjustment_type,
                        adjustment_value=adjustment.adjustment_value,
                        cost_before=round_money(before),
                        cost_after=round_money(after),
                        clamped=clamped,
                        reason=adjustment.reason,
                    )
                )

            total = sum_money(round_money(v) for v in running.values())
            event.budget_total = total
            self.db.commit()

        logger.info("Applied %d budget adjustments to event %s", len(outcomes), event.id)
        return AdjustmentResult(entries=outcomes, total=total)
