from __future__ import annotations

from decimal import Decimal
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models
from ..crud import crud_breakdown, crud_package, storage_errors
from ..models.base import utcnow
from ..schemas.budget import BreakdownEntryRead
from ..schemas.package import AppliedPackageResult
from ..utils.errors import IncompatibleError, NotFoundError, PartialFailureError, UnauthorizedError
from ..utils.money import HUNDRED, ZERO, isoformat_utc, percent_of, round_money, to_decimal
from .common import coerce_categories, get_owned_event, require_text
from .package_catalog import price_package

logger = logging.getLogger(__name__)


def category_costs(package: models.PackageDeal) -> dict[str, Decimal]:
    """Split the discounted package price evenly across its categories."""
    categories = coerce_categories(package.service_categories or []) or []
    if not categories:
        return {}
    base_price = to_decimal(package.base_price)
    keep = (HUNDRED - to_decimal(package.discount_percentage)) / HUNDRED
    share = base_price / Decimal(len(categories))
    return {category: round_money(share * keep) for category in categories}


class PackageApplier:
    """Apply a package deal to an event.

    Recording the application is committed first and on its own. The budget
    total and the per-category breakdown are then written together in a
    second transaction; if that one fails the application record stays and
    ``PartialFailureError`` reports what did not happen. Entries left by a
    superseded package for categories this one does not cover are removed.
    Every write is an upsert, so calling ``apply`` again converges to the
    same state.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def _load_package(self, package_id: str, event: models.Event) -> models.PackageDeal:
        with storage_errors(self.db, "package lookup"):
            package = crud_package.get_package(self.db, package_id)
        if package is None:
            raise NotFoundError("Package not found", {"package_id": "not_found"})
        if not package.is_active:
            raise IncompatibleError("Package is no longer available", {"package_id": "inactive"})
        if package.event_type != event.event_type:
            raise IncompatibleError(
                "Package does not match the event type",
                {"package_id": "event_type_mismatch"},
            )
        return package

    def apply(self, event_id: str, package_id: str, actor_id: str) -> AppliedPackageResult:
        event_id = require_text(event_id, "event_id", "Event id is required")
        package_id = require_text(package_id, "package_id", "Package id is required")
        event = get_owned_event(self.db, event_id, actor_id, not_owned=UnauthorizedError)
        package = self._load_package(package_id, event)
        priced = price_package(package)

        with storage_errors(self.db, "package application"):
            applied = crud_package.record_application(self.db, event.id, package.id, utcnow())
            self.db.commit()
            self.db.refresh(applied)
        applied_at = isoformat_utc(applied.applied_at)
        prior_total = to_decimal(event.budget_total, ZERO)
        logger.info("Package %s recorded for event %s", package.id, event.id)

        costs = category_costs(package)
        base_price = to_decimal(package.base_price)
        event_updated = False
        budget_updated = False
        try:
            if base_price > ZERO:
                event.budget_total = round_money(
                    base_price - percent_of(base_price, to_decimal(package.discount_percentage))
                )
                event_updated = True
            removed = crud_breakdown.remove_superseded_entries(self.db, event.id, package.id, costs)
            if costs:
                crud_breakdown.upsert_package_entries(self.db, event.id, costs, package.id)
            budget_updated = bool(costs) or removed > 0
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(
                "Package %s recorded for event %s but budget update failed: %s",
                package.id,
                event.id,
                exc,
                exc_info=True,
            )
            partial = AppliedPackageResult(
                **priced.model_dump(),
                event_id=event.id,
                applied_at=applied_at,
                success=True,
                event_updated=False,
                budget_updated=False,
                budget_total=prior_total,
            )
            raise PartialFailureError(
                "Package applied but the event budget could not be updated",
                partial,
            ) from exc

        with storage_errors(self.db, "breakdown read"):
            self.db.refresh(event)
            entries = crud_breakdown.get_entries(self.db, event.id)
            breakdown = [BreakdownEntryRead.model_validate(e) for e in entries]
            budget_total = to_decimal(event.budget_total, ZERO)

        return AppliedPackageResult(
            **priced.model_dump(),
            event_id=event.id,
            applied_at=applied_at,
            success=True,
            event_updated=event_updated,
            budget_updated=budget_updated,
            budget_total=budget_total,
            breakdown=breakdown,
        )
