from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from .. import models
from ..core.config import settings
from ..crud import crud_package, storage_errors
from ..schemas.package import PackageDealRead, PackageListRead
from ..utils.money import percent_of, round_money, sum_money, to_decimal
from .common import coerce_categories, coerce_location, require_text

logger = logging.getLogger(__name__)


def price_package(package: models.PackageDeal) -> PackageDealRead:
    """Attach discount, final price and savings to a catalog row."""
    base_price = to_decimal(package.base_price)
    discount = round_money(percent_of(base_price, to_decimal(package.discount_percentage)))
    return PackageDealRead(
        id=package.id,
        name=package.name,
        description=package.description,
        event_type=package.event_type,
        base_price=base_price,
        discount_percentage=to_decimal(package.discount_percentage),
        service_categories=list(package.service_categories or []),
        is_active=bool(package.is_active),
        discount_amount=discount,
        final_price=round_money(base_price - discount),
        savings=discount,
    )


class PackageCatalog:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list_packages(
        self,
        event_type: str,
        location: Any = None,
        service_categories: Optional[Iterable[Any]] = None,
    ) -> PackageListRead:
        """Active packages for ``event_type``, best savings first.

        ``location`` is validated but does not filter yet; packages carry no
        service area. ``total_savings`` sums every listed package and is only
        a display figure, since an event can hold one package at a time.
        """
        event_type = require_text(event_type, "event_type", "Event type is required")
        coerce_location(location)
        categories = coerce_categories(service_categories)

        with storage_errors(self.db, "package listing"):
            rows = crud_package.get_active_packages(self.db, event_type)

        if categories:
            wanted = set(categories)
            rows = [row for row in rows if wanted.intersection(row.service_categories or [])]

        packages = [price_package(row) for row in rows]
        # sorted() is stable, so equal savings keep catalog order
        packages = sorted(packages, key=lambda p: p.savings, reverse=True)
        logger.debug("Listed %d packages for %s", len(packages), event_type)
        return PackageListRead(
            packages=packages,
            total_savings=sum_money(p.savings for p in packages),
            currency=settings.DEFAULT_CURRENCY,
        )
