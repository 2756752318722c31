from datetime import datetime
from decimal import Decimal
import logging
from typing import Optional

from sqlalchemy.orm import Session

from .. import models, schemas
from ..utils.errors import IncompatibleError, InvalidArgumentError, NotFoundError

logger = logging.getLogger(__name__)


def get_package(db: Session, package_id: str) -> Optional[models.PackageDeal]:
    return db.query(models.PackageDeal).filter(models.PackageDeal.id == package_id).first()


def get_active_packages(db: Session, event_type: str) -> list[models.PackageDeal]:
    """Active packages for ``event_type`` in catalog order (oldest first)."""
    return (
        db.query(models.PackageDeal)
        .filter(models.PackageDeal.event_type == event_type)
        .filter(models.PackageDeal.is_active.is_(True))
        .order_by(models.PackageDeal.created_at.asc(), models.PackageDeal.id.asc())
        .all()
    )


def create_package(db: Session, package_in: schemas.PackageDealCreate) -> models.PackageDeal:
    package = models.PackageDeal(**package_in.model_dump())
    db.add(package)
    db.commit()
    db.refresh(package)
    return package


def is_referenced(db: Session, package_id: str) -> bool:
    return (
        db.query(models.AppliedPackage.id)
        .filter(models.AppliedPackage.package_id == package_id)
        .first()
        is not None
    )


def deactivate_package(db: Session, package_id: str) -> models.PackageDeal:
    package = get_package(db, package_id)
    if package is None:
        raise NotFoundError("Package not found", {"package_id": "not_found"})
    if package.is_active:
        package.is_active = False
        db.commit()
        db.refresh(package)
        logger.info("Package %s deactivated", package_id)
    return package


def update_package_pricing(
    db: Session,
    package_id: str,
    pricing: schemas.PackagePricingUpdate,
) -> models.PackageDeal:
    """Change price or discount of a package that no event has used yet."""
    package = get_package(db, package_id)
    if package is None:
        raise NotFoundError("Package not found", {"package_id": "not_found"})
    if pricing.base_price is not None and pricing.base_price < 0:
        raise InvalidArgumentError("Base price cannot be negative", {"base_price": "invalid"})
    if pricing.discount_percentage is not None and not (
        Decimal("0") <= pricing.discount_percentage <= Decimal("100")
    ):
        raise InvalidArgumentError(
            "Discount percentage must be between 0 and 100",
            {"discount_percentage": "out_of_range"},
        )
    if is_referenced(db, package_id):
        raise IncompatibleError(
            "Package has been applied to an event; deactivate it instead",
            {"package_id": "referenced"},
        )
    if pricing.base_price is not None:
        package.base_price = pricing.base_price
    if pricing.discount_percentage is not None:
        package.discount_percentage = pricing.discount_percentage
    db.commit()
    db.refresh(package)
    return package


def record_application(
    db: Session,
    event_id: str,
    package_id: str,
    applied_at: datetime,
) -> models.AppliedPackage:
    """Upsert the (event, package) association and make it the effective one.

    Does not commit.
    """
    applied = (
        db.query(models.AppliedPackage)
        .filter(models.AppliedPackage.event_id == event_id)
        .filter(models.AppliedPackage.package_id == package_id)
        .first()
    )
    if applied is None:
        applied = models.AppliedPackage(event_id=event_id, package_id=package_id)
        db.add(applied)
    applied.applied_at = applied_at
    applied.is_effective = True
    (
        db.query(models.AppliedPackage)
        .filter(models.AppliedPackage.event_id == event_id)
        .filter(models.AppliedPackage.package_id != package_id)
        .filter(models.AppliedPackage.is_effective.is_(True))
        .update({models.AppliedPackage.is_effective: False}, synchronize_session=False)
    )
    return applied

