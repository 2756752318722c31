from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from .. import models


def get_tracking(db: Session, event_id: str) -> list[models.BudgetTracking]:
    return (
        db.query(models.BudgetTracking)
        .filter(models.BudgetTracking.event_id == event_id)
        .order_by(models.BudgetTracking.service_category.asc())
        .all()
    )


def upsert_tracking(
    db: Session,
    event_id: str,
    category: str,
    *,
    estimated_cost: Decimal,
    actual_cost: Decimal,
    variance: Decimal,
    tracking_date: datetime,
) -> models.BudgetTracking:
    """Does not commit."""
    row = (
        db.query(models.BudgetTracking)
        .filter(models.BudgetTracking.event_id == event_id)
        .filter(models.BudgetTracking.service_category == category)
        .first()
    )
    if row is None:
        row = models.BudgetTracking(event_id=event_id, service_category=category)
        db.add(row)
    row.estimated_cost = estimated_cost
    row.actual_cost = actual_cost
    row.variance = variance
    row.tracking_date = tracking_date
    return row
