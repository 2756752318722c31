from decimal import Decimal
from typing import Iterable, Mapping, Optional

from sqlalchemy.orm import Session

from .. import models


def get_entries(
    db: Session,
    event_id: str,
    categories: Optional[Iterable[str]] = None,
) -> list[models.ServiceBudgetBreakdown]:
    query = db.query(models.ServiceBudgetBreakdown).filter(
        models.ServiceBudgetBreakdown.event_id == event_id
    )
    if categories is not None:
        query = query.filter(models.ServiceBudgetBreakdown.service_category.in_(list(categories)))
    return query.order_by(
        models.ServiceBudgetBreakdown.created_at.asc(),
        models.ServiceBudgetBreakdown.service_category.asc(),
    ).all()


def get_entry(db: Session, event_id: str, category: str) -> Optional[models.ServiceBudgetBreakdown]:
    return (
        db.query(models.ServiceBudgetBreakdown)
        .filter(models.ServiceBudgetBreakdown.event_id == event_id)
        .filter(models.ServiceBudgetBreakdown.service_category == category)
        .first()
    )


def new_entry(db: Session, event_id: str, category: str) -> models.ServiceBudgetBreakdown:
    """Stage a zero-cost entry for ``category``. Does not commit."""
    entry = models.ServiceBudgetBreakdown(
        event_id=event_id,
        service_category=category,
        estimated_cost=Decimal("0"),
        package_applied=False,
    )
    db.add(entry)
    return entry


def upsert_package_entries(
    db: Session,
    event_id: str,
    costs: Mapping[str, Decimal],
    package_id: str,
) -> list[models.ServiceBudgetBreakdown]:
    """Write one package-generated entry per category, keyed by (event, category).

    Does not commit.
    """
    entries: list[models.ServiceBudgetBreakdown] = []
    for category, cost in costs.items():
        entry = get_entry(db, event_id, category)
        if entry is None:
            entry = models.ServiceBudgetBreakdown(event_id=event_id, service_category=category)
            db.add(entry)
        entry.estimated_cost = cost
        entry.package_applied = True
        entry.package_id = package_id
        entry.adjustment_reason = None
        entries.append(entry)
    return entries


def remove_superseded_entries(
    db: Session,
    event_id: str,
    package_id: str,
    keep: Iterable[str],
) -> int:
    """Delete entries generated by other packages for categories not in ``keep``.

    Entries the organizer created by hand (``package_applied`` False) stay.
    Does not commit.
    """
    stale = (
        db.query(models.ServiceBudgetBreakdown)
        .filter(models.ServiceBudgetBreakdown.event_id == event_id)
        .filter(models.ServiceBudgetBreakdown.package_applied.is_(True))
        .filter(models.ServiceBudgetBreakdown.package_id.isnot(None))
        .filter(models.ServiceBudgetBreakdown.package_id != package_id)
    )
    keep = list(keep)
    if keep:
        stale = stale.filter(models.ServiceBudgetBreakdown.service_category.notin_(keep))
    removed = 0
    for entry in stale.all():
        db.delete(entry)
        removed += 1
    return removed
