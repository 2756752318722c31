from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from .. import models


def get_event(db: Session, event_id: str) -> Optional[models.Event]:
    return db.query(models.Event).filter(models.Event.id == event_id).first()


def create_event(
    db: Session,
    *,
    owner_id: str,
    event_type: str,
    attendee_count: Optional[int] = None,
    event_date: Optional[date] = None,
    budget_total: Decimal = Decimal("0"),
) -> models.Event:
    event = models.Event(
        owner_id=owner_id,
        event_type=event_type,
        attendee_count=attendee_count,
        event_date=event_date,
        budget_total=budget_total,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event
