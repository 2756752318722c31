from sqlalchemy import Column, Date, Integer, Numeric, String, CheckConstraint
from sqlalchemy.orm import relationship

from .base import BaseModel, new_id


class Event(BaseModel):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("budget_total >= 0", name="ck_events_budget_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    owner_id = Column(String(36), nullable=False, index=True)
    # Category tag, e.g. "wedding", "corporate"; matched exactly against packages
    event_type = Column(String, nullable=False, index=True)
    attendee_count = Column(Integer, nullable=True)
    event_date = Column(Date, nullable=True)
    budget_total = Column(Numeric(12, 2), nullable=False, default=0)
    # Owned by the status workflow; never written here
    status = Column(String, nullable=False, default="draft")

    breakdown_entries = relationship(
        "ServiceBudgetBreakdown",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    applied_packages = relationship(
        "AppliedPackage",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
