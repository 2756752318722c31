from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel, new_id, utcnow


class ServiceBudgetBreakdown(BaseModel):
    __tablename__ = "service_budget_breakdown"
    __table_args__ = (
        UniqueConstraint("event_id", "service_category", name="uq_breakdown_event_category"),
        CheckConstraint("estimated_cost >= 0", name="ck_breakdown_cost_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    event_id = Column(
        String(36),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    service_category = Column(String, nullable=False)
    estimated_cost = Column(Numeric(12, 2), nullable=False, default=0)
    adjustment_reason = Column(String, nullable=True)
    package_applied = Column(Boolean, nullable=False, default=False)
    package_id = Column(String(36), ForeignKey("package_deals.id"), nullable=True)

    event = relationship("Event", back_populates="breakdown_entries")


class BudgetRecommendation(BaseModel):
    __tablename__ = "budget_recommendations"

    id = Column(String(36), primary_key=True, default=new_id)
    event_type = Column(String, nullable=False, index=True)
    service_category = Column(String, nullable=False)
    recommended_amount = Column(Numeric(12, 2), nullable=False)
    confidence_score = Column(Numeric(4, 3), nullable=False, default=0)
    pricing_source = Column(String, nullable=False, default="industry_average")


class BudgetTracking(BaseModel):
    __tablename__ = "budget_tracking"
    __table_args__ = (
        UniqueConstraint("event_id", "service_category", name="uq_tracking_event_category"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    event_id = Column(
        String(36),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    service_category = Column(String, nullable=False)
    estimated_cost = Column(Numeric(12, 2), nullable=False, default=0)
    actual_cost = Column(Numeric(12, 2), nullable=False, default=0)
    variance = Column(Numeric(12, 2), nullable=False, default=0)
    tracking_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
