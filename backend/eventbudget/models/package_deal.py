from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    JSON,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel, new_id, utcnow


class PackageDeal(BaseModel):
    __tablename__ = "package_deals"
    __table_args__ = (
        CheckConstraint(
            "discount_percentage >= 0 AND discount_percentage <= 100",
            name="ck_package_deals_discount_range",
        ),
        CheckConstraint("base_price >= 0", name="ck_package_deals_base_price"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    event_type = Column(String, nullable=False, index=True)
    base_price = Column(Numeric(12, 2), nullable=False, default=0)
    discount_percentage = Column(Numeric(5, 2), nullable=False, default=0)
    # List of service category slugs, e.g. ["catering", "venue"]
    service_categories = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)

    applications = relationship("AppliedPackage", back_populates="package")


class AppliedPackage(BaseModel):
    __tablename__ = "applied_packages"
    __table_args__ = (
        UniqueConstraint("event_id", "package_id", name="uq_applied_packages_event_package"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    event_id = Column(
        String(36),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    package_id = Column(String(36), ForeignKey("package_deals.id"), nullable=False, index=True)
    applied_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    # Only one application per event is effective; older ones are kept for history
    is_effective = Column(Boolean, nullable=False, default=True)

    event = relationship("Event", back_populates="applied_packages")
    package = relationship("PackageDeal", back_populates="applications")
