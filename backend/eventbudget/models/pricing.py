from sqlalchemy import Column, Numeric, String

from .base import BaseModel, new_id


class ServicePricing(BaseModel):
    """Base price band per service type; ``updated_at`` is the freshness stamp."""

    __tablename__ = "service_pricing"

    id = Column(String(36), primary_key=True, default=new_id)
    service_type = Column(String, nullable=False, unique=True, index=True)
    price_min = Column(Numeric(12, 2), nullable=False)
    price_average = Column(Numeric(12, 2), nullable=False)
    price_max = Column(Numeric(12, 2), nullable=False)
    data_source = Column(String, nullable=False, default="industry_average")
