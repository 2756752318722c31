from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from ..utils.money import round_money


class LocationData(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    address: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None


class PriceBand(BaseModel):
    price_min: Decimal
    price_average: Decimal
    price_max: Decimal

    def scaled(self, factor: Decimal) -> "PriceBand":
        return PriceBand(
            price_min=self.price_min * factor,
            price_average=self.price_average * factor,
            price_max=self.price_max * factor,
        )

    def rounded(self) -> "PriceBand":
        return PriceBand(
            price_min=round_money(self.price_min),
            price_average=round_money(self.price_average),
            price_max=round_money(self.price_max),
        )


class MarketSnapshot(BaseModel):
    """Aggregate of live contractor quotes for a service type near a location."""

    contractor_count: int = Field(ge=0)
    average_price: Decimal
    price_min: Optional[Decimal] = None
    price_max: Optional[Decimal] = None
    as_of: Optional[datetime] = None


class PricingQuote(BaseModel):
    service_type: str
    currency: str
    base: PriceBand
    location_adjusted: PriceBand
    seasonal_adjusted: PriceBand
    real_time: Optional[PriceBand] = None
    # Final band after all adjustments and the market blend
    adjusted: PriceBand
    location_multiplier: Decimal
    seasonal_multiplier: Decimal
    season_type: Optional[str] = None
    contractor_count: int = 0
    confidence: Decimal
    data_source: str
    freshness: str
