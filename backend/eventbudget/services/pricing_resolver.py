from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..crud import crud_pricing, storage_errors
from ..schemas.pricing import LocationData, MarketSnapshot, PriceBand, PricingQuote
from ..utils.errors import NotFoundError
from ..utils.money import isoformat_utc, to_decimal
from .common import coerce_location, require_text
from .pricing_factors import (
    AdjustmentFactor,
    FactorRequest,
    MarketDataSource,
    SeasonalCalendar,
    default_location_factor,
    default_market_data,
    default_seasonal_calendar,
)

logger = logging.getLogger(__name__)

TWO = Decimal("2")


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def blend_with_market(band: PriceBand, snapshot: MarketSnapshot) -> tuple[PriceBand, PriceBand]:
    """Average each bound with the market's; returns (market band, blended band)."""
    average = snapshot.average_price
    market = PriceBand(
        price_min=snapshot.price_min if snapshot.price_min is not None else average,
        price_average=average,
        price_max=snapshot.price_max if snapshot.price_max is not None else average,
    )
    blended = PriceBand(
        price_min=(band.price_min + market.price_min) / TWO,
        price_average=(band.price_average + market.price_average) / TWO,
        price_max=(band.price_max + market.price_max) / TWO,
    )
    return market, blended


class PricingResolver:
    """Resolve a price band for a service type.

    Order is fixed: base band, then the location factor, then the seasonal
    factor, then the market blend. Each reported band is rounded to cents but
    the chain itself runs on unrounded values.
    """

    def __init__(
        self,
        db: Session,
        location_factor: Optional[AdjustmentFactor] = None,
        seasonal_factor: Optional[AdjustmentFactor] = None,
        market_data: Optional[MarketDataSource] = None,
    ) -> None:
        self.db = db
        self.location_factor = location_factor or default_location_factor()
        self.seasonal_factor = seasonal_factor or default_seasonal_calendar()
        self.market_data = market_data or default_market_data()

    def resolve(
        self,
        service_type: str,
        location: Any = None,
        seasonal: bool = False,
        event_date: Optional[date] = None,
    ) -> PricingQuote:
        service_type = require_text(service_type, "service_type", "Service type is required")
        loc: Optional[LocationData] = coerce_location(location)

        with storage_errors(self.db, "pricing lookup"):
            row = crud_pricing.get_service_pricing(self.db, service_type)
        if row is None:
            raise NotFoundError("No pricing data for service type", {"service_type": "not_found"})

        base = PriceBand(
            price_min=to_decimal(row.price_min),
            price_average=to_decimal(row.price_average),
            price_max=to_decimal(row.price_max),
        )
        request = FactorRequest(service_type=service_type, location=loc, on_date=event_date)

        location_multiplier = Decimal("1")
        if loc is not None:
            location_multiplier = self.location_factor.factor(request)
        location_band = base.scaled(location_multiplier)

        seasonal_multiplier = Decimal("1")
        season_type = None
        if seasonal:
            seasonal_multiplier = self.seasonal_factor.factor(request)
            if isinstance(self.seasonal_factor, SeasonalCalendar):
                season_type = self.seasonal_factor.season_type(event_date)
        seasonal_band = location_band.scaled(seasonal_multiplier)

        freshness = _aware(row.updated_at) or _aware(row.created_at)
        snapshot = self.market_data.lookup(service_type, loc)
        real_time = None
        final = seasonal_band
        contractor_count = 0
        data_source = row.data_source
        if snapshot is not None and snapshot.contractor_count > 0:
            real_time, final = blend_with_market(seasonal_band, snapshot)
            contractor_count = snapshot.contractor_count
            confidence = settings.CONFIDENCE_WITH_MARKET_DATA
            data_source = f"{row.data_source}+market"
            as_of = _aware(snapshot.as_of)
            if as_of is not None and (freshness is None or as_of > freshness):
                freshness = as_of
        else:
            confidence = settings.CONFIDENCE_BASELINE

        logger.debug(
            "Resolved %s: location=%s seasonal=%s contractors=%d",
            service_type,
            location_multiplier,
            seasonal_multiplier,
            contractor_count,
        )
        return PricingQuote(
            service_type=service_type,
            currency=settings.DEFAULT_CURRENCY,
            base=base.rounded(),
            location_adjusted=location_band.rounded(),
            seasonal_adjusted=seasonal_band.rounded(),
            real_time=real_time.rounded() if real_time is not None else None,
            adjusted=final.rounded(),
            location_multiplier=location_multiplier,
            seasonal_multiplier=seasonal_multiplier,
            season_type=season_type,
            contractor_count=contractor_count,
            confidence=confidence,
            data_source=data_source,
            freshness=isoformat_utc(freshness) or isoformat_utc(datetime.now(timezone.utc)),
        )
