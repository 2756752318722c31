from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from .. import schemas
from ..services import PricingResolver
from .dependencies import get_pricing_resolver

router = APIRouter(tags=["pricing"])


@router.get("/pricing/{service_type}", response_model=schemas.PricingQuote)
def get_service_pricing(
    service_type: str,
    lat: Optional[float] = Query(None),
    lng: Optional[float] = Query(None),
    address: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    region: Optional[str] = Query(None),
    seasonal: bool = Query(False),
    event_date: Optional[date] = Query(None),
    resolver: PricingResolver = Depends(get_pricing_resolver),
):
    """Price band for a service type, optionally adjusted for location and season."""
    location = None
    if lat is not None or lng is not None:
        # Half a coordinate is rejected by the resolver as an invalid location
        location = {"lat": lat, "lng": lng, "address": address, "city": city, "region": region}
    return resolver.resolve(service_type, location=location, seasonal=seasonal, event_date=event_date)
