"""Pricing adjustment collaborators.

The resolver never computes location or seasonal effects itself. It asks an
injected strategy for a multiplier (``factor(request) -> Decimal``) and an
injected market-data source for live contractor quotes. Production wiring
talks to HTTP collaborators through ``httpx`` with a hard timeout; tests
swap in fixed strategies or an ``httpx.MockTransport``.

Every collaborator failure (timeout, transport error, non-2xx status,
unparseable payload) surfaces as ``DependencyUnavailableError`` so callers
never hang or receive a silently defaulted number.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
import logging
from typing import Any, Mapping, Optional, Protocol
from urllib.parse import quote

import httpx

from ..core.config import settings
from ..schemas.pricing import LocationData, MarketSnapshot
from ..utils.errors import DependencyUnavailableError
from ..utils.money import to_decimal

logger = logging.getLogger(__name__)

ONE = Decimal("1")


@dataclass(frozen=True)
class FactorRequest:
    service_type: str
    location: Optional[LocationData] = None
    on_date: Optional[date] = None


class AdjustmentFactor(Protocol):
    def factor(self, request: FactorRequest) -> Decimal:
        ...


class MarketDataSource(Protocol):
    def lookup(self, service_type: str, location: Optional[LocationData]) -> Optional[MarketSnapshot]:
        ...


class FixedFactor:
    """Always returns the same multiplier."""

    def __init__(self, value: Decimal = ONE) -> None:
        self.value = to_decimal(value)

    def factor(self, request: FactorRequest) -> Decimal:
        return self.value


# Southern-hemisphere event calendar: summer weddings and year-end functions
# drive demand, mid-year is quiet.
DEFAULT_MONTH_FACTORS: dict[int, Decimal] = {
    1: Decimal("1.20"),
    2: Decimal("1.20"),
    3: Decimal("1.10"),
    4: Decimal("1.10"),
    5: Decimal("0.85"),
    6: Decimal("0.85"),
    7: Decimal("0.85"),
    8: Decimal("0.85"),
    9: Decimal("1.00"),
    10: Decimal("1.10"),
    11: Decimal("1.10"),
    12: Decimal("1.20"),
}

DEFAULT_SPECIAL_DATES: dict[str, Decimal] = {
    "02-14": Decimal("1.25"),
    "12-24": Decimal("1.30"),
    "12-25": Decimal("1.50"),
    "12-31": Decimal("1.50"),
}


def _today() -> date:
    return datetime.now(timezone.utc).date()


class SeasonalCalendar:
    """Month-indexed demand factors with special-date surcharges on top."""

    def __init__(
        self,
        month_factors: Optional[Mapping[int, Any]] = None,
        special_dates: Optional[Mapping[str, Any]] = None,
    ) -> None:
        months = dict(DEFAULT_MONTH_FACTORS)
        for month, value in (month_factors or {}).items():
            month = int(month)
            if not 1 <= month <= 12:
                raise ValueError(f"invalid month {month}")
            months[month] = to_decimal(value)
        specials = dict(DEFAULT_SPECIAL_DATES)
        for key, value in (special_dates or {}).items():
            specials[str(key)] = to_decimal(value)
        for value in list(months.values()) + list(specials.values()):
            if value <= 0:
                raise ValueError("seasonal factors must be positive")
        self.month_factors = months
        self.special_dates = specials

    def factor(self, request: FactorRequest) -> Decimal:
        on = request.on_date or _today()
        month_factor = self.month_factors[on.month]
        special = self.special_dates.get(on.strftime("%m-%d"), ONE)
        return month_factor * special

    def season_type(self, on: Optional[date] = None) -> str:
        month_factor = self.month_factors[(on or _today()).month]
        if month_factor > Decimal("1.15"):
            return "peak"
        if month_factor > ONE:
            return "shoulder"
        if month_factor < ONE:
            return "off_peak"
        return "standard"


class _HttpCollaborator:
    name = "collaborator"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or settings.COLLABORATOR_TIMEOUT
        self._client = client
        self.headers = dict(headers or {})

    def _get(self, path: str, params: Mapping[str, Any]) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            if self._client is not None:
                return self._client.get(url, params=params, headers=self.headers, timeout=self.timeout)
            with httpx.Client(timeout=httpx.Timeout(self.timeout, connect=1.0)) as http:
                return http.get(url, params=params, headers=self.headers)
        except httpx.TimeoutException as exc:
            logger.warning("%s timed out after %.1fs: %s", self.name, self.timeout, exc)
            raise DependencyUnavailableError(self.name, f"{self.name} timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning("%s request failed: %s", self.name, exc)
            raise DependencyUnavailableError(self.name) from exc

    def _json(self, res: httpx.Response) -> dict:
        try:
            res.raise_for_status()
            data = res.json()
        except httpx.HTTPStatusError as exc:
            logger.warning("%s returned HTTP %s", self.name, res.status_code)
            raise DependencyUnavailableError(self.name) from exc
        except ValueError as exc:
            logger.error("%s returned invalid JSON: %s", self.name, exc)
            raise DependencyUnavailableError(self.name, f"Invalid response from {self.name}") from exc
        if not isinstance(data, dict):
            raise DependencyUnavailableError(self.name, f"Invalid response from {self.name}")
        return data


class HttpLocationFactor(_HttpCollaborator):
    """Location multiplier from the location-pricing service."""

    name = "location_pricing"

    def factor(self, request: FactorRequest) -> Decimal:
        if request.location is None:
            return ONE
        res = self._get(
            "/factor",
            {
                "service_type": request.service_type,
                "lat": request.location.lat,
                "lng": request.location.lng,
            },
        )
        data = self._json(res)
        try:
            multiplier = to_decimal(data.get("multiplier"))
        except ValueError as exc:
            raise DependencyUnavailableError(self.name, "Invalid location multiplier") from exc
        if multiplier <= 0:
            raise DependencyUnavailableError(self.name, "Invalid location multiplier")
        return multiplier


class NoMarketData:
    def lookup(self, service_type: str, location: Optional[LocationData]) -> Optional[MarketSnapshot]:
        return None


class HttpMarketData(_HttpCollaborator):
    """Live contractor quote aggregate from the market-data service.

    A 404 or a zero contractor count means "no live data" and returns None.
    """

    name = "market_data"

    def lookup(self, service_type: str, location: Optional[LocationData]) -> Optional[MarketSnapshot]:
        params: dict[str, Any] = {}
        if location is not None:
            params = {"lat": location.lat, "lng": location.lng}
        res = self._get(f"/pricing/{quote(service_type, safe='')}", params)
        if res.status_code == httpx.codes.NOT_FOUND:
            return None
        data = self._json(res)
        price_range = data.get("price_range") or {}
        try:
            contractor_count = int(data.get("contractor_count") or 0)
            if contractor_count <= 0:
                return None
            # live data without an average is unusable
            snapshot = MarketSnapshot(
                contractor_count=contractor_count,
                average_price=to_decimal(data.get("average_price")),
                price_min=to_decimal(price_range["min"]) if price_range.get("min") is not None else None,
                price_max=to_decimal(price_range["max"]) if price_range.get("max") is not None else None,
                as_of=data.get("as_of"),
            )
        except (ValueError, TypeError) as exc:
            logger.error("market_data payload rejected: %s", exc)
            raise DependencyUnavailableError(self.name, "Invalid response from market_data") from exc
        return snapshot


def default_location_factor() -> AdjustmentFactor:
    if settings.LOCATION_PRICING_URL:
        return HttpLocationFactor(settings.LOCATION_PRICING_URL)
    return FixedFactor(ONE)


def default_seasonal_calendar() -> SeasonalCalendar:
    return SeasonalCalendar(settings.SEASONAL_MONTH_FACTORS, settings.SEASONAL_SPECIAL_DATES)


def default_market_data() -> MarketDataSource:
    if settings.MARKET_DATA_URL:
        headers = {}
        if settings.MARKET_DATA_API_KEY:
            headers["Authorization"] = f"Bearer {settings.MARKET_DATA_API_KEY}"
        return HttpMarketData(settings.MARKET_DATA_URL, headers=headers)
    return NoMarketData()
