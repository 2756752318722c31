from datetime import date
from decimal import Decimal

import httpx
import pytest

from eventbudget.schemas import LocationData
from eventbudget.services import FactorRequest, HttpLocationFactor, HttpMarketData, SeasonalCalendar
from eventbudget.utils.errors import DependencyUnavailableError

AUCKLAND = LocationData(lat=-36.8485, lng=174.7633, city="Auckland")


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_location_factor_reads_multiplier():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"multiplier": "1.10"})

    factor = HttpLocationFactor("http://location.test/", client=_client(handler))
    value = factor.factor(FactorRequest("catering", AUCKLAND))

    assert value == Decimal("1.10")
    assert seen["path"] == "/factor"
    assert seen["params"]["service_type"] == "catering"
    assert seen["params"]["lat"] == "-36.8485"


def test_location_factor_without_location_is_neutral():
    def handler(request):
        raise AssertionError("no request expected")

    factor = HttpLocationFactor("http://location.test", client=_client(handler))
    assert factor.factor(FactorRequest("catering")) == Decimal("1")


def test_location_factor_timeout_is_dependency_unavailable():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    factor = HttpLocationFactor("http://location.test", client=_client(handler), timeout=0.5)
    with pytest.raises(DependencyUnavailableError) as exc:
        factor.factor(FactorRequest("catering", AUCKLAND))
    assert exc.value.dependency == "location_pricing"
    assert exc.value.field_errors == {"location_pricing": "unavailable"}


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "boom"}),
        httpx.Response(200, content=b"<html>"),
        httpx.Response(200, json={"multiplier": "abc"}),
        httpx.Response(200, json={"multiplier": "-1"}),
        httpx.Response(200, json=["1.1"]),
    ],
)
def test_location_factor_bad_responses(response):
    factor = HttpLocationFactor("http://location.test", client=_client(lambda request: response))
    with pytest.raises(DependencyUnavailableError):
        factor.factor(FactorRequest("catering", AUCKLAND))


def test_market_data_snapshot():
    def handler(request):
        assert request.url.path == "/pricing/catering"
        return httpx.Response(
            200,
            json={
                "contractor_count": 5,
                "average_price": 90,
                "price_range": {"min": 60, "max": 120},
                "as_of": "2025-03-01T12:00:00Z",
            },
        )

    snapshot = HttpMarketData("http://market.test", client=_client(handler)).lookup("catering", AUCKLAND)

    assert snapshot.contractor_count == 5
    assert snapshot.average_price == Decimal("90")
    assert (snapshot.price_min, snapshot.price_max) == (Decimal("60"), Decimal("120"))
    assert snapshot.as_of.year == 2025


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(404, json={"error": "unknown service"}),
        httpx.Response(200, json={"contractor_count": 0, "average_price": 0}),
    ],
)
def test_market_data_absent(response):
    market = HttpMarketData("http://market.test", client=_client(lambda request: response))
    assert market.lookup("catering", None) is None


def test_market_data_escapes_service_type():
    seen = []

    def handler(request):
        seen.append(request.url.raw_path.split(b"?")[0])
        return httpx.Response(404)

    market = HttpMarketData("http://market.test", client=_client(handler))
    assert market.lookup("sound/lighting", None) is None
    assert seen == [b"/pricing/sound%2Flighting"]


@pytest.mark.parametrize(
    "payload",
    [
        {"contractor_count": 5},
        {"contractor_count": 5, "average_price": "abc"},
        {"contractor_count": "many", "average_price": 90},
    ],
)
def test_market_data_rejects_unusable_payload(payload):
    market = HttpMarketData("http://market.test", client=_client(lambda request: httpx.Response(200, json=payload)))
    with pytest.raises(DependencyUnavailableError) as exc:
        market.lookup("catering", AUCKLAND)
    assert exc.value.dependency == "market_data"


def test_market_data_transport_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    market = HttpMarketData("http://market.test", client=_client(handler))
    with pytest.raises(DependencyUnavailableError) as exc:
        market.lookup("catering", AUCKLAND)
    assert exc.value.dependency == "market_data"


def test_market_data_server_error():
    market = HttpMarketData("http://market.test", client=_client(lambda request: httpx.Response(502)))
    with pytest.raises(DependencyUnavailableError):
        market.lookup("catering", AUCKLAND)


@pytest.mark.parametrize(
    "on, expected, season",
    [
        (date(2025, 1, 10), Decimal("1.20"), "peak"),
        (date(2025, 4, 10), Decimal("1.10"), "shoulder"),
        (date(2025, 6, 10), Decimal("0.85"), "off_peak"),
        (date(2025, 9, 10), Decimal("1.00"), "standard"),
        (date(2025, 2, 14), Decimal("1.50"), "peak"),
        (date(2025, 12, 31), Decimal("1.80"), "peak"),
    ],
)
def test_seasonal_calendar(on, expected, season):
    calendar = SeasonalCalendar()
    assert calendar.factor(FactorRequest("catering", on_date=on)) == expected
    assert calendar.season_type(on) == season


def test_seasonal_overrides():
    calendar = SeasonalCalendar({"7": "1.3"}, {"07-04": "2"})
    assert calendar.factor(FactorRequest("music", on_date=date(2025, 7, 4))) == Decimal("2.6")
    assert calendar.season_type(date(2025, 7, 4)) == "peak"
    assert calendar.factor(FactorRequest("music", on_date=date(2025, 8, 4))) == Decimal("0.85")


@pytest.mark.parametrize("months, specials", [({13: "1"}, None), ({1: "0"}, None), (None, {"12-25": "-1"})])
def test_seasonal_overrides_validated(months, specials):
    with pytest.raises(ValueError):
        SeasonalCalendar(months, specials)
