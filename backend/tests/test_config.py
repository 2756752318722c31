from decimal import Decimal

import pytest
from pydantic import ValidationError

from eventbudget.core.config import Settings


def test_seasonal_overrides_parse_json(monkeypatch):
    monkeypatch.setenv("SEASONAL_MONTH_FACTORS", '{"1": "1.3"}')
    monkeypatch.setenv("SEASONAL_SPECIAL_DATES", '{"02-14": "1.4"}')
    settings = Settings(_env_file=None)
    assert settings.SEASONAL_MONTH_FACTORS == {1: Decimal("1.3")}
    assert settings.SEASONAL_SPECIAL_DATES == {"02-14": Decimal("1.4")}


def test_seasonal_overrides_accept_json_strings():
    settings = Settings(_env_file=None, SEASONAL_MONTH_FACTORS='{"7": "0.8"}', SEASONAL_SPECIAL_DATES="")
    assert settings.SEASONAL_MONTH_FACTORS == {7: Decimal("0.8")}
    assert settings.SEASONAL_SPECIAL_DATES == {}


def test_collaborator_urls_are_normalised(monkeypatch):
    monkeypatch.setenv("MARKET_DATA_URL", " http://market.test/ ")
    assert Settings(_env_file=None).MARKET_DATA_URL == "http://market.test"


@pytest.mark.parametrize(
    "overrides",
    [{"COLLABORATOR_TIMEOUT": 0}, {"SEASONAL_MONTH_FACTORS": "{not json"}],
)
def test_invalid_settings_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)
