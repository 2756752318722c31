from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from decimal import Decimal
from typing import Any, ClassVar
import json
from pathlib import Path
import os


class Settings(BaseSettings):
    API_V1_STR: str = "/api/v1"

    # Database URL
    # Use an absolute path so running the app from different directories
    # (e.g., repo root or backend/) always resolves the same DB file.
    BASE_DIR: ClassVar[Path] = Path(__file__).resolve().parents[2]
    SQLALCHEMY_DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'eventbudget.db'}"

    # Default currency code reported alongside money figures
    DEFAULT_CURRENCY: str = "NZD"

    LOG_LEVEL: str = "INFO"

    # Collaborator endpoints. Empty means "not configured": the resolver
    # falls back to a neutral location factor and no market data.
    LOCATION_PRICING_URL: str = ""
    MARKET_DATA_URL: str = ""
    MARKET_DATA_API_KEY: str = ""
    # Upper bound for any single collaborator call (seconds)
    COLLABORATOR_TIMEOUT: float = 3.0

    # Quote confidence with and without live market data
    CONFIDENCE_WITH_MARKET_DATA: Decimal = Decimal("0.9")
    CONFIDENCE_BASELINE: Decimal = Decimal("0.7")

    # Optional overrides for the seasonal table, JSON encoded:
    #   SEASONAL_MONTH_FACTORS='{"1": "1.3", "7": "0.8"}'
    #   SEASONAL_SPECIAL_DATES='{"02-14": "1.25"}'
    SEASONAL_MONTH_FACTORS: dict[int, Decimal] = {}
    SEASONAL_SPECIAL_DATES: dict[str, Decimal] = {}

    # Insert the default pricing bands and recommendations on startup
    SEED_DEFAULT_DATA: bool = True

    # Hourly services are scaled by event duration against this working day
    STANDARD_EVENT_HOURS: int = 8

    @field_validator("SEASONAL_MONTH_FACTORS", "SEASONAL_SPECIAL_DATES", mode="before")
    def parse_json_mapping(cls, v: Any) -> Any:
        """Accept JSON strings from the environment as well as dicts."""
        if isinstance(v, str):
            if not v.strip():
                return {}
            try:
                parsed = json.loads(v)
            except json.JSONDecodeError as exc:
                raise ValueError("expected a JSON object") from exc
            return parsed
        return v

    @field_validator("LOCATION_PRICING_URL", "MARKET_DATA_URL", mode="before")
    def strip_trailing_slash(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    @field_validator("COLLABORATOR_TIMEOUT")
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("COLLABORATOR_TIMEOUT must be positive")
        return v

    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=True,
    )


def load_settings() -> "Settings":
    return Settings(_env_file=os.getenv("ENV_FILE", str(Path(__file__).resolve().parents[3] / ".env")))


settings = load_settings()
