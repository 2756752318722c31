"""Input coercion and ownership checks shared by the services."""

from __future__ import annotations

import json
from typing import Any, Iterable, Optional, Type

from pydantic import ValidationError
from sqlalchemy.orm import Session

from .. import models
from ..crud import crud_event, storage_errors
from ..schemas.pricing import LocationData
from ..utils.errors import BudgetEngineError, InvalidArgumentError, NotFoundError


def require_text(value: Any, field: str, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(message, {field: "required"})
    return value.strip()


def coerce_location(value: Any) -> Optional[LocationData]:
    """Accept a LocationData, a mapping or a JSON object string."""
    if value is None or isinstance(value, LocationData):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise InvalidArgumentError("Invalid location format", {"location": "invalid_json"}) from exc
    if not isinstance(value, dict):
        raise InvalidArgumentError("Invalid location format", {"location": "invalid"})
    try:
        return LocationData.model_validate(value)
    except ValidationError as exc:
        fields = {
            str(err["loc"][0]) if err.get("loc") else "location": err["type"]
            for err in exc.errors()
        }
        raise InvalidArgumentError("Invalid location format", fields) from exc


def coerce_categories(values: Optional[Iterable[Any]]) -> Optional[list[str]]:
    """Strip, validate and de-duplicate category slugs, keeping first-seen order."""
    if values is None:
        return None
    if isinstance(values, str):
        raise InvalidArgumentError("Service categories must be a list", {"service_categories": "invalid"})
    seen: list[str] = []
    for value in values:
        if not isinstance(value, str) or not value.strip():
            raise InvalidArgumentError(
                "Service categories must be non-empty strings",
                {"service_categories": "invalid"},
            )
        value = value.strip()
        if value not in seen:
            seen.append(value)
    return seen


def get_owned_event(
    db: Session,
    event_id: str,
    actor_id: Optional[str],
    not_owned: Type[BudgetEngineError] = NotFoundError,
) -> models.Event:
    """Load ``event_id`` and check that ``actor_id`` owns it.

    A missing event is always ``NotFoundError``; an event owned by someone
    else raises ``not_owned``. ``actor_id=None`` skips the ownership check.
    """
    with storage_errors(db, "event lookup"):
        event = crud_event.get_event(db, event_id)
    if event is None:
        raise NotFoundError("Event not found", {"event_id": "not_found"})
    if actor_id is not None and event.owner_id != actor_id:
        if not_owned is NotFoundError:
            raise NotFoundError("Event not found", {"event_id": "not_found"})
        raise not_owned("Not allowed to modify this event", {"event_id": "forbidden"})
    return event
