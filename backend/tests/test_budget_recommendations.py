from datetime import date
from decimal import Decimal

import pytest

from eventbudget import models
from eventbudget.services import BudgetRecommendationService, FixedFactor, SeasonalCalendar
from eventbudget.services.budget_recommendations import attendee_multiplier
from eventbudget.utils.errors import InvalidArgumentError, NotFoundError


@pytest.fixture
def seeded(db):
    for category, amount, confidence in [
        ("catering", "5000", "0.85"),
        ("venue", "4000", "0.90"),
        ("photography", "2500", "0.80"),
    ]:
        db.add(
            models.BudgetRecommendation(
                event_type="wedding",
                service_category=category,
                recommended_amount=Decimal(amount),
                confidence_score=Decimal(confidence),
                pricing_source="industry_average",
            )
        )
    db.commit()
    return db


def _service(db, location="1", seasonal="1"):
    return BudgetRecommendationService(
        db,
        location_factor=FixedFactor(Decimal(location)),
        seasonal_factor=FixedFactor(Decimal(seasonal)),
    )


@pytest.mark.parametrize(
    "attendees, expected",
    [(None, "1"), (50, "1.0000"), (100, "1.7411"), (10, "0.5"), (1000, "2.0")],
)
def test_attendee_multiplier(attendees, expected):
    assert attendee_multiplier(attendees) == Decimal(expected)


def test_recommendations_scale_with_attendees_except_venue(seeded):
    result = _service(seeded).calculate("wedding", attendee_count=100)

    amounts = {r.service_category: r.recommended_amount for r in result.recommendations}
    assert amounts["venue"] == Decimal("4000.00")
    assert amounts["catering"] == Decimal("8705.50")
    assert amounts["photography"] == Decimal("4352.75")
    assert [r.service_category for r in result.recommendations][0] == "venue"
    assert result.total_budget == Decimal("17058.25")
    assert result.adjustments.attendee_multiplier == Decimal("1.7411")


def test_confidence_is_discounted(seeded):
    result = _service(seeded).calculate("wedding")
    confidence = {r.service_category: r.confidence_score for r in result.recommendations}
    assert confidence == {
        "venue": Decimal("0.810"),
        "catering": Decimal("0.765"),
        "photography": Decimal("0.720"),
    }


def test_duration_scales_hourly_services_only(seeded):
    result = _service(seeded).calculate("wedding", duration_hours=4)
    amounts = {r.service_category: r.recommended_amount for r in result.recommendations}
    assert amounts["photography"] == Decimal("1250.00")
    assert amounts["catering"] == Decimal("5000.00")


def test_location_and_season_apply_to_every_category(seeded):
    result = _service(seeded, location="1.1").calculate(
        "wedding", location='{"lat": -36.8485, "lng": 174.7633, "city": "Auckland"}'
    )
    amounts = {r.service_category: r.recommended_amount for r in result.recommendations}
    assert amounts["venue"] == Decimal("4400.00")
    assert result.metadata.location.city == "Auckland"
    assert result.adjustments.seasonal_multiplier == Decimal("1")

    winter = BudgetRecommendationService(
        seeded, location_factor=FixedFactor(), seasonal_factor=SeasonalCalendar()
    ).calculate("wedding", event_date=date(2025, 7, 1))
    amounts = {r.service_category: r.recommended_amount for r in winter.recommendations}
    assert amounts["venue"] == Decimal("3400.00")


def test_draft_breakdown_mirrors_recommendations(seeded):
    result = _service(seeded).calculate("wedding", attendee_count=80, duration_hours=6)
    assert [(b.service_category, b.estimated_cost) for b in result.breakdown] == [
        (r.service_category, r.recommended_amount) for r in result.recommendations
    ]
    assert all(b.package_applied is False for b in result.breakdown)
    assert result.metadata.attendee_count == 80
    assert result.metadata.duration == 6
    assert result.metadata.calculation_timestamp


def test_unknown_event_type(seeded):
    with pytest.raises(NotFoundError):
        _service(seeded).calculate("funeral")


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"event_type": ""}, "Event type is required"),
        ({"event_type": "wedding", "location": "invalid-json"}, "Invalid location format"),
        ({"event_type": "wedding", "attendee_count": 0}, "Attendee count must be positive"),
        ({"event_type": "wedding", "duration_hours": -2}, "Duration must be positive"),
    ],
)
def test_invalid_arguments(seeded, kwargs, message):
    with pytest.raises(InvalidArgumentError) as exc:
        _service(seeded).calculate(**kwargs)
    assert exc.value.message == message
