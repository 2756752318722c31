from decimal import Decimal

import pytest

from eventbudget import models
from eventbudget.services import budget_tracking
from eventbudget.utils.errors import InvalidArgumentError, NotFoundError

OWNER = "owner-1"


@pytest.fixture
def event(make_event, add_entry):
    event = make_event()
    add_entry(event, "catering", "400.00")
    add_entry(event, "venue", "400.00")
    return event


def test_track_variance_against_breakdown(db, event):
    rows = budget_tracking.track_variance(
        db, event.id, {"catering": "450", "venue": 380, "flowers": "100"}, OWNER
    )

    by_category = {r.service_category: r for r in rows}
    assert by_category["catering"].variance == Decimal("50.00")
    assert by_category["venue"].variance == Decimal("-20.00")
    assert by_category["flowers"].estimated_cost == Decimal("0")
    assert by_category["flowers"].variance == Decimal("100.00")


def test_tracking_overwrites_per_category(db, event):
    budget_tracking.track_variance(db, event.id, {"catering": "450"}, OWNER)
    budget_tracking.track_variance(db, event.id, {"catering": "390"}, OWNER)

    rows = db.query(models.BudgetTracking).filter_by(event_id=event.id).all()
    assert len(rows) == 1
    assert rows[0].variance == Decimal("-10.00")


def test_insights(db, event):
    budget_tracking.track_variance(
        db, event.id, {"catering": "450", "venue": "380", "flowers": "100"}, OWNER
    )

    insights = budget_tracking.get_insights(db, event.id, OWNER)

    assert insights.total_estimated == Decimal("800.00")
    assert insights.total_actual == Decimal("930.00")
    assert insights.total_variance == Decimal("130.00")
    assert insights.variance_percentage == Decimal("16.25")
    assert [(i.service_category, i.variance_percentage) for i in insights.top_overruns] == [
        ("flowers", Decimal("0")),
        ("catering", Decimal("12.50")),
    ]
    assert [(i.service_category, i.variance_percentage) for i in insights.top_savings] == [
        ("venue", Decimal("-5.00")),
    ]


def test_insights_keep_top_three(db, make_event, add_entry):
    event = make_event()
    for category in ["a", "b", "c", "d"]:
        add_entry(event, category, "100")
    budget_tracking.track_variance(db, event.id, {"a": "110", "b": "140", "c": "120", "d": "130"}, OWNER)

    insights = budget_tracking.get_insights(db, event.id, OWNER)

    assert [i.service_category for i in insights.top_overruns] == ["b", "d", "c"]
    assert insights.top_savings == []


def test_insights_without_tracking(db, event):
    insights = budget_tracking.get_insights(db, event.id, OWNER)
    assert insights.total_estimated == Decimal("0")
    assert insights.variance_percentage == Decimal("0")


@pytest.mark.parametrize("costs", [{}, {"catering": "abc"}, {"catering": "-1"}, {"  ": "10"}])
def test_invalid_costs(db, event, costs):
    with pytest.raises(InvalidArgumentError):
        budget_tracking.track_variance(db, event.id, costs, OWNER)


def test_tracking_requires_owner(db, event):
    with pytest.raises(NotFoundError):
        budget_tracking.track_variance(db, event.id, {"catering": "1"}, "intruder")
    with pytest.raises(NotFoundError):
        budget_tracking.get_insights(db, event.id, "intruder")
