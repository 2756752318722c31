import logging
import pytest
from fastapi import HTTPException

from eventbudget.utils.errors import (
    DependencyUnavailableError,
    NotFoundError,
    PartialFailureError,
    error_response,
)


def test_error_response_logs(caplog):
    caplog.set_level(logging.ERROR, logger="eventbudget.utils.errors")
    with pytest.raises(HTTPException):
        raise error_response("Invalid", {"field": "bad"})
    assert any(
        "Invalid" in r.getMessage() and "'field': 'bad'" in r.getMessage()
        for r in caplog.records
    )


def test_domain_errors_map_to_http():
    exc = NotFoundError("Event not found", {"event_id": "not_found"}).to_http()
    assert exc.status_code == 404
    assert exc.detail == {"message": "Event not found", "field_errors": {"event_id": "not_found"}}


def test_dependency_unavailable_names_the_collaborator():
    err = DependencyUnavailableError("market_data")
    assert err.status_code == 503
    assert err.code == "dependency_unavailable"
    assert err.message == "market_data unavailable"
    assert err.field_errors == {"market_data": "unavailable"}


def test_partial_failure_carries_result():
    err = PartialFailureError("half done", {"success": True})
    assert err.result == {"success": True}
    assert err.to_http().status_code == 500
