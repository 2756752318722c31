from typing import Any, Dict, Optional
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


def error_response(
    message: str,
    field_errors: Dict[str, str],
    code: int = status.HTTP_422_UNPROCESSABLE_ENTITY,
) -> HTTPException:
    """Return an HTTPException with a consistent structure and log details."""
    logger.error("%s %s", message, field_errors)
    detail = {"message": message, "field_errors": field_errors}
    return HTTPException(status_code=code, detail=detail)


class BudgetEngineError(Exception):
    """Base class for failures raised by the budget and pricing services.

    ``code`` is the stable error kind; ``status_code`` is the HTTP status the
    API layer maps it to.
    """

    code = "internal_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field_errors = dict(field_errors or {})

    def to_http(self) -> HTTPException:
        return error_response(self.message, self.field_errors, self.status_code)


class InvalidArgumentError(BudgetEngineError):
    code = "invalid_argument"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(BudgetEngineError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class IncompatibleError(BudgetEngineError):
    code = "incompatible"
    status_code = status.HTTP_409_CONFLICT


class UnauthorizedError(BudgetEngineError):
    code = "unauthorized"
    status_code = status.HTTP_403_FORBIDDEN


class DependencyUnavailableError(BudgetEngineError):
    """A collaborator (HTTP service or database) timed out or failed. Retryable."""

    code = "dependency_unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, dependency: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"{dependency} unavailable", {dependency: "unavailable"})
        self.dependency = dependency


class PartialFailureError(BudgetEngineError):
    """Raised when a package application was recorded but its budget effects were not.

    ``result`` holds the recorded application with the effect flags cleared so
    callers can retry the dependent steps without re-recording.
    """

    code = "partial_failure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, result: Any) -> None:
        super().__init__(message, {"package_id": "applied_without_budget_update"})
        self.result = result
