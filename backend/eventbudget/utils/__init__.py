from .errors import (
    error_response,
    BudgetEngineError,
    InvalidArgumentError,
    NotFoundError,
    IncompatibleError,
    UnauthorizedError,
    DependencyUnavailableError,
    PartialFailureError,
)
from .money import round_money, sum_money, to_decimal
