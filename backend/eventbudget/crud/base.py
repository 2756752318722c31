import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..utils.errors import DependencyUnavailableError

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(db: Session, action: str) -> Iterator[None]:
    """Roll back and surface database failures as ``DependencyUnavailableError``."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Storage failure during %s: %s", action, exc, exc_info=True)
        raise DependencyUnavailableError("storage") from exc
