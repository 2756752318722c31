# backend/eventbudget/main.py

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import models  # noqa: F401  registers tables on Base.metadata
from .api import api_budget, api_packages, api_pricing
from .core.config import settings
from .core.observability import setup_logging
from .database import Base, engine
from .db_utils import seed_budget_recommendations, seed_service_pricing
from .utils.errors import BudgetEngineError, PartialFailureError

setup_logging()
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)
if settings.SEED_DEFAULT_DATA:
    seed_service_pricing(engine)
    seed_budget_recommendations(engine)

app = FastAPI(title="Event Budget API")


@app.exception_handler(BudgetEngineError)
async def budget_engine_exception_handler(request: Request, exc: BudgetEngineError):
    """Render domain errors as ``{"detail": {"message", "field_errors"}}``."""
    http_exc = exc.to_http()  # logs message and field errors
    content = {"detail": http_exc.detail}
    if isinstance(exc, PartialFailureError):
        # Callers need to know the application was recorded
        content["detail"]["result"] = jsonable_encoder(exc.result)
    return JSONResponse(status_code=http_exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.warning("Validation error at %s: %s", request.url.path, errors)
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


api_prefix = settings.API_V1_STR
app.include_router(api_pricing.router, prefix=api_prefix)
app.include_router(api_packages.router, prefix=api_prefix)
app.include_router(api_budget.router, prefix=api_prefix)


@app.get("/health")
def health():
    return {"status": "ok"}
