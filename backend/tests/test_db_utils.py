from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from eventbudget import models
from eventbudget.db_utils import (
    DEFAULT_RECOMMENDATIONS,
    DEFAULT_SERVICE_PRICING,
    seed_budget_recommendations,
    seed_service_pricing,
)
from eventbudget.models.base import BaseModel


def setup_engine():
    engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
    BaseModel.metadata.create_all(engine)
    return engine


def test_seeding_is_idempotent():
    engine = setup_engine()
    seed_service_pricing(engine)
    seed_service_pricing(engine)
    seed_budget_recommendations(engine)
    seed_budget_recommendations(engine)

    with Session(engine) as db:
        assert db.query(models.ServicePricing).count() == len(DEFAULT_SERVICE_PRICING)
        assert db.query(models.BudgetRecommendation).count() == len(DEFAULT_RECOMMENDATIONS)


def test_seeding_keeps_existing_rows():
    engine = setup_engine()
    with Session(engine) as db:
        db.add(models.ServicePricing(service_type="catering", price_min=1, price_average=2, price_max=3))
        db.commit()

    seed_service_pricing(engine)

    with Session(engine) as db:
        catering = db.query(models.ServicePricing).filter_by(service_type="catering").one()
        assert catering.price_average == 2
