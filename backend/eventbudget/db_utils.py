import logging
from decimal import Decimal

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from eventbudget import models

logger = logging.getLogger(__name__)

# (service_type, min, average, max)
DEFAULT_SERVICE_PRICING = [
    ("catering", "50", "85", "150"),
    ("venue", "2000", "4500", "9000"),
    ("photography", "1200", "2500", "4500"),
    ("music", "800", "1600", "3000"),
    ("entertainment", "500", "1200", "2500"),
    ("decorations", "300", "900", "2000"),
    ("lighting", "400", "1000", "2200"),
    ("sound", "400", "950", "2000"),
    ("security", "300", "700", "1500"),
    ("staffing", "250", "600", "1300"),
]

# (event_type, service_category, recommended_amount, confidence)
DEFAULT_RECOMMENDATIONS = [
    ("wedding", "catering", "5000", "0.85"),
    ("wedding", "venue", "4000", "0.90"),
    ("wedding", "photography", "2500", "0.80"),
    ("wedding", "music", "1500", "0.75"),
    ("wedding", "decorations", "1200", "0.70"),
    ("corporate", "catering", "3500", "0.85"),
    ("corporate", "venue", "3000", "0.85"),
    ("corporate", "sound", "1200", "0.75"),
    ("corporate", "staffing", "900", "0.70"),
    ("birthday", "catering", "1200", "0.80"),
    ("birthday", "venue", "800", "0.80"),
    ("birthday", "entertainment", "600", "0.70"),
]


def seed_service_pricing(engine: Engine) -> None:
    """Insert any missing default price bands. Existing rows are left alone."""
    with Session(engine) as db:
        existing = {row.service_type for row in db.query(models.ServicePricing.service_type)}
        added = 0
        for service_type, low, average, high in DEFAULT_SERVICE_PRICING:
            if service_type in existing:
                continue
            db.add(
                models.ServicePricing(
                    service_type=service_type,
                    price_min=Decimal(low),
                    price_average=Decimal(average),
                    price_max=Decimal(high),
                    data_source="industry_average",
                )
            )
            added += 1
        db.commit()
    if added:
        logger.info("Seeded %d service pricing rows", added)


def seed_budget_recommendations(engine: Engine) -> None:
    """Insert any missing default (event_type, category) recommendations."""
    with Session(engine) as db:
        existing = {
            (row.event_type, row.service_category)
            for row in db.query(
                models.BudgetRecommendation.event_type,
                models.BudgetRecommendation.service_category,
            )
        }
        added = 0
        for event_type, category, amount, confidence in DEFAULT_RECOMMENDATIONS:
            if (event_type, category) in existing:
                continue
            db.add(
                models.BudgetRecommendation(
                    event_type=event_type,
                    service_category=category,
                    recommended_amount=Decimal(amount),
                    confidence_score=Decimal(confidence),
                    pricing_source="industry_average",
                )
            )
            added += 1
        db.commit()
    if added:
        logger.info("Seeded %d budget recommendations", added)
