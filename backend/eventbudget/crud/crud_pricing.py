from typing import Optional

from sqlalchemy.orm import Session

from .. import models


def get_service_pricing(db: Session, service_type: str) -> Optional[models.ServicePricing]:
    return (
        db.query(models.ServicePricing)
        .filter(models.ServicePricing.service_type == service_type)
        .first()
    )


def get_recommendations(db: Session, event_type: str) -> list[models.BudgetRecommendation]:
    return (
        db.query(models.BudgetRecommendation)
        .filter(models.BudgetRecommendation.event_type == event_type)
        .order_by(
            models.BudgetRecommendation.confidence_score.desc(),
            models.BudgetRecommendation.service_category.asc(),
        )
        .all()
    )
