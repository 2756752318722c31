from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from ..database import get_db
from ..services import (
    BudgetBreakdownManager,
    BudgetRecommendationService,
    PackageApplier,
    PackageCatalog,
    PricingResolver,
)
from ..utils import error_response


def get_current_actor_id(x_actor_id: Optional[str] = Header(default=None)) -> str:
    """Identity of the caller as asserted by the authentication gateway.

    Deployments behind a different auth layer override this dependency.
    """
    if not x_actor_id or not x_actor_id.strip():
        raise error_response("Authentication required", {"actor": "required"}, 401)
    return x_actor_id.strip()


def get_admin_actor_id(actor_id: str = Depends(get_current_actor_id)) -> str:
    """Caller allowed to manage the package catalog.

    Any identified caller by default; deployments override this with their
    own admin check.
    """
    return actor_id


def get_pricing_resolver(db: Session = Depends(get_db)) -> PricingResolver:
    return PricingResolver(db)


def get_package_catalog(db: Session = Depends(get_db)) -> PackageCatalog:
    return PackageCatalog(db)


def get_package_applier(db: Session = Depends(get_db)) -> PackageApplier:
    return PackageApplier(db)


def get_breakdown_manager(db: Session = Depends(get_db)) -> BudgetBreakdownManager:
    return BudgetBreakdownManager(db)


def get_recommendation_service(db: Session = Depends(get_db)) -> BudgetRecommendationService:
    return BudgetRecommendationService(db)
