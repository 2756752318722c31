import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..crud import crud_package, storage_errors
from ..database import get_db
from ..services import PackageApplier, PackageCatalog, price_package
from .dependencies import (
    get_admin_actor_id,
    get_current_actor_id,
    get_package_applier,
    get_package_catalog,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["packages"])


def _split_csv(value: Optional[str]) -> Optional[list[str]]:
    if value is None:
        return None
    return value.split(",")


@router.get("/packages", response_model=schemas.PackageListRead)
def list_packages(
    event_type: str = Query(""),
    service_categories: Optional[str] = Query(None, description="Comma separated category slugs"),
    location: Optional[str] = Query(None, description="JSON object with lat/lng"),
    catalog: PackageCatalog = Depends(get_package_catalog),
):
    return catalog.list_packages(
        event_type,
        location=location,
        service_categories=_split_csv(service_categories),
    )


@router.post("/packages", response_model=schemas.PackageDealRead, status_code=status.HTTP_201_CREATED)
def create_package(
    package_in: schemas.PackageDealCreate,
    actor_id: str = Depends(get_admin_actor_id),
    db: Session = Depends(get_db),
):
    with storage_errors(db, "package create"):
        package = crud_package.create_package(db, package_in)
    logger.info("Package %s created for %s by %s", package.id, package.event_type, actor_id)
    return price_package(package)


@router.patch("/packages/{package_id}/pricing", response_model=schemas.PackageDealRead)
def update_package_pricing(
    package_id: str,
    pricing: schemas.PackagePricingUpdate,
    actor_id: str = Depends(get_admin_actor_id),
    db: Session = Depends(get_db),
):
    with storage_errors(db, "package pricing update"):
        package = crud_package.update_package_pricing(db, package_id, pricing)
    logger.info("Package %s pricing updated by %s", package.id, actor_id)
    return price_package(package)


@router.post("/packages/{package_id}/deactivate", response_model=schemas.PackageDealRead)
def deactivate_package(
    package_id: str,
    actor_id: str = Depends(get_admin_actor_id),
    db: Session = Depends(get_db),
):
    with storage_errors(db, "package deactivate"):
        package = crud_package.deactivate_package(db, package_id)
    logger.debug("Deactivate requested for package %s by %s", package.id, actor_id)
    return price_package(package)


@router.post(
    "/events/{event_id}/packages/{package_id}/apply",
    response_model=schemas.AppliedPackageResult,
)
def apply_package(
    event_id: str,
    package_id: str,
    actor_id: str = Depends(get_current_actor_id),
    applier: PackageApplier = Depends(get_package_applier),
):
    return applier.apply(event_id, package_id, actor_id)
