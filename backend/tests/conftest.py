from pathlib import Path
from dotenv import load_dotenv

# Load environment variables for tests before the app settings are built
load_dotenv(Path(__file__).resolve().parents[1] / '.env.test')

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from eventbudget import models
from eventbudget.crud import crud_event, crud_package
from eventbudget.models.base import BaseModel
from eventbudget.schemas import PackageDealCreate

OWNER = "owner-1"


def setup_db():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    BaseModel.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    return Session()


@pytest.fixture
def db():
    session = setup_db()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_event(db):
    def _make(event_type="wedding", owner_id=OWNER, **kwargs):
        return crud_event.create_event(db, owner_id=owner_id, event_type=event_type, **kwargs)

    return _make


@pytest.fixture
def make_package(db):
    def _make(
        name="Gold",
        event_type="wedding",
        base_price="1000",
        discount="20",
        categories=("catering", "venue"),
        is_active=True,
        created_at=None,
    ):
        package = crud_package.create_package(
            db,
            PackageDealCreate(
                name=name,
                event_type=event_type,
                base_price=Decimal(base_price),
                discount_percentage=Decimal(discount),
                service_categories=list(categories),
                is_active=is_active,
            ),
        )
        if created_at is not None:
            package.created_at = created_at
            db.commit()
            db.refresh(package)
        return package

    return _make


@pytest.fixture
def add_entry(db):
    def _add(event, category, cost):
        entry = models.ServiceBudgetBreakdown(
            event_id=event.id,
            service_category=category,
            estimated_cost=Decimal(cost),
            package_applied=False,
        )
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    return _add


@pytest.fixture
def add_pricing(db):
    def _add(service_type="catering", low="50", average="85", high="150", updated_at=None):
        row = models.ServicePricing(
            service_type=service_type,
            price_min=Decimal(low),
            price_average=Decimal(average),
            price_max=Decimal(high),
            data_source="contractor_data",
        )
        if updated_at is not None:
            row.created_at = updated_at
            row.updated_at = updated_at
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    return _add


@pytest.fixture(autouse=True)
def reset_dependency_overrides():
    """Keep dependency overrides from leaking between API tests."""
    yield
    from eventbudget.main import app

    app.dependency_overrides.clear()
