from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from .budget import BreakdownEntryRead


class PackageDealBase(BaseModel):
    name: str
    description: Optional[str] = None
    event_type: str
    base_price: Decimal = Field(ge=0)
    discount_percentage: Decimal = Field(ge=0, le=100)
    service_categories: List[str] = Field(default_factory=list)


class PackageDealCreate(PackageDealBase):
    is_active: bool = True


class PackagePricingUpdate(BaseModel):
    base_price: Optional[Decimal] = None
    discount_percentage: Optional[Decimal] = None


class PackageDealRead(PackageDealBase):
    id: str
    is_active: bool
    discount_amount: Decimal
    final_price: Decimal
    savings: Decimal


class PackageListRead(BaseModel):
    packages: List[PackageDealRead]
    # Display aggregate only: packages may be mutually exclusive
    total_savings: Decimal
    currency: str


class AppliedPackageResult(PackageDealRead):
    event_id: str
    applied_at: str
    success: bool
    event_updated: bool
    budget_updated: bool
    budget_total: Decimal
    breakdown: List[BreakdownEntryRead] = Field(default_factory=list)
