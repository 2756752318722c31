from .pricing_factors import (
    AdjustmentFactor,
    FactorRequest,
    FixedFactor,
    HttpLocationFactor,
    HttpMarketData,
    MarketDataSource,
    NoMarketData,
    SeasonalCalendar,
)
from .pricing_resolver import PricingResolver
from .package_catalog import PackageCatalog, price_package
from .package_applier import PackageApplier
from .budget_breakdown import BudgetBreakdownManager
from .budget_recommendations import BudgetRecommendationService
from . import budget_tracking
