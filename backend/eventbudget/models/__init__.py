from .event import Event
from .package_deal import PackageDeal, AppliedPackage
from .budget import ServiceBudgetBreakdown, BudgetRecommendation, BudgetTracking
from .pricing import ServicePricing

__all__ = [
    "Event",
    "PackageDeal",
    "AppliedPackage",
    "ServiceBudgetBreakdown",
    "BudgetRecommendation",
    "BudgetTracking",
    "ServicePricing",
]
