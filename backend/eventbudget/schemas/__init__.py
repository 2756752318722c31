from .pricing import LocationData, PriceBand, MarketSnapshot, PricingQuote
from .budget import (
    AdjustmentType,
    AdjustmentOperation,
    BudgetAdjustment,
    AdjustmentRequest,
    BreakdownEntryRead,
    BreakdownRead,
    AdjustmentOutcome,
    AdjustmentResult,
    RecommendationRead,
    DraftBreakdownEntry,
    BudgetMultipliers,
    CalculationMetadata,
    BudgetCalculation,
    TrackingRequest,
    TrackingRead,
    VarianceItem,
    BudgetInsights,
)
from .package import (
    PackageDealCreate,
    PackagePricingUpdate,
    PackageDealRead,
    PackageListRead,
    AppliedPackageResult,
)
