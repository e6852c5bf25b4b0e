"""synthpanel schemas — typed data contracts between pipeline steps."""

from synthpanel.schemas.enums import (
    Decision,
    GTMPriority,
    InvestmentStage,
    PricingType,
    ProductStage,
    ReputationRank,
    RiskTolerance,
    SubscriptionTier,
    SyntheticTestStatus,
    UserType,
)
from synthpanel.schemas.insights import (
    ActivityCounts,
    BehavioralSignals,
    MatchScoreInsight,
    PurchaseIntent,
    ReputationBreakdown,
    ReputationScore,
)
from synthpanel.schemas.market import (
    CompetitorAnalysis,
    DemographicSegment,
    FounderProfile,
    GTMStrategy,
    IncomeSegment,
    MarketAnalysisRequest,
    MarketAnalysisResult,
    MarketReport,
    MarketSizing,
)
from synthpanel.schemas.persona import InvestmentRange, PersonaResponse, SyntheticPersona
from synthpanel.schemas.product import MarketData, Product, ProductMetrics, ProductPricing
from synthpanel.schemas.results import (
    Requester,
    SentimentAnalysis,
    SyntheticTestRecord,
    SyntheticTestRequest,
    TestResults,
)

__all__ = [
    "ActivityCounts",
    "BehavioralSignals",
    "CompetitorAnalysis",
    "Decision",
    "DemographicSegment",
    "FounderProfile",
    "GTMPriority",
    "GTMStrategy",
    "IncomeSegment",
    "InvestmentRange",
    "InvestmentStage",
    "MarketAnalysisRequest",
    "MarketAnalysisResult",
    "MarketData",
    "MarketReport",
    "MarketSizing",
    "MatchScoreInsight",
    "PersonaResponse",
    "PricingType",
    "Product",
    "ProductMetrics",
    "ProductPricing",
    "ProductStage",
    "PurchaseIntent",
    "ReputationBreakdown",
    "ReputationRank",
    "ReputationScore",
    "Requester",
    "RiskTolerance",
    "SentimentAnalysis",
    "SubscriptionTier",
    "SyntheticPersona",
    "SyntheticTestRecord",
    "SyntheticTestRequest",
    "SyntheticTestStatus",
    "TestResults",
    "UserType",
]
