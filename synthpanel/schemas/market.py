"""Market analysis schemas — demographic, sizing and go-to-market research.

Produced by: MarketAnalysisService
Consumed by: CLI

MarketReport is the oracle-authored part of an analysis. The service
wraps it into a MarketAnalysisResult with identifiers and timing.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from synthpanel.schemas.enums import GTMPriority

MIN_DESCRIPTION_CHARS = 100
DEFAULT_CONFIDENCE_SCORE = 85.0


class DemographicSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    age_range: str
    gender: str = "All"
    ethnicity: Optional[str] = None
    purchase_intent: float = Field(..., ge=0.0, le=100.0)
    population_percentage: float = Field(..., ge=0.0, le=100.0)
    psychographic_profile: str = ""
    behavioral_insights: list[str] = Field(default_factory=list)
    motivations: list[str] = Field(default_factory=list)
    pain_points: list[str] = Field(default_factory=list)
    media_consumption: list[str] = Field(default_factory=list)


class IncomeSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    income_bracket: str = Field(..., description="e.g. '$40-75k/yr'")
    purchase_intent: float = Field(..., ge=0.0, le=100.0)
    market_size_percentage: float = Field(..., ge=0.0, le=100.0)
    financial_profile: str = ""
    spending_behavior: str = ""
    value_drivers: list[str] = Field(default_factory=list)


class MarketSizing(BaseModel):
    """TAM / SAM / SOM in USD."""

    model_config = ConfigDict(frozen=True)

    tam: float = Field(default=0.0, ge=0.0, description="Total addressable market")
    sam: float = Field(default=0.0, ge=0.0, description="Serviceable addressable market")
    som: float = Field(default=0.0, ge=0.0, description="Serviceable obtainable market, first year")
    methodology: str = ""
    key_assumptions: list[str] = Field(default_factory=list)
    geographic_focus: str = "Global"


class CompetitorAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: Optional[str] = None
    positioning: str = ""
    pricing: str = ""
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    differentiation_opportunities: list[str] = Field(default_factory=list)


class GTMStrategy(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    priority: GTMPriority
    description: str = ""
    channels: list[str] = Field(default_factory=list)
    target_segments: list[str] = Field(default_factory=list)
    estimated_cost: str = ""
    expected_timeline: str = ""
    success_metrics: list[str] = Field(default_factory=list)


class MarketReport(BaseModel):
    """Oracle-authored market research for one product."""

    model_config = ConfigDict(frozen=True)

    executive_summary: str = ""
    demographics: list[DemographicSegment] = Field(default_factory=list)
    income_segments: list[IncomeSegment] = Field(default_factory=list)
    market_sizing: MarketSizing = Field(default_factory=MarketSizing)
    competitors: list[CompetitorAnalysis] = Field(default_factory=list)
    gtm_strategies: list[GTMStrategy] = Field(default_factory=list)
    critical_insights: list[str] = Field(default_factory=list)
    real_talk_summary: str = ""
    confidence_score: float = Field(default=DEFAULT_CONFIDENCE_SCORE, ge=0.0, le=100.0)


class MarketAnalysisRequest(BaseModel):
    """Inbound request for a market analysis."""

    model_config = ConfigDict(frozen=True)

    product_name: str
    description: str = Field(..., description=f"At least {MIN_DESCRIPTION_CHARS} characters")
    price_point: str
    product_id: Optional[str] = None


class MarketAnalysisResult(MarketReport):
    """A completed market analysis, as returned to the founder."""

    id: UUID = Field(default_factory=uuid4)
    product_id: str
    founder_id: str
    analysis_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    processing_time_ms: float = Field(default=0.0, ge=0.0)


class FounderProfile(BaseModel):
    """Public profile of the founder behind a product."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    company: Optional[str] = None
    bio: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    previous_exits: int = Field(default=0, ge=0)
