"""Product schema — the startup listing a synthetic panel evaluates.

Owned by a founder. Read-only for the whole test run; every persona
evaluation shares the same instance.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from synthpanel.schemas.enums import PricingType, ProductStage


class ProductPricing(BaseModel):
    """How the product charges its customers."""

    model_config = ConfigDict(frozen=True)

    amount: float = Field(..., ge=0.0, description="Price in the given currency")
    currency: str = Field(default="USD")
    type: PricingType = Field(..., description="Pricing model")
    equity_percentage: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    recurring_interval: Optional[str] = Field(
        default=None,
        description="'monthly' or 'yearly' for subscriptions",
    )


class ProductMetrics(BaseModel):
    """Traction numbers reported by the founder."""

    model_config = ConfigDict(frozen=True)

    mrr: Optional[float] = Field(default=None, ge=0.0)
    users: Optional[int] = Field(default=None, ge=0)
    growth_rate: Optional[float] = None


class MarketData(BaseModel):
    """Founder-supplied market context."""

    model_config = ConfigDict(frozen=True)

    tam: Optional[float] = Field(default=None, ge=0.0, description="Total addressable market (USD)")
    competitors: list[str] = Field(default_factory=list)
    stage: Optional[ProductStage] = None
    metrics: Optional[ProductMetrics] = None


class Product(BaseModel):
    """A startup product listed on the marketplace."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Product identifier")
    founder_id: str = Field(..., description="Owning founder's user ID")
    title: str = Field(..., description="Product name")
    description_7words: str = Field(..., description="Seven-word pitch")
    full_description: Optional[str] = None
    category: str = Field(..., description="Marketplace category, e.g. 'ai' or 'fintech'")
    tags: list[str] = Field(default_factory=list)
    pricing: ProductPricing
    ai_generated_summary: Optional[str] = None
    market_data: Optional[MarketData] = None

    @field_validator("title", "description_7words")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must be a non-empty string")
        return v

    def pricing_json(self) -> str:
        """Compact pricing rendering for prompts."""
        return self.pricing.model_dump_json(exclude_none=True)
