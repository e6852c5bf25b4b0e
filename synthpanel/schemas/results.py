"""Test run schemas — request, aggregate results and the stored record.

Produced by: Result Aggregator (TestResults), SyntheticTestRunner (record)
Consumed by: SyntheticTestStore, CLI

TestResults is immutable, and its rates are checked against its own
persona_responses on construction, so a caller cannot hand-set a rate
that disagrees with the underlying decisions.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from synthpanel.schemas.enums import (
    Decision,
    SubscriptionTier,
    SyntheticTestStatus,
    UserType,
)
from synthpanel.schemas.persona import PersonaResponse, SyntheticPersona
from synthpanel.schemas.product import Product
from synthpanel.utils.hashing import compute_content_hash

MAX_TOP_CONCERNS = 5
RATE_TOLERANCE = 1e-6


class SentimentAnalysis(BaseModel):
    """Positive / neutral / negative buckets in percent.

    The three values are not guaranteed to sum to 100; see
    analysis.aggregator.sentiment_from_interest.
    """

    model_config = ConfigDict(frozen=True)

    positive: float
    neutral: float
    negative: float


class TestResults(BaseModel):
    """Aggregate outcome of one synthetic panel."""

    __test__ = False

    model_config = ConfigDict(frozen=True)

    like_rate: float = Field(..., ge=0.0, le=100.0, description="Includes super likes")
    pass_rate: float = Field(..., ge=0.0, le=100.0)
    super_like_rate: float = Field(..., ge=0.0, le=100.0, description="Subset of like_rate")
    top_concerns: list[str] = Field(default_factory=list, max_length=MAX_TOP_CONCERNS)
    recommendations: list[str] = Field(default_factory=list)
    sentiment_analysis: SentimentAnalysis
    persona_responses: list[PersonaResponse] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _rates_match_responses(self) -> "TestResults":
        total = len(self.persona_responses)
        positive = sum(1 for r in self.persona_responses if r.is_positive)
        passed = sum(1 for r in self.persona_responses if r.decision == Decision.PASS)
        super_liked = sum(
            1 for r in self.persona_responses if r.decision == Decision.SUPER_LIKE
        )
        expected = {
            "like_rate": positive / total * 100,
            "pass_rate": passed / total * 100,
            "super_like_rate": super_liked / total * 100,
        }
        for name, value in expected.items():
            if abs(getattr(self, name) - value) > RATE_TOLERANCE:
                raise ValueError(
                    f"{name}={getattr(self, name)} does not match persona responses ({value})"
                )
        return self


class Requester(BaseModel):
    """Authenticated caller, as resolved by the identity provider."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_type: UserType
    tier: SubscriptionTier = SubscriptionTier.FREE


class SyntheticTestRequest(BaseModel):
    """Inbound request to run a synthetic panel against a product."""

    model_config = ConfigDict(frozen=True)

    product: Product
    persona_count: int = Field(default=100)
    payment_intent_id: Optional[str] = None


class SyntheticTestRecord(BaseModel):
    """A finished synthetic test, as persisted.

    Owned by one product and one founder. Immutable after creation.
    """

    model_config = ConfigDict(frozen=True)

    test_id: UUID = Field(default_factory=uuid4)
    product_id: str
    founder_id: str
    test_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    persona_count: int = Field(..., ge=1)
    synthetic_personas: list[SyntheticPersona]
    results: TestResults
    cost_usd: float = Field(default=0.0, ge=0.0)
    payment_intent_id: Optional[str] = None
    status: SyntheticTestStatus = SyntheticTestStatus.COMPLETED
    processing_time_seconds: int = Field(default=0, ge=0)
    content_hash: str = Field(default="")

    @model_validator(mode="after")
    def _compute_content_hash(self) -> "SyntheticTestRecord":
        if not self.content_hash:
            data = {
                "test_id": str(self.test_id),
                "product_id": self.product_id,
                "founder_id": self.founder_id,
                "persona_count": self.persona_count,
                "decisions": [r.decision.value for r in self.results.persona_responses],
                "recommendations": self.results.recommendations,
            }
            object.__setattr__(self, "content_hash", compute_content_hash(data))
        return self
