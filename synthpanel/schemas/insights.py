"""Investor-side insight schemas — match scores, purchase intent, reputation."""

from pydantic import BaseModel, ConfigDict, Field

from synthpanel.schemas.enums import ReputationRank


class MatchScoreInsight(BaseModel):
    """Oracle-scored fit between an investor thesis and a product."""

    model_config = ConfigDict(frozen=True)

    score: float = Field(..., ge=0.0, le=100.0)
    reasoning: str
    key_alignments: list[str] = Field(default_factory=list)
    potential_concerns: list[str] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)
    response_time_ms: float = Field(default=0.0, ge=0.0)


class BehavioralSignals(BaseModel):
    """How an investor engaged with a product card."""

    model_config = ConfigDict(frozen=True)

    time_spent_seconds: float = Field(default=0.0, ge=0.0)
    video_completion_pct: float = Field(default=0.0, ge=0.0, le=1.0)
    replay_count: int = Field(default=0, ge=0)
    clicked_founder_profile: bool = False
    previous_likes_in_category: int = Field(default=0, ge=0)


class PurchaseIntent(BaseModel):
    """Predicted likelihood an investor commits to a product."""

    model_config = ConfigDict(frozen=True)

    score: float = Field(..., ge=0.0, le=100.0)
    reasoning: str
    confidence: float = Field(..., ge=0.0, le=1.0)


class ActivityCounts(BaseModel):
    """Raw activity tallies a reputation score is computed from."""

    model_config = ConfigDict(frozen=True)

    review_count: int = Field(default=0, ge=0)
    detailed_review_count: int = Field(default=0, ge=0)
    interaction_count: int = Field(default=0, ge=0)
    message_count: int = Field(default=0, ge=0)
    super_like_count: int = Field(default=0, ge=0)
    account_age_days: int = Field(default=0, ge=0)


class ReputationBreakdown(BaseModel):
    """Points contributed by each factor, after caps."""

    model_config = ConfigDict(frozen=True)

    reviews: float
    detailed_reviews: float
    interactions: float
    messages: float
    super_likes: float
    account_age: float


class ReputationScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: float = Field(..., ge=0.0)
    rank: ReputationRank
    breakdown: ReputationBreakdown

    @property
    def rank_label(self) -> str:
        return self.rank.name.title()
