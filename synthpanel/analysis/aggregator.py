"""Result Aggregator — turns a panel's responses into TestResults.

The statistics are a pure function of the responses. Recommendations
come from one further oracle call, and that call is fatal on failure:
a test without recommendations is never returned.
"""

from collections import Counter
from dataclasses import dataclass

import structlog

from synthpanel.config.prompts import RECOMMENDATIONS, load_prompt
from synthpanel.exceptions import (
    ExternalAPIError,
    InvalidRequestError,
    RecommendationError,
    ResponseParseError,
)
from synthpanel.infra.llm_client import LLMClient
from synthpanel.personas.response_parser import parse_recommendations
from synthpanel.schemas.enums import Decision
from synthpanel.schemas.persona import PersonaResponse
from synthpanel.schemas.product import Product
from synthpanel.schemas.results import MAX_TOP_CONCERNS, SentimentAnalysis, TestResults

logger = structlog.get_logger()

SAMPLE_FEEDBACK_COUNT = 5
DEFAULT_RECOMMENDATION_MAX_TOKENS = 2048


@dataclass(frozen=True)
class PanelStatistics:
    like_rate: float
    pass_rate: float
    super_like_rate: float
    top_concerns: list[str]
    sentiment: SentimentAnalysis


def compute_rates(responses: list[PersonaResponse]) -> tuple[float, float, float]:
    """Return (like_rate, pass_rate, super_like_rate) in percent.

    like_rate counts super likes as likes.
    """
    if not responses:
        raise InvalidRequestError("cannot compute rates over zero responses")
    total = len(responses)
    counts = Counter(r.decision for r in responses)
    like_rate = (counts[Decision.LIKE] + counts[Decision.SUPER_LIKE]) / total * 100
    pass_rate = counts[Decision.PASS] / total * 100
    super_like_rate = counts[Decision.SUPER_LIKE] / total * 100
    return like_rate, pass_rate, super_like_rate


def rank_concerns(responses: list[PersonaResponse], limit: int = MAX_TOP_CONCERNS) -> list[str]:
    """Most frequent concerns by exact string, ties by first occurrence."""
    counter: Counter[str] = Counter()
    for response in responses:
        counter.update(response.concerns)
    # most_common keeps insertion order among equal counts
    return [concern for concern, _count in counter.most_common(limit)]


def sentiment_from_interest(average_interest: float) -> SentimentAnalysis:
    """Bucket the mean interest score into sentiment percentages.

    The middle band can yield a negative "negative" share (for an
    average above 50) and the buckets need not sum to 100. Stored
    results depend on these exact values.
    """
    if average_interest > 70:
        return SentimentAnalysis(positive=70, neutral=30, negative=0)
    if average_interest < 40:
        return SentimentAnalysis(positive=average_interest, neutral=30, negative=70)
    return SentimentAnalysis(
        positive=average_interest, neutral=50, negative=50 - average_interest,
    )


def compute_statistics(responses: list[PersonaResponse]) -> PanelStatistics:
    """Pure statistics over a response batch.

    Raises:
        InvalidRequestError: If responses is empty.
    """
    if not responses:
        raise InvalidRequestError("cannot aggregate an empty response batch")

    like_rate, pass_rate, super_like_rate = compute_rates(responses)
    average_interest = sum(r.interest_score for r in responses) / len(responses)
    return PanelStatistics(
        like_rate=like_rate,
        pass_rate=pass_rate,
        super_like_rate=super_like_rate,
        top_concerns=rank_concerns(responses),
        sentiment=sentiment_from_interest(average_interest),
    )


class ResultAggregator:
    """Computes panel statistics and asks the oracle for recommendations."""

    def __init__(
        self,
        llm_client: LLMClient,
        max_tokens: int = DEFAULT_RECOMMENDATION_MAX_TOKENS,
        prompt_version: str = RECOMMENDATIONS,
    ) -> None:
        self._llm_client = llm_client
        self._max_tokens = max_tokens
        self._prompt = load_prompt(prompt_version)

    def build_prompt(
        self,
        stats: PanelStatistics,
        responses: list[PersonaResponse],
        product: Product,
    ) -> str:
        top_concerns = "\n".join(
            f"{i}. {concern}" for i, concern in enumerate(stats.top_concerns, start=1)
        )
        sample_feedback = "\n".join(
            f'{r.persona.role}: "{r.reasoning}"' for r in responses[:SAMPLE_FEEDBACK_COUNT]
        )
        return self._prompt.render(
            title=product.title,
            pitch=product.description_7words,
            like_rate=stats.like_rate,
            pass_rate=stats.pass_rate,
            super_like_rate=stats.super_like_rate,
            top_concerns=top_concerns,
            sample_feedback=sample_feedback,
        )

    async def recommend(
        self,
        stats: PanelStatistics,
        responses: list[PersonaResponse],
        product: Product,
    ) -> list[str]:
        """Request recommendations for the panel outcome.

        Raises:
            RecommendationError: If the oracle call fails or its reply
                is not a non-empty list of strings.
        """
        try:
            text = await self._llm_client.generate_text(
                self.build_prompt(stats, responses, product),
                system_prompt=self._prompt.system_prompt,
                max_tokens=self._max_tokens,
            )
            return parse_recommendations(text)
        except (ExternalAPIError, ResponseParseError) as e:
            logger.error("Recommendation generation failed", product_id=product.id, error=str(e))
            raise RecommendationError(f"Recommendation generation failed: {e}") from e

    async def aggregate(
        self,
        responses: list[PersonaResponse],
        product: Product,
    ) -> TestResults:
        """Aggregate a full response batch into TestResults.

        Raises:
            InvalidRequestError: If responses is empty. No oracle call is made.
            RecommendationError: If recommendations cannot be produced.
        """
        stats = compute_statistics(responses)
        logger.info(
            "Panel statistics computed",
            product_id=product.id,
            response_count=len(responses),
            like_rate=round(stats.like_rate, 1),
            pass_rate=round(stats.pass_rate, 1),
            super_like_rate=round(stats.super_like_rate, 1),
        )
        recommendations = await self.recommend(stats, responses, product)

        return TestResults(
            like_rate=stats.like_rate,
            pass_rate=stats.pass_rate,
            super_like_rate=stats.super_like_rate,
            top_concerns=stats.top_concerns,
            recommendations=recommendations,
            sentiment_analysis=stats.sentiment,
            persona_responses=responses,
        )
