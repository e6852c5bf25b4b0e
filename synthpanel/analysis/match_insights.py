"""Oracle-backed investor insights: thesis match scores and purchase intent.

Unlike the panel evaluation, these are single calls made on behalf of
one investor, so failures propagate to the caller unchanged.
"""

import time

import structlog

from synthpanel.config.prompts import MATCH_SCORE, PURCHASE_INTENT, load_prompt
from synthpanel.infra.llm_client import LLMClient
from synthpanel.personas.response_parser import parse_match_score, parse_purchase_intent
from synthpanel.schemas.enums import InvestmentStage
from synthpanel.schemas.insights import BehavioralSignals, MatchScoreInsight, PurchaseIntent
from synthpanel.schemas.product import Product

logger = structlog.get_logger()

DEFAULT_INSIGHT_MAX_TOKENS = 1024


class MatchInsightService:
    def __init__(self, llm_client: LLMClient, max_tokens: int = DEFAULT_INSIGHT_MAX_TOKENS) -> None:
        self._llm_client = llm_client
        self._max_tokens = max_tokens
        self._match_prompt = load_prompt(MATCH_SCORE)
        self._intent_prompt = load_prompt(PURCHASE_INTENT)

    async def score_match(self, thesis: str, product: Product) -> MatchScoreInsight:
        """Score how well an investor thesis fits a product.

        Raises:
            ExternalAPIError: If the oracle call fails.
            ResponseParseError: If the reply cannot be decoded.
        """
        summary_line = (
            f"- AI Summary: {product.ai_generated_summary}" if product.ai_generated_summary else ""
        )
        prompt = self._match_prompt.render(
            thesis=thesis,
            title=product.title,
            pitch=product.description_7words,
            description=product.full_description or "Not provided",
            category=product.category,
            pricing=product.pricing_json(),
            summary_line=summary_line,
        )

        start_time = time.monotonic()
        text = await self._llm_client.generate_text(
            prompt,
            system_prompt=self._match_prompt.system_prompt,
            max_tokens=self._max_tokens,
        )
        response_time_ms = round((time.monotonic() - start_time) * 1000.0, 1)

        insight = parse_match_score(text, response_time_ms=response_time_ms)
        logger.info(
            "Match score computed",
            product_id=product.id,
            score=insight.score,
            confidence=insight.confidence,
            response_time_ms=response_time_ms,
        )
        return insight

    async def predict_purchase_intent(
        self,
        signals: BehavioralSignals,
        product: Product,
        thesis: str,
        stage_preference: list[InvestmentStage],
    ) -> PurchaseIntent:
        """Predict whether an investor will commit, from engagement signals.

        Raises:
            ExternalAPIError: If the oracle call fails.
            ResponseParseError: If the reply cannot be decoded.
        """
        prompt = self._intent_prompt.render(
            time_spent_seconds=signals.time_spent_seconds,
            video_completion_pct=signals.video_completion_pct * 100,
            replay_count=signals.replay_count,
            clicked_founder_profile="Yes" if signals.clicked_founder_profile else "No",
            previous_likes_in_category=signals.previous_likes_in_category,
            title=product.title,
            pitch=product.description_7words,
            category=product.category,
            pricing=product.pricing_json(),
            thesis=thesis,
            stages=", ".join(s.value for s in stage_preference) or "Any",
        )
        text = await self._llm_client.generate_text(
            prompt,
            system_prompt=self._intent_prompt.system_prompt,
            max_tokens=self._max_tokens,
        )
        intent = parse_purchase_intent(text)
        logger.info("Purchase intent predicted", product_id=product.id, score=intent.score)
        return intent
