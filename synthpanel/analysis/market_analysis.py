"""Oracle-backed founder and investor research.

MarketAnalysisService covers three single-call reports:
  - market analysis: demographics, income segments, TAM/SAM/SOM,
    competitors and go-to-market strategies for a product idea
  - due diligence brief: a short investor-facing write-up
  - product summary: the ai_generated_summary shown on product cards

Like MatchInsightService, failures propagate to the caller unchanged.
"""

import time
from uuid import uuid4

import structlog

from synthpanel.config.access import AccessPolicy
from synthpanel.config.prompts import (
    DUE_DILIGENCE,
    MARKET_ANALYSIS,
    PRODUCT_SUMMARY,
    load_prompt,
)
from synthpanel.exceptions import AccessDeniedError, InvalidRequestError, ResponseParseError
from synthpanel.infra.llm_client import LLMClient
from synthpanel.personas.response_parser import parse_market_analysis
from synthpanel.schemas.market import (
    MIN_DESCRIPTION_CHARS,
    FounderProfile,
    MarketAnalysisRequest,
    MarketAnalysisResult,
)
from synthpanel.schemas.product import Product
from synthpanel.schemas.results import Requester

logger = structlog.get_logger()

MARKET_ANALYSIS_FEATURE = "market_analysis"
DUE_DILIGENCE_FEATURE = "due_diligence"

MARKET_ANALYSIS_MAX_TOKENS = 16000
DUE_DILIGENCE_MAX_TOKENS = 2048
PRODUCT_SUMMARY_MAX_TOKENS = 256


class MarketAnalysisService:
    def __init__(
        self,
        llm_client: LLMClient,
        policy: AccessPolicy | None = None,
        analysis_max_tokens: int = MARKET_ANALYSIS_MAX_TOKENS,
    ) -> None:
        self._llm_client = llm_client
        self._policy = policy or AccessPolicy()
        self._analysis_max_tokens = analysis_max_tokens
        self._analysis_prompt = load_prompt(MARKET_ANALYSIS)
        self._diligence_prompt = load_prompt(DUE_DILIGENCE)
        self._summary_prompt = load_prompt(PRODUCT_SUMMARY)

    def _authorize(self, feature: str, requester: Requester) -> None:
        decision = self._policy.check(feature, requester.tier)
        if not decision.has_access:
            raise AccessDeniedError(
                f"{feature} requires the {decision.required_tier.value} plan",
                feature=feature,
            )

    @staticmethod
    def _validate(request: MarketAnalysisRequest) -> None:
        missing = [
            name for name in ("product_name", "description", "price_point")
            if not getattr(request, name).strip()
        ]
        if missing:
            raise InvalidRequestError(f"Missing required fields: {', '.join(missing)}")
        if len(request.description) < MIN_DESCRIPTION_CHARS:
            raise InvalidRequestError(
                f"Description must be at least {MIN_DESCRIPTION_CHARS} characters "
                f"for accurate analysis, got {len(request.description)}"
            )

    async def analyze_market(
        self,
        request: MarketAnalysisRequest,
        requester: Requester,
    ) -> MarketAnalysisResult:
        """Run a full market analysis for a product idea.

        Args:
            request: Product name, description and price point.
            requester: Authenticated caller; recorded as the founder.

        Returns:
            MarketAnalysisResult with the report, IDs and timing.

        Raises:
            InvalidRequestError: If a field is blank or the description
                is shorter than 100 characters. No oracle call is made.
            AccessDeniedError: If the requester's plan lacks the feature.
            ExternalAPIError: If the oracle call fails.
            ResponseParseError: If the reply cannot be decoded.
        """
        self._validate(request)
        self._authorize(MARKET_ANALYSIS_FEATURE, requester)

        log = logger.bind(product_name=request.product_name, founder_id=requester.id)
        log.info("Market analysis requested")

        prompt = self._analysis_prompt.render(
            product_name=request.product_name,
            description=request.description,
            price_point=request.price_point,
        )
        start_time = time.monotonic()
        text = await self._llm_client.generate_text(
            prompt,
            system_prompt=self._analysis_prompt.system_prompt,
            max_tokens=self._analysis_max_tokens,
        )
        report = parse_market_analysis(text)
        processing_time_ms = round((time.monotonic() - start_time) * 1000.0, 1)

        result = MarketAnalysisResult(
            **report.model_dump(),
            product_id=request.product_id or str(uuid4()),
            founder_id=requester.id,
            processing_time_ms=processing_time_ms,
        )
        log.info(
            "Market analysis completed",
            analysis_id=str(result.id),
            segment_count=len(result.demographics),
            competitor_count=len(result.competitors),
            confidence_score=result.confidence_score,
            processing_time_ms=processing_time_ms,
        )
        return result

    async def generate_due_diligence_brief(
        self,
        product: Product,
        founder: FounderProfile,
        requester: Requester,
    ) -> str:
        """Write an investor-facing due diligence brief for a product.

        Raises:
            AccessDeniedError: If the requester's plan lacks the feature.
            ExternalAPIError: If the oracle call fails.
        """
        self._authorize(DUE_DILIGENCE_FEATURE, requester)
        prompt = self._diligence_prompt.render(
            title=product.title,
            description=product.full_description or product.description_7words,
            category=product.category,
            pricing=product.pricing_json(),
            market_data=(
                product.market_data.model_dump_json(exclude_none=True)
                if product.market_data else "{}"
            ),
            founder_name=founder.name or "Unknown",
            founder_company=founder.company or "Unknown",
            founder_bio=founder.bio or "Not provided",
            founder_linkedin=founder.linkedin or "Not provided",
            founder_github=founder.github or "Not provided",
            previous_exits=founder.previous_exits,
        )
        brief = await self._llm_client.generate_text(
            prompt,
            system_prompt=self._diligence_prompt.system_prompt,
            max_tokens=DUE_DILIGENCE_MAX_TOKENS,
        )
        logger.info("Due diligence brief generated", product_id=product.id, requester_id=requester.id)
        return brief

    async def generate_product_summary(
        self,
        title: str,
        description: str,
        transcription: str | None = None,
    ) -> str:
        """Summarize a product in two or three sentences.

        Raises:
            ExternalAPIError: If the oracle call fails.
            ResponseParseError: If the reply is blank.
        """
        prompt = self._summary_prompt.render(
            title=title,
            description=description,
            transcription_line=f"Video Transcription: {transcription}" if transcription else "",
        )
        text = await self._llm_client.generate_text(
            prompt,
            system_prompt=self._summary_prompt.system_prompt,
            max_tokens=PRODUCT_SUMMARY_MAX_TOKENS,
        )
        summary = text.strip()
        if not summary:
            raise ResponseParseError(message="Product summary is empty", expected="product summary")
        return summary

    async def summarize_product(self, product: Product, transcription: str | None = None) -> Product:
        """Return a copy of product with ai_generated_summary filled in."""
        summary = await self.generate_product_summary(
            product.title,
            product.description_7words,
            transcription=transcription,
        )
        logger.info("Product summary generated", product_id=product.id)
        return product.model_copy(update={"ai_generated_summary": summary})
