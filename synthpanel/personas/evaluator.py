"""Evaluation Fan-Out — every persona judges the product concurrently.

All evaluations are dispatched at once and awaited together. Each one
is isolated: a failure for one persona is logged and replaced by the
fallback PersonaResponse, and never cancels or fails its siblings.
The output is index-aligned with the input personas, so the batch is
never short a response.

An optional concurrency cap bounds in-flight oracle calls with a
semaphore; without one every call is issued immediately.
"""

import asyncio
import time

import structlog

from synthpanel.config.prompts import PERSONA_EVALUATION, load_prompt
from synthpanel.exceptions import EvaluationError, ExternalAPIError, ResponseParseError
from synthpanel.infra.llm_client import LLMClient
from synthpanel.personas.response_parser import parse_persona_response
from synthpanel.schemas.persona import PersonaResponse, SyntheticPersona
from synthpanel.schemas.product import Product

logger = structlog.get_logger()

DEFAULT_EVALUATION_MAX_TOKENS = 1024


class PersonaEvaluator:
    """Runs one role-play evaluation per persona."""

    def __init__(
        self,
        llm_client: LLMClient,
        max_tokens: int = DEFAULT_EVALUATION_MAX_TOKENS,
        max_concurrency: int | None = None,
        prompt_version: str = PERSONA_EVALUATION,
    ) -> None:
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError(f"max_concurrency must be positive, got {max_concurrency}")
        self._llm_client = llm_client
        self._max_tokens = max_tokens
        self._max_concurrency = max_concurrency
        self._prompt = load_prompt(prompt_version)

    def build_prompt(self, persona: SyntheticPersona, product: Product) -> str:
        summary_line = (
            f"Summary: {product.ai_generated_summary}" if product.ai_generated_summary else ""
        )
        return self._prompt.render(
            persona_profile=persona.describe(),
            title=product.title,
            pitch=product.description_7words,
            description=product.full_description or "Not provided",
            category=product.category,
            pricing=product.pricing_json(),
            summary_line=summary_line,
        )

    async def evaluate(self, persona: SyntheticPersona, product: Product) -> PersonaResponse:
        """Ask the oracle for one persona's verdict.

        Raises:
            EvaluationError: If the oracle call or decoding fails.
        """
        try:
            text = await self._llm_client.generate_text(
                self.build_prompt(persona, product),
                system_prompt=self._prompt.system_prompt,
                max_tokens=self._max_tokens,
            )
            return parse_persona_response(text, persona)
        except (ExternalAPIError, ResponseParseError) as e:
            raise EvaluationError(str(e), persona_name=persona.name) from e

    async def _evaluate_isolated(
        self,
        index: int,
        persona: SyntheticPersona,
        product: Product,
        semaphore: asyncio.Semaphore | None,
    ) -> tuple[PersonaResponse, bool]:
        """Returns the response and whether it is the fallback."""
        try:
            if semaphore is None:
                return await self.evaluate(persona, product), False
            async with semaphore:
                return await self.evaluate(persona, product), False
        except Exception as e:
            logger.error(
                "Persona evaluation failed, using fallback",
                persona_index=index,
                persona_name=persona.name,
                error=str(e),
            )
            return PersonaResponse.fallback(persona), True

    async def evaluate_all(
        self,
        personas: list[SyntheticPersona],
        product: Product,
    ) -> list[PersonaResponse]:
        """Evaluate every persona concurrently.

        Args:
            personas: The run's persona batch.
            product: The product under test (shared, read-only).

        Returns:
            One PersonaResponse per persona, in persona order.
        """
        if not personas:
            return []

        semaphore = (
            asyncio.Semaphore(self._max_concurrency) if self._max_concurrency else None
        )
        log = logger.bind(
            product_id=product.id,
            persona_count=len(personas),
            max_concurrency=self._max_concurrency,
        )
        log.info("Dispatching persona evaluations")
        start_time = time.monotonic()

        outcomes = await asyncio.gather(
            *[
                self._evaluate_isolated(i, persona, product, semaphore)
                for i, persona in enumerate(personas)
            ]
        )

        fallback_count = sum(1 for _, used_fallback in outcomes if used_fallback)
        log.info(
            "Persona evaluations settled",
            fallback_count=fallback_count,
            duration_ms=round((time.monotonic() - start_time) * 1000.0, 1),
        )
        return [response for response, _ in outcomes]
