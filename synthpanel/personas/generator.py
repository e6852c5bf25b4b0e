"""Persona Generator — mints a fresh batch of synthetic investors.

One oracle request per run. The batch is all-or-nothing: if the reply
cannot be decoded into exactly the requested number of valid
personas, the run is aborted with PersonaGenerationError. Nothing is
cached between runs.
"""

import structlog

from synthpanel.config.prompts import PERSONA_GENERATION, load_prompt
from synthpanel.exceptions import (
    ExternalAPIError,
    InvalidRequestError,
    PersonaGenerationError,
    ResponseParseError,
)
from synthpanel.infra.llm_client import LLMClient
from synthpanel.personas.response_parser import parse_personas
from synthpanel.schemas.persona import SyntheticPersona

logger = structlog.get_logger()

DEFAULT_GENERATION_MAX_TOKENS = 16000
GENERATION_TEMPERATURE = 1.0


class PersonaGenerator:
    """Requests N synthetic investor personas from the oracle."""

    def __init__(
        self,
        llm_client: LLMClient,
        max_tokens: int = DEFAULT_GENERATION_MAX_TOKENS,
        prompt_version: str = PERSONA_GENERATION,
    ) -> None:
        self._llm_client = llm_client
        self._max_tokens = max_tokens
        self._prompt = load_prompt(prompt_version)

    async def generate(self, count: int) -> list[SyntheticPersona]:
        """Generate exactly `count` personas.

        A reply with more personas than requested is truncated; a reply
        with fewer is a failure.

        Args:
            count: Number of personas, at least 1.

        Returns:
            List of `count` validated personas.

        Raises:
            InvalidRequestError: If count is below 1.
            PersonaGenerationError: If the oracle call or decoding fails.
        """
        if count < 1:
            raise InvalidRequestError(f"persona count must be at least 1, got {count}")

        log = logger.bind(persona_count=count, prompt_version=self._prompt.version)
        log.info("Generating synthetic personas")

        prompt = self._prompt.render(count=count)
        try:
            text = await self._llm_client.generate_text(
                prompt,
                system_prompt=self._prompt.system_prompt,
                max_tokens=self._max_tokens,
                temperature=GENERATION_TEMPERATURE,
            )
            personas = parse_personas(text)
        except (ExternalAPIError, ResponseParseError) as e:
            log.error("Persona generation failed", error=str(e))
            raise PersonaGenerationError(f"Persona generation failed: {e}") from e

        if len(personas) < count:
            log.error("Oracle returned too few personas", received=len(personas))
            raise PersonaGenerationError(
                f"Requested {count} personas but oracle returned {len(personas)}"
            )
        if len(personas) > count:
            log.warning("Oracle returned extra personas, truncating", received=len(personas))
            personas = personas[:count]

        log.info("Synthetic personas generated")
        return personas
