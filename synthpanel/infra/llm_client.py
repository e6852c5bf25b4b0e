"""LLM client for the synthetic panel pipeline.

Provides an async Anthropic Messages API client that turns one prompt
into one block of text. Every call is attempted exactly once: rate
limits, server errors and timeouts surface as ExternalAPIError and it
is up to the caller whether that failure is fatal. Decoding the text
into a typed result is done by personas.response_parser.
"""

import os
from typing import Protocol, runtime_checkable

import httpx
import structlog

from synthpanel.exceptions import ExternalAPIError

logger = structlog.get_logger()

# Default config
DEFAULT_TIMEOUT_SECONDS = 120
DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 1024
DEFAULT_TEMPERATURE = 0.7
ANTHROPIC_VERSION = "2023-06-01"


@runtime_checkable
class LLMClient(Protocol):
    """Protocol defining the oracle interface.

    Any provider can back the pipeline as long as it turns a prompt
    into text, or raises.
    """

    async def generate_text(
        self,
        prompt: str,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        """Send a prompt and return the model's text reply."""
        ...


class AnthropicClient:
    """Async client for Anthropic's Messages API."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        base_url: str = "https://api.anthropic.com/v1",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or os.environ.get("ANTHROPIC_API_KEY", "")
        self._model = model
        self._max_tokens = max_tokens
        self._timeout = timeout_seconds
        self._base_url = base_url
        self._transport = transport

    @property
    def model(self) -> str:
        return self._model

    async def generate_text(
        self,
        prompt: str,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        """Send a prompt to Claude and return the reply text.

        Args:
            prompt: User message.
            system_prompt: Optional system-level instructions.
            max_tokens: Per-call override of the client's max_tokens.
            temperature: Sampling temperature.

        Returns:
            Concatenated text blocks of the reply.

        Raises:
            ExternalAPIError: On any transport, HTTP or empty-content failure.
        """
        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

        payload: dict = {
            "model": self._model,
            "max_tokens": max_tokens or self._max_tokens,
            "temperature": temperature,
            "messages": [
                {"role": "user", "content": prompt},
            ],
        }
        if system_prompt:
            payload["system"] = system_prompt

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    f"{self._base_url}/messages",
                    headers=headers,
                    json=payload,
                )
        except httpx.TimeoutException as e:
            logger.warning("Anthropic API timeout", timeout=self._timeout)
            raise ExternalAPIError(
                message=f"Anthropic API timed out after {self._timeout}s",
                service="anthropic",
                status_code=0,
            ) from e
        except httpx.HTTPError as e:
            logger.warning("Anthropic API request failed", error=str(e))
            raise ExternalAPIError(
                message=f"Anthropic API request failed: {e}",
                service="anthropic",
                status_code=0,
            ) from e

        if response.status_code == 429:
            logger.warning("Rate limited by Anthropic API")
            raise ExternalAPIError(
                message="Anthropic API rate limit exceeded",
                service="anthropic",
                status_code=429,
            )

        if response.status_code != 200:
            logger.warning(
                "Anthropic API error response",
                status_code=response.status_code,
            )
            raise ExternalAPIError(
                message=f"Anthropic API error: {response.status_code}",
                service="anthropic",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ExternalAPIError(
                message="Anthropic API returned a non-JSON body",
                service="anthropic",
                status_code=response.status_code,
            ) from e

        return self._extract_text(data)

    def _extract_text(self, response_data: dict) -> str:
        """Extract text content from a Messages API response.

        Handles empty content arrays and refusal responses.
        """
        if response_data.get("stop_reason") == "refusal":
            raise ExternalAPIError(
                message="Anthropic API refused the request",
                service="anthropic",
                status_code=200,
            )

        content = response_data.get("content", [])
        if not content:
            raise ExternalAPIError(
                message="Anthropic API returned empty content array",
                service="anthropic",
                status_code=200,
            )

        text_parts = [
            block.get("text", "") for block in content if block.get("type") == "text"
        ]

        result = "\n".join(text_parts)
        if not result.strip():
            raise ExternalAPIError(
                message="Anthropic API returned no text content in response blocks",
                service="anthropic",
                status_code=200,
            )

        return result
