"""Shared test fixtures for synthpanel tests.

Provides sample products, personas and responses, plus a scripted
oracle that answers each pipeline prompt with canned text.
"""

import json
import re
from typing import Callable

import pytest

from synthpanel.exceptions import ExternalAPIError
from synthpanel.schemas.enums import (
    Decision,
    InvestmentStage,
    PricingType,
    RiskTolerance,
    SubscriptionTier,
    UserType,
)
from synthpanel.schemas.persona import InvestmentRange, PersonaResponse, SyntheticPersona
from synthpanel.schemas.product import Product, ProductPricing
from synthpanel.schemas.results import Requester
from tests.fixtures.llm_responses import (
    LIKE_EVALUATION_RESPONSE,
    PERSONA_DICTS,
    VALID_RECOMMENDATIONS_RESPONSE,
)

FOUNDER_ID = "founder-1"
PRODUCT_ID = "product-1"


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
def make_product(**overrides) -> Product:
    fields = {
        "id": PRODUCT_ID,
        "founder_id": FOUNDER_ID,
        "title": "LedgerLoop",
        "description_7words": "Automated bookkeeping for independent coffee shops",
        "full_description": "Syncs POS data nightly and closes the books monthly.",
        "category": "fintech",
        "tags": ["bookkeeping", "smb"],
        "pricing": ProductPricing(
            amount=49.0,
            type=PricingType.SUBSCRIPTION,
            recurring_interval="monthly",
        ),
        "ai_generated_summary": "Bookkeeping autopilot for small cafes.",
    }
    fields.update(overrides)
    return Product(**fields)


def make_persona(name: str = "Test Investor", **overrides) -> SyntheticPersona:
    fields = {
        "name": name,
        "role": "Angel Investor",
        "firm": None,
        "investment_thesis": "Boring businesses with recurring revenue",
        "stage_preference": [InvestmentStage.PRE_SEED, InvestmentStage.SEED],
        "investment_range": InvestmentRange(min=25000, max=250000),
        "risk_tolerance": RiskTolerance.MEDIUM,
        "industry_experience": ["fintech"],
    }
    fields.update(overrides)
    return SyntheticPersona(**fields)


def make_response(
    decision: Decision = Decision.LIKE,
    interest_score: int = 50,
    concerns: list[str] | None = None,
    persona: SyntheticPersona | None = None,
    reasoning: str = "Looks promising.",
) -> PersonaResponse:
    return PersonaResponse(
        persona=persona or make_persona(),
        decision=decision,
        reasoning=reasoning,
        interest_score=interest_score,
        concerns=concerns or [],
        suggestions=[],
    )


def persona_batch_json(count: int) -> str:
    """A persona generation reply with `count` distinct personas."""
    batch = []
    for i in range(count):
        template = PERSONA_DICTS[i % len(PERSONA_DICTS)]
        batch.append({**template, "name": f"{template['name']} {i}"})
    return json.dumps(batch)


# ---------------------------------------------------------------------------
# Scripted oracle
# ---------------------------------------------------------------------------
class ScriptedLLM:
    """LLMClient double that routes prompts to canned replies.

    Routing is by prompt shape: persona generation, per-persona
    evaluation (keyed by persona name) or recommendations. An entry
    that is an Exception instance is raised instead of returned.
    """

    def __init__(
        self,
        personas: str | Exception = "",
        evaluation: str | Callable[[str], str] | Exception = LIKE_EVALUATION_RESPONSE,
        recommendations: str | Exception = VALID_RECOMMENDATIONS_RESPONSE,
        other: str | Exception = "",
    ) -> None:
        self.personas = personas
        self.evaluation = evaluation
        self.recommendations = recommendations
        self.other = other
        self.calls: list[dict] = []

    @staticmethod
    def _reply(value):
        if isinstance(value, Exception):
            raise value
        return value

    async def generate_text(self, prompt, system_prompt=None, max_tokens=None, temperature=0.7):
        self.calls.append({
            "prompt": prompt,
            "system_prompt": system_prompt,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        if prompt.startswith("Generate "):
            return self._reply(self.personas)
        if prompt.startswith("You are role-playing"):
            if callable(self.evaluation):
                match = re.search(r"^Name: (.+)$", prompt, re.MULTILINE)
                return self._reply(self.evaluation(match.group(1) if match else ""))
            return self._reply(self.evaluation)
        if prompt.startswith("A synthetic investor panel"):
            return self._reply(self.recommendations)
        return self._reply(self.other)

    def calls_matching(self, prefix: str) -> list[dict]:
        return [c for c in self.calls if c["prompt"].startswith(prefix)]


def oracle_down(message: str = "Anthropic API error: 503") -> ExternalAPIError:
    return ExternalAPIError(message=message, service="anthropic", status_code=503)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def product() -> Product:
    return make_product()


@pytest.fixture
def persona() -> SyntheticPersona:
    return make_persona()


@pytest.fixture
def personas() -> list[SyntheticPersona]:
    return [make_persona(f"Investor {i}") for i in range(10)]


@pytest.fixture
def founder() -> Requester:
    return Requester(id=FOUNDER_ID, user_type=UserType.FOUNDER, tier=SubscriptionTier.FOUNDER)
