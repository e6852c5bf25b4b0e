"""Component factory — builds the synthetic test pipeline from settings.

Handles dependency injection: one LLM client is shared by the
generator, the evaluator, the aggregator and the insight services.
The client discovers its credentials from ANTHROPIC_API_KEY.
"""

from __future__ import annotations

import structlog

from synthpanel.analysis.aggregator import ResultAggregator
from synthpanel.analysis.match_insights import MatchInsightService
from synthpanel.analysis.market_analysis import MarketAnalysisService
from synthpanel.config.access import AccessPolicy
from synthpanel.config.settings import SynthPanelSettings
from synthpanel.infra.llm_client import AnthropicClient, LLMClient
from synthpanel.orchestration.runner import SyntheticTestRunner
from synthpanel.personas.evaluator import PersonaEvaluator
from synthpanel.personas.generator import PersonaGenerator
from synthpanel.storage.test_store import SyntheticTestStore

logger = structlog.get_logger()

TEST_STORE_FILENAME = "synthetic_tests.jsonl"


def build_llm_client(settings: SynthPanelSettings) -> LLMClient:
    """Create the Anthropic client, honouring the model override."""
    if not settings.has_anthropic_key():
        logger.warning("ANTHROPIC_API_KEY not set, oracle calls will be rejected")
    if settings.llm_model:
        return AnthropicClient(model=settings.llm_model, max_tokens=settings.llm_max_tokens)
    return AnthropicClient(max_tokens=settings.llm_max_tokens)


def build_store(settings: SynthPanelSettings) -> SyntheticTestStore:
    if not settings.persist_storage:
        return SyntheticTestStore()
    return SyntheticTestStore(persist_path=settings.data_dir / TEST_STORE_FILENAME)


def build_runner(
    settings: SynthPanelSettings,
    llm_client: LLMClient | None = None,
    store: SyntheticTestStore | None = None,
) -> SyntheticTestRunner:
    """Wire a SyntheticTestRunner.

    Args:
        settings: Application settings.
        llm_client: Optional pre-built client. If None, an
            AnthropicClient is created from settings.
        store: Optional pre-built store. If None, one is created
            from settings.
    """
    client = llm_client or build_llm_client(settings)
    runner = SyntheticTestRunner(
        generator=PersonaGenerator(client, max_tokens=settings.persona_max_tokens),
        evaluator=PersonaEvaluator(
            client,
            max_tokens=settings.llm_max_tokens,
            max_concurrency=settings.concurrency_limit,
        ),
        aggregator=ResultAggregator(client),
        store=store or build_store(settings),
        settings=settings,
        policy=AccessPolicy(enforce_paywall=settings.enforce_paywall),
    )
    logger.debug(
        "Synthetic test runner built",
        max_concurrency=settings.concurrency_limit,
        enforce_paywall=settings.enforce_paywall,
    )
    return runner


def build_insight_service(
    settings: SynthPanelSettings,
    llm_client: LLMClient | None = None,
) -> MatchInsightService:
    return MatchInsightService(
        llm_client or build_llm_client(settings),
        max_tokens=settings.llm_max_tokens,
    )


def build_market_analysis_service(
    settings: SynthPanelSettings,
    llm_client: LLMClient | None = None,
) -> MarketAnalysisService:
    return MarketAnalysisService(
        llm_client or build_llm_client(settings),
        policy=AccessPolicy(enforce_paywall=settings.enforce_paywall),
    )
