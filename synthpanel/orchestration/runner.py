"""SyntheticTestRunner — entry point for one synthetic panel test.

Runs the three pipeline steps in order under one overall time ceiling:

  PersonaGenerator → PersonaEvaluator (fan-out) → ResultAggregator

then persists the finished SyntheticTestRecord. Any fatal failure
propagates as a single SynthPanelError subclass and nothing is
stored; per-persona evaluation failures are absorbed by the fan-out.
"""

import asyncio
import time
from uuid import UUID, uuid4

from synthpanel.analysis.aggregator import ResultAggregator
from synthpanel.config.access import AccessPolicy
from synthpanel.config.settings import SynthPanelSettings
from synthpanel.exceptions import (
    AccessDeniedError,
    InvalidRequestError,
    RunTimeoutError,
    SynthPanelError,
)
from synthpanel.personas.evaluator import PersonaEvaluator
from synthpanel.personas.generator import PersonaGenerator
from synthpanel.schemas.enums import UserType
from synthpanel.schemas.persona import SyntheticPersona
from synthpanel.schemas.results import (
    Requester,
    SyntheticTestRecord,
    SyntheticTestRequest,
    TestResults,
)
from synthpanel.storage.test_store import SyntheticTestStore
from synthpanel.utils.logging import get_run_logger

SYNTHETIC_TEST_FEATURE = "synthetic_test"


class SyntheticTestRunner:
    """Runs a synthetic investor panel against one product.

    Wires together:
      - Access check (founder ownership + subscription gate)
      - Persona generation, evaluation fan-out, aggregation
      - Overall run timeout (asyncio.wait_for)
      - Persistence of the finished record
    """

    def __init__(
        self,
        generator: PersonaGenerator,
        evaluator: PersonaEvaluator,
        aggregator: ResultAggregator,
        store: SyntheticTestStore,
        settings: SynthPanelSettings | None = None,
        policy: AccessPolicy | None = None,
    ) -> None:
        self._generator = generator
        self._evaluator = evaluator
        self._aggregator = aggregator
        self._store = store
        self._settings = settings or SynthPanelSettings()
        self._policy = policy or AccessPolicy(enforce_paywall=self._settings.enforce_paywall)

    @property
    def store(self) -> SyntheticTestStore:
        return self._store

    def _validate(self, request: SyntheticTestRequest) -> None:
        max_count = self._settings.max_persona_count
        if request.persona_count < 1:
            raise InvalidRequestError(
                f"persona_count must be at least 1, got {request.persona_count}"
            )
        if request.persona_count > max_count:
            raise InvalidRequestError(
                f"persona_count must be at most {max_count}, got {request.persona_count}"
            )

    def _authorize(self, request: SyntheticTestRequest, requester: Requester) -> None:
        if requester.user_type != UserType.FOUNDER:
            raise AccessDeniedError(
                "Only founders can run synthetic tests", feature=SYNTHETIC_TEST_FEATURE,
            )
        if request.product.founder_id != requester.id:
            raise AccessDeniedError(
                "Requester does not own this product", feature=SYNTHETIC_TEST_FEATURE,
            )
        decision = self._policy.check(SYNTHETIC_TEST_FEATURE, requester.tier)
        if not decision.has_access:
            raise AccessDeniedError(
                f"Synthetic tests require the {decision.required_tier.value} plan",
                feature=SYNTHETIC_TEST_FEATURE,
            )

    async def _run_pipeline(
        self,
        request: SyntheticTestRequest,
    ) -> tuple[list[SyntheticPersona], TestResults]:
        personas = await self._generator.generate(request.persona_count)
        responses = await self._evaluator.evaluate_all(personas, request.product)
        results = await self._aggregator.aggregate(responses, request.product)
        return personas, results

    async def run(
        self,
        request: SyntheticTestRequest,
        requester: Requester,
        test_id: UUID | None = None,
    ) -> SyntheticTestRecord:
        """Execute one synthetic test end to end.

        Args:
            request: Product and persona count.
            requester: Authenticated caller; must be the owning founder.
            test_id: Optional pre-assigned ID for the record.

        Returns:
            The persisted SyntheticTestRecord.

        Raises:
            InvalidRequestError: Bad persona count.
            AccessDeniedError: Requester may not run this test.
            PersonaGenerationError: Persona batch could not be produced.
            RecommendationError: Recommendations could not be produced.
            RunTimeoutError: The run exceeded run_timeout_seconds.
            PersistenceError: The record could not be stored.
        """
        test_id = test_id or uuid4()
        log = get_run_logger(
            str(test_id),
            product_id=request.product.id,
            founder_id=requester.id,
        )

        self._validate(request)
        self._authorize(request, requester)

        timeout = self._settings.run_timeout_seconds
        log.info("Synthetic test starting", persona_count=request.persona_count)
        start_time = time.monotonic()

        try:
            personas, results = await asyncio.wait_for(
                self._run_pipeline(request),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            log.error("Synthetic test timed out", timeout_seconds=timeout)
            raise RunTimeoutError(
                f"Synthetic test timed out after {timeout}s", test_id=str(test_id),
            ) from e
        except SynthPanelError as e:
            e.test_id = e.test_id or str(test_id)
            log.error("Synthetic test failed", error_type=type(e).__name__, error=str(e))
            raise

        record = SyntheticTestRecord(
            test_id=test_id,
            product_id=request.product.id,
            founder_id=requester.id,
            persona_count=len(personas),
            synthetic_personas=personas,
            results=results,
            cost_usd=self._settings.test_price_usd,
            payment_intent_id=request.payment_intent_id,
            processing_time_seconds=int(time.monotonic() - start_time),
        )
        self._store.append(record)

        log.info(
            "Synthetic test complete",
            like_rate=round(results.like_rate, 1),
            pass_rate=round(results.pass_rate, 1),
            super_like_rate=round(results.super_like_rate, 1),
            processing_time_seconds=record.processing_time_seconds,
        )
        return record
