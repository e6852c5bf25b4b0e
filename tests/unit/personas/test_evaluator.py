"""Tests for the evaluation fan-out (PersonaEvaluator)."""

import asyncio
import json

import pytest
from structlog.testing import capture_logs

from synthpanel.exceptions import EvaluationError
from synthpanel.personas.evaluator import PersonaEvaluator
from synthpanel.schemas.enums import Decision
from synthpanel.schemas.persona import FALLBACK_CONCERN, FALLBACK_REASONING, PersonaResponse
from tests.conftest import ScriptedLLM, make_persona, make_product, oracle_down
from tests.fixtures.llm_responses import (
    LIKE_EVALUATION_RESPONSE,
    MALFORMED_JSON_RESPONSE,
    PASS_EVALUATION_RESPONSE,
)


class TestEvaluateOne:
    @pytest.mark.asyncio
    async def test_prompt_carries_persona_and_product(self, persona, product):
        llm = ScriptedLLM()
        response = await PersonaEvaluator(llm).evaluate(persona, product)

        prompt = llm.calls[0]["prompt"]
        assert f"Name: {persona.name}" in prompt
        assert "Title: LedgerLoop" in prompt
        assert "Pitch: Automated bookkeeping for independent coffee shops" in prompt
        assert "Summary: Bookkeeping autopilot for small cafes." in prompt
        assert '"type":"subscription"' in prompt
        assert response.decision == Decision.LIKE

    @pytest.mark.asyncio
    async def test_missing_description_rendered_as_not_provided(self, persona):
        llm = ScriptedLLM()
        product = make_product(full_description=None, ai_generated_summary=None)
        await PersonaEvaluator(llm).evaluate(persona, product)
        prompt = llm.calls[0]["prompt"]
        assert "Description: Not provided" in prompt
        assert "Summary:" not in prompt

    @pytest.mark.asyncio
    async def test_failure_raises_evaluation_error(self, persona, product):
        llm = ScriptedLLM(evaluation=MALFORMED_JSON_RESPONSE)
        with pytest.raises(EvaluationError) as exc_info:
            await PersonaEvaluator(llm).evaluate(persona, product)
        assert exc_info.value.persona_name == persona.name


class TestEvaluateAll:
    @pytest.mark.asyncio
    async def test_one_response_per_persona_in_order(self, personas, product):
        llm = ScriptedLLM()
        responses = await PersonaEvaluator(llm).evaluate_all(personas, product)

        assert len(responses) == len(personas)
        assert [r.persona for r in responses] == personas
        assert len(llm.calls) == len(personas)

    @pytest.mark.asyncio
    async def test_seventh_failure_becomes_fallback(self, personas, product):
        failing = personas[6].name

        def evaluation(name):
            if name == failing:
                raise oracle_down()
            return LIKE_EVALUATION_RESPONSE

        llm = ScriptedLLM(evaluation=evaluation)
        responses = await PersonaEvaluator(llm).evaluate_all(personas, product)

        assert len(responses) == 10
        fallback = responses[6]
        assert fallback.persona == personas[6]
        assert fallback.decision == Decision.PASS
        assert fallback.reasoning == FALLBACK_REASONING
        assert fallback.interest_score == 0
        assert fallback.concerns == [FALLBACK_CONCERN]
        assert fallback.suggestions == []
        assert all(r.decision == Decision.LIKE for i, r in enumerate(responses) if i != 6)

    @pytest.mark.asyncio
    async def test_parse_failures_isolated(self, personas, product):
        def evaluation(name):
            return MALFORMED_JSON_RESPONSE if name.endswith(("1", "3")) else PASS_EVALUATION_RESPONSE

        responses = await PersonaEvaluator(ScriptedLLM(evaluation=evaluation)).evaluate_all(
            personas, product,
        )
        fallbacks = [i for i, r in enumerate(responses) if r == PersonaResponse.fallback(r.persona)]
        assert fallbacks == [1, 3]

    @pytest.mark.asyncio
    async def test_all_failures_still_yield_full_batch(self, personas, product):
        llm = ScriptedLLM(evaluation=oracle_down())
        responses = await PersonaEvaluator(llm).evaluate_all(personas, product)
        assert len(responses) == len(personas)
        assert all(r.reasoning == FALLBACK_REASONING for r in responses)

    @pytest.mark.asyncio
    async def test_unexpected_exception_also_isolated(self, personas, product):
        def evaluation(name):
            if name == personas[0].name:
                raise RuntimeError("boom")
            return LIKE_EVALUATION_RESPONSE

        responses = await PersonaEvaluator(ScriptedLLM(evaluation=evaluation)).evaluate_all(
            personas, product,
        )
        assert responses[0] == PersonaResponse.fallback(personas[0])
        assert responses[1].decision == Decision.LIKE

    @pytest.mark.asyncio
    async def test_genuine_reply_matching_fallback_not_counted(self, personas, product):
        lookalike = json.dumps({
            "decision": "pass",
            "reasoning": FALLBACK_REASONING,
            "interest_score": 0,
            "concerns": [FALLBACK_CONCERN],
            "suggestions": [],
        })

        def evaluation(name):
            if name == personas[2].name:
                raise oracle_down()
            return lookalike

        with capture_logs() as logs:
            await PersonaEvaluator(ScriptedLLM(evaluation=evaluation)).evaluate_all(
                personas, product,
            )
        settled = [e for e in logs if e["event"] == "Persona evaluations settled"]
        assert settled[0]["fallback_count"] == 1

    @pytest.mark.asyncio
    async def test_isolated_call_flags_fallback_path(self, persona, product):
        evaluator = PersonaEvaluator(ScriptedLLM(evaluation=oracle_down()))
        response, used_fallback = await evaluator._evaluate_isolated(0, persona, product, None)
        assert used_fallback is True
        assert response == PersonaResponse.fallback(persona)

        evaluator = PersonaEvaluator(ScriptedLLM(evaluation=LIKE_EVALUATION_RESPONSE))
        response, used_fallback = await evaluator._evaluate_isolated(0, persona, product, None)
        assert used_fallback is False
        assert response.decision == Decision.LIKE

    @pytest.mark.asyncio
    async def test_empty_batch(self, product):
        llm = ScriptedLLM()
        assert await PersonaEvaluator(llm).evaluate_all([], product) == []
        assert llm.calls == []


class TestConcurrency:
    class _TrackingLLM:
        def __init__(self):
            self.in_flight = 0
            self.peak = 0

        async def generate_text(self, prompt, system_prompt=None, max_tokens=None, temperature=0.7):
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
            await asyncio.sleep(0.01)
            self.in_flight -= 1
            return LIKE_EVALUATION_RESPONSE

    @pytest.mark.asyncio
    async def test_unbounded_by_default(self, product):
        llm = self._TrackingLLM()
        personas = [make_persona(f"P{i}") for i in range(8)]
        await PersonaEvaluator(llm).evaluate_all(personas, product)
        assert llm.peak == 8

    @pytest.mark.asyncio
    async def test_cap_bounds_in_flight_calls(self, product):
        llm = self._TrackingLLM()
        personas = [make_persona(f"P{i}") for i in range(8)]
        responses = await PersonaEvaluator(llm, max_concurrency=3).evaluate_all(personas, product)
        assert llm.peak <= 3
        assert len(responses) == 8

    def test_invalid_cap_rejected(self):
        with pytest.raises(ValueError):
            PersonaEvaluator(self._TrackingLLM(), max_concurrency=0)
