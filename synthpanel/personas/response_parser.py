"""Response parser for oracle outputs.

Turns raw oracle text into validated models. Oracle output is
untrusted: nothing is assumed about its shape until it has been
decoded and validated here. Every failure raises ResponseParseError
naming the expected shape, so callers decide whether it is fatal.
"""

import json
import math
import re
from typing import Any

import structlog
from pydantic import ValidationError

from synthpanel.exceptions import ResponseParseError
from synthpanel.schemas.enums import Decision
from synthpanel.schemas.insights import MatchScoreInsight, PurchaseIntent
from synthpanel.schemas.market import (
    DEFAULT_CONFIDENCE_SCORE,
    CompetitorAnalysis,
    DemographicSegment,
    GTMStrategy,
    IncomeSegment,
    MarketReport,
    MarketSizing,
)
from synthpanel.schemas.persona import PersonaResponse, SyntheticPersona

logger = structlog.get_logger()

PREVIEW_CHARS = 200

_DECISION_ALIASES = {
    "like": Decision.LIKE,
    "pass": Decision.PASS,
    "super_like": Decision.SUPER_LIKE,
    "superlike": Decision.SUPER_LIKE,
    "super like": Decision.SUPER_LIKE,
    "super-like": Decision.SUPER_LIKE,
}

_STAGE_ALIASES = {
    "preseed": "pre_seed",
    "series_c": "growth",
    "series_c+": "growth",
    "late_stage": "growth",
    "late": "growth",
}


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def decode_json(text: str, expected: str) -> Any:
    """Decode JSON from oracle text.

    Handles replies wrapped in markdown code blocks and replies with
    a sentence of prose around the JSON payload.

    Raises:
        ResponseParseError: If no JSON value can be recovered.
    """
    cleaned = strip_code_fence(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        embedded = _extract_embedded_json(cleaned)
        if embedded is not None:
            return embedded
        logger.error(
            "Failed to parse JSON from LLM response",
            expected=expected,
            error=str(e),
            response_preview=cleaned[:PREVIEW_CHARS],
        )
        raise ResponseParseError(
            message=f"Failed to parse {expected} JSON: {e}",
            expected=expected,
            preview=cleaned[:PREVIEW_CHARS],
        ) from e


def _extract_embedded_json(text: str) -> Any | None:
    # Outermost value first: whichever opener appears earliest.
    candidates = sorted(
        (text.find(opener), opener, closer)
        for opener, closer in (("[", "]"), ("{", "}"))
        if text.find(opener) != -1
    )
    for start, _opener, closer in candidates:
        end = text.rfind(closer)
        if end <= start:
            continue
        try:
            return json.loads(text[start:end + 1])
        except json.JSONDecodeError:
            continue
    return None


def _normalize_token(value: Any) -> str:
    return re.sub(r"[\s\-]+", "_", str(value).strip().lower())


def _normalize_stage(value: str) -> str:
    token = _normalize_token(value)
    return _STAGE_ALIASES.get(token, token)


def _string_list(raw: Any, field: str, expected: str) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw] if raw.strip() else []
    if not isinstance(raw, list):
        raise ResponseParseError(
            message=f"{field} must be a list, got {type(raw).__name__}",
            expected=expected,
        )
    if any(isinstance(item, (list, dict)) for item in raw):
        raise ResponseParseError(
            message=f"{field} items must be scalars",
            expected=expected,
        )
    return [str(item).strip() for item in raw if item is not None and str(item).strip()]


def _unwrap_list(data: Any, key: str) -> Any:
    """Accept either a bare array or an object wrapping it under key."""
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    return data


def parse_personas(text: str) -> list[SyntheticPersona]:
    """Decode a persona batch.

    The whole batch is rejected if any persona is malformed.

    Raises:
        ResponseParseError: On undecodable text or any invalid persona.
    """
    expected = "persona batch"
    data = _unwrap_list(decode_json(text, expected), "personas")
    if not isinstance(data, list):
        raise ResponseParseError(
            message=f"Expected a JSON array of personas, got {type(data).__name__}",
            expected=expected,
        )

    personas: list[SyntheticPersona] = []
    for index, raw in enumerate(data):
        if not isinstance(raw, dict):
            raise ResponseParseError(
                message=f"Persona {index} is not an object",
                expected=expected,
            )
        candidate = dict(raw)
        candidate["stage_preference"] = [
            _normalize_stage(s) for s in _string_list(raw.get("stage_preference"), "stage_preference", expected)
        ]
        if isinstance(raw.get("risk_tolerance"), str):
            candidate["risk_tolerance"] = _normalize_token(raw["risk_tolerance"])
        candidate["industry_experience"] = _string_list(
            raw.get("industry_experience"), "industry_experience", expected,
        )
        if not candidate.get("firm"):
            candidate["firm"] = None
        try:
            personas.append(SyntheticPersona.model_validate(candidate))
        except ValidationError as e:
            raise ResponseParseError(
                message=f"Persona {index} failed validation: {e.error_count()} error(s)",
                expected=expected,
                preview=str(raw)[:PREVIEW_CHARS],
            ) from e

    return personas


def parse_persona_response(text: str, persona: SyntheticPersona) -> PersonaResponse:
    """Decode one persona's verdict.

    interest_score is rounded to an integer and clamped to [0, 100].

    Raises:
        ResponseParseError: On undecodable text or an unknown decision.
    """
    expected = "persona response"
    data = decode_json(text, expected)
    if not isinstance(data, dict):
        raise ResponseParseError(
            message=f"Expected a JSON object, got {type(data).__name__}",
            expected=expected,
        )

    decision = _DECISION_ALIASES.get(_normalize_token(data.get("decision", "")))
    if decision is None:
        raise ResponseParseError(
            message=f"Unknown decision: {data.get('decision')!r}",
            expected=expected,
        )

    try:
        interest_score = int(round(float(data.get("interest_score"))))
    except (TypeError, ValueError, OverflowError) as e:
        raise ResponseParseError(
            message=f"interest_score is not numeric: {data.get('interest_score')!r}",
            expected=expected,
        ) from e
    interest_score = max(0, min(100, interest_score))

    return PersonaResponse(
        persona=persona,
        decision=decision,
        reasoning=str(data.get("reasoning") or "").strip(),
        interest_score=interest_score,
        concerns=_string_list(data.get("concerns"), "concerns", expected),
        suggestions=_string_list(data.get("suggestions"), "suggestions", expected),
    )


def parse_recommendations(text: str) -> list[str]:
    """Decode the recommendations list.

    Raises:
        ResponseParseError: If the reply is not a non-empty list of strings.
    """
    expected = "recommendations"
    data = _unwrap_list(decode_json(text, expected), "recommendations")
    if not isinstance(data, list):
        raise ResponseParseError(
            message=f"Expected a JSON array of strings, got {type(data).__name__}",
            expected=expected,
        )
    if any(not isinstance(item, str) for item in data):
        raise ResponseParseError(
            message="Recommendations must all be strings",
            expected=expected,
        )
    recommendations = [item.strip() for item in data if item.strip()]
    if not recommendations:
        raise ResponseParseError(
            message="Recommendations list is empty",
            expected=expected,
        )
    return recommendations


def _clamp(value: Any, low: float, high: float, field: str, expected: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ResponseParseError(
            message=f"{field} is not numeric: {value!r}",
            expected=expected,
        ) from e
    if math.isnan(number):
        raise ResponseParseError(message=f"{field} is NaN", expected=expected)
    return max(low, min(high, number))


def parse_match_score(text: str, response_time_ms: float = 0.0) -> MatchScoreInsight:
    """Decode a thesis/product match score."""
    expected = "match score"
    data = decode_json(text, expected)
    if not isinstance(data, dict):
        raise ResponseParseError(message="Expected a JSON object", expected=expected)

    return MatchScoreInsight(
        score=_clamp(data.get("score"), 0.0, 100.0, "score", expected),
        reasoning=str(data.get("reasoning") or "").strip(),
        key_alignments=_string_list(data.get("key_alignments"), "key_alignments", expected),
        potential_concerns=_string_list(
            data.get("potential_concerns"), "potential_concerns", expected,
        ),
        confidence=_clamp(data.get("confidence", 0.5), 0.0, 1.0, "confidence", expected),
        response_time_ms=response_time_ms,
    )


def parse_purchase_intent(text: str) -> PurchaseIntent:
    """Decode a purchase intent prediction."""
    expected = "purchase intent"
    data = decode_json(text, expected)
    if not isinstance(data, dict):
        raise ResponseParseError(message="Expected a JSON object", expected=expected)

    return PurchaseIntent(
        score=_clamp(data.get("score"), 0.0, 100.0, "score", expected),
        reasoning=str(data.get("reasoning") or "").strip(),
        confidence=_clamp(data.get("confidence", 0.5), 0.0, 1.0, "confidence", expected),
    )


_MARKET_SECTIONS = {
    "demographics": (DemographicSegment, ("purchase_intent", "population_percentage")),
    "income_segments": (IncomeSegment, ("purchase_intent", "market_size_percentage")),
    "competitors": (CompetitorAnalysis, ()),
    "gtm_strategies": (GTMStrategy, ()),
}


def _market_section(data: dict, key: str, expected: str) -> list:
    model, percent_fields = _MARKET_SECTIONS[key]
    raw_items = data.get(key) or []
    if not isinstance(raw_items, list):
        raise ResponseParseError(
            message=f"{key} must be a list, got {type(raw_items).__name__}",
            expected=expected,
        )

    items = []
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            raise ResponseParseError(
                message=f"{key}[{index}] is not an object",
                expected=expected,
            )
        candidate = dict(raw)
        for field in percent_fields:
            candidate[field] = _clamp(raw.get(field), 0.0, 100.0, f"{key}[{index}].{field}", expected)
        if key == "gtm_strategies" and isinstance(raw.get("priority"), str):
            candidate["priority"] = _normalize_token(raw["priority"])
        if key == "competitors" and not raw.get("url"):
            candidate["url"] = None
        try:
            items.append(model.model_validate(candidate))
        except ValidationError as e:
            raise ResponseParseError(
                message=f"{key}[{index}] failed validation: {e.error_count()} error(s)",
                expected=expected,
                preview=str(raw)[:PREVIEW_CHARS],
            ) from e
    return items


def parse_market_analysis(text: str) -> MarketReport:
    """Decode a market analysis report.

    Missing sections default to empty and a missing confidence score
    to 85. Any malformed section item rejects the whole report.

    Raises:
        ResponseParseError: On undecodable text or an invalid section.
    """
    expected = "market analysis"
    data = decode_json(text, expected)
    if not isinstance(data, dict):
        raise ResponseParseError(
            message=f"Expected a JSON object, got {type(data).__name__}",
            expected=expected,
        )

    sizing_raw = data.get("market_sizing") or {}
    if not isinstance(sizing_raw, dict):
        raise ResponseParseError(message="market_sizing must be an object", expected=expected)
    try:
        market_sizing = MarketSizing.model_validate({
            **sizing_raw,
            "key_assumptions": _string_list(
                sizing_raw.get("key_assumptions"), "key_assumptions", expected,
            ),
        })
    except ValidationError as e:
        raise ResponseParseError(
            message=f"market_sizing failed validation: {e.error_count()} error(s)",
            expected=expected,
            preview=str(sizing_raw)[:PREVIEW_CHARS],
        ) from e

    confidence = data.get("confidence_score")
    return MarketReport(
        executive_summary=str(data.get("executive_summary") or "").strip(),
        demographics=_market_section(data, "demographics", expected),
        income_segments=_market_section(data, "income_segments", expected),
        market_sizing=market_sizing,
        competitors=_market_section(data, "competitors", expected),
        gtm_strategies=_market_section(data, "gtm_strategies", expected),
        critical_insights=_string_list(data.get("critical_insights"), "critical_insights", expected),
        real_talk_summary=str(data.get("real_talk_summary") or "").strip(),
        confidence_score=(
            DEFAULT_CONFIDENCE_SCORE if confidence is None
            else _clamp(confidence, 0.0, 100.0, "confidence_score", expected)
        ),
    )
