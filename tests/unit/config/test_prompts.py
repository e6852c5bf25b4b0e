"""Tests for prompt template loading."""

import pytest

from synthpanel.config.prompts import (
    DUE_DILIGENCE,
    MARKET_ANALYSIS,
    MATCH_SCORE,
    PERSONA_EVALUATION,
    PERSONA_GENERATION,
    PRODUCT_SUMMARY,
    PURCHASE_INTENT,
    RECOMMENDATIONS,
    PromptTemplate,
    load_prompt,
)
from synthpanel.exceptions import ConfigurationError


@pytest.mark.parametrize(
    "filename",
    [
        PERSONA_GENERATION,
        PERSONA_EVALUATION,
        RECOMMENDATIONS,
        MATCH_SCORE,
        PURCHASE_INTENT,
        MARKET_ANALYSIS,
        DUE_DILIGENCE,
        PRODUCT_SUMMARY,
    ],
)
def test_bundled_templates_load(filename):
    template = load_prompt(filename)
    assert template.version == filename.removesuffix(".yaml")
    assert template.system_prompt
    assert template.user_prompt_template


def test_generation_template_renders_literal_braces():
    rendered = load_prompt(PERSONA_GENERATION).render(count=7)
    assert "Generate 7 diverse" in rendered
    assert '"investment_range": {"min": 50000, "max": 500000}' in rendered


def test_missing_value_raises_configuration_error():
    template = PromptTemplate(version="t", system_prompt="s", user_prompt_template="Hi {name}")
    with pytest.raises(ConfigurationError, match="name"):
        template.render()


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_prompt("nope.yaml", prompt_dir=tmp_path)


def test_malformed_file_raises(tmp_path):
    (tmp_path / "bad.yaml").write_text("version: bad\n")
    with pytest.raises(ConfigurationError, match="Malformed"):
        load_prompt("bad.yaml", prompt_dir=tmp_path)


def test_summary_template_omits_blank_transcription():
    rendered = load_prompt(PRODUCT_SUMMARY).render(title="T", description="D", transcription_line="")
    assert rendered.startswith("Summarize this startup product")
    assert "Title: T" in rendered
