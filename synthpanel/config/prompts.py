"""Version-controlled prompt templates.

Templates live as YAML files in synthpanel/prompts/ with a
system_prompt and a str.format-style user_prompt_template. Literal
JSON braces in templates are doubled.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from synthpanel.exceptions import ConfigurationError

PROMPT_DIR = Path(__file__).parent.parent / "prompts"

PERSONA_GENERATION = "persona_generation_v1.yaml"
PERSONA_EVALUATION = "persona_evaluation_v1.yaml"
RECOMMENDATIONS = "recommendations_v1.yaml"
MATCH_SCORE = "match_score_v1.yaml"
PURCHASE_INTENT = "purchase_intent_v1.yaml"
MARKET_ANALYSIS = "market_analysis_v1.yaml"
DUE_DILIGENCE = "due_diligence_v1.yaml"
PRODUCT_SUMMARY = "product_summary_v1.yaml"


class PromptTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: str
    system_prompt: str
    user_prompt_template: str

    def render(self, **values: Any) -> str:
        try:
            return self.user_prompt_template.format(**values)
        except KeyError as e:
            raise ConfigurationError(
                f"Prompt {self.version} needs a value for {e}"
            ) from e


@lru_cache(maxsize=None)
def load_prompt(filename: str, prompt_dir: Path = PROMPT_DIR) -> PromptTemplate:
    """Load and validate a prompt template from YAML.

    Raises:
        ConfigurationError: If the file is missing or malformed.
    """
    path = prompt_dir / filename
    if not path.exists():
        raise ConfigurationError(f"Prompt template not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    try:
        return PromptTemplate.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Malformed prompt template {path}: {e}") from e
