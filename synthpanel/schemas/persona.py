"""SyntheticPersona and PersonaResponse schemas.

Produced by: Persona Generator (personas), Evaluation Fan-Out (responses)
Consumed by: Result Aggregator, test record persistence

Personas are minted fresh for every test run and never reused. Each
persona yields exactly one PersonaResponse per run; a failed
evaluation yields the fallback response instead of nothing.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from synthpanel.schemas.enums import Decision, InvestmentStage, RiskTolerance

FALLBACK_REASONING = "Evaluation failed"
FALLBACK_CONCERN = "Evaluation error"


class InvestmentRange(BaseModel):
    """Check size range in USD."""

    model_config = ConfigDict(frozen=True)

    min: float = Field(..., ge=0.0)
    max: float = Field(..., ge=0.0)

    @model_validator(mode="after")
    def _min_not_above_max(self) -> "InvestmentRange":
        if self.min > self.max:
            raise ValueError(f"investment range min {self.min} exceeds max {self.max}")
        return self


class SyntheticPersona(BaseModel):
    """A fictional investor profile used for one test run."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1, description="e.g. 'Angel Investor', 'Partner at VC Firm'")
    firm: str | None = None
    investment_thesis: str = Field(..., min_length=1)
    stage_preference: list[InvestmentStage] = Field(default_factory=list)
    investment_range: InvestmentRange
    risk_tolerance: RiskTolerance
    industry_experience: list[str] = Field(default_factory=list)

    @field_validator("stage_preference")
    @classmethod
    def _dedupe_stages(cls, v: list[InvestmentStage]) -> list[InvestmentStage]:
        return list(dict.fromkeys(v))

    def describe(self) -> str:
        """Multi-line profile used in role-play prompts."""
        lines = [
            f"Name: {self.name}",
            f"Role: {self.role}",
        ]
        if self.firm:
            lines.append(f"Firm: {self.firm}")
        lines.extend([
            f"Investment Thesis: {self.investment_thesis}",
            f"Stage Preference: {', '.join(s.value for s in self.stage_preference)}",
            (
                f"Investment Range: ${self.investment_range.min:,.0f}"
                f" - ${self.investment_range.max:,.0f}"
            ),
            f"Risk Tolerance: {self.risk_tolerance.value}",
            f"Industry Experience: {', '.join(self.industry_experience)}",
        ])
        return "\n".join(lines)


class PersonaResponse(BaseModel):
    """One persona's verdict on one product."""

    model_config = ConfigDict(frozen=True)

    persona: SyntheticPersona
    decision: Decision
    reasoning: str = ""
    interest_score: int = Field(..., ge=0, le=100)
    concerns: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)

    @property
    def is_positive(self) -> bool:
        return self.decision in (Decision.LIKE, Decision.SUPER_LIKE)

    @classmethod
    def fallback(cls, persona: SyntheticPersona) -> "PersonaResponse":
        """Sentinel response substituted when an evaluation fails."""
        return cls(
            persona=persona,
            decision=Decision.PASS,
            reasoning=FALLBACK_REASONING,
            interest_score=0,
            concerns=[FALLBACK_CONCERN],
            suggestions=[],
        )
