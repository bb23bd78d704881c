"""Evaluation Pydantic models."""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .conflict import ConflictResult
from .enums import DIMENSION_SCORE_MAX, Dimension, GateValue, ProgramStage, ScoringMode


class ScoreRequest(BaseModel):
    """Raw scores for one evaluation, in exactly one scoring mode.

    Either the five fixed ``dimension_scores`` or a ``template_id`` with its
    ``criteria_scores``. Content checks (completeness, ranges, template
    weights) are done once, by the scoring engine.
    """
    dimension_scores: Optional[dict[Dimension, Optional[float]]] = None
    template_id: Optional[str] = None
    criteria_scores: Optional[dict[str, Optional[float]]] = None

    @model_validator(mode="after")
    def exactly_one_mode(self) -> "ScoreRequest":
        has_dimensions = self.dimension_scores is not None
        has_template = self.template_id is not None
        if has_dimensions == has_template:
            raise ValueError("provide either dimension_scores or template_id, not both")
        if self.criteria_scores is not None and not has_template:
            raise ValueError("criteria_scores require template_id")
        return self

    @property
    def mode(self) -> ScoringMode:
        return ScoringMode.TEMPLATE if self.template_id is not None else ScoringMode.DIMENSION


class EvaluationCommand(ScoreRequest):
    """Single typed submission command for a mentor evaluation."""
    company_id: str = Field(..., min_length=1)
    mentor_id: str = Field(..., min_length=1)
    program_key: ProgramStage
    hub_id: Optional[str] = None
    gate_value: Optional[GateValue] = None
    notes: Optional[str] = None


class WeightedScore(BaseModel):
    """Result of the scoring engine."""
    weighted_score: float = Field(..., ge=0, description="Rounded to one decimal, half-up")
    mode: ScoringMode
    raw_score: float = Field(..., ge=0, description="Unrounded score, 4 places")
    scale_max: float
    contributions: dict[str, float] = Field(default_factory=dict)


class EvaluationRecord(BaseModel):
    """Persisted evaluation."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    company_id: str
    mentor_id: str
    program_key: ProgramStage
    mode: ScoringMode = ScoringMode.DIMENSION
    dimension_scores: Optional[dict[Dimension, float]] = None
    template_id: Optional[str] = None
    criteria_scores: Optional[dict[str, float]] = None
    weighted_score: float = Field(..., ge=0)
    gate_value: Optional[GateValue] = None
    notes: Optional[str] = None
    evaluation_date: datetime
    expires_at: datetime
    is_valid: bool = True

    def is_current(self, now: Optional[datetime] = None) -> bool:
        """Valid and not yet expired."""
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return self.is_valid and now <= expires_at

    def normalized_score(self) -> float:
        """Weighted score on the 0-10 threshold scale."""
        if self.mode is ScoringMode.TEMPLATE:
            return round(self.weighted_score / 100 * DIMENSION_SCORE_MAX, 4)
        return self.weighted_score

    def score_for(self, name: str) -> float:
        """Score of a dimension (or same-named criterion); missing counts as 0."""
        if self.mode is ScoringMode.DIMENSION:
            try:
                return (self.dimension_scores or {}).get(Dimension(name), 0.0)
            except ValueError:
                return 0.0
        return (self.criteria_scores or {}).get(name, 0.0)


class EvaluationSubmission(BaseModel):
    """Outcome of a submission: the stored evaluation, or the gate's refusal."""
    accepted: bool
    evaluation: Optional[EvaluationRecord] = None
    score: Optional[WeightedScore] = None
    conflict: ConflictResult
