"""Eligibility and progression Pydantic models."""
from typing import Optional

from pydantic import BaseModel, Field

from .enums import ProgramStage, RequirementStatus


class EligibilityChecks(BaseModel):
    """Per-check booleans; all must hold for ``eligible``."""
    has_valid_evaluation: bool = False
    weighted_score_met: bool = False
    dimension_mins_met: bool = False
    gate_positive: bool = False
    deliverables_approved: bool = False

    def all_met(self) -> bool:
        return all(self.model_dump().values())


class RequirementHint(BaseModel):
    """Informational view of one requirement; never affects the booleans."""
    type: str  # weighted_score | dimension | deliverable | gate
    key: str
    status: RequirementStatus
    current: Optional[float] = None
    required: Optional[float] = None
    difference: Optional[float] = None
    details: Optional[str] = None


class EligibilityResult(BaseModel):
    """Verdict of the eligibility checker."""
    company_id: str
    program_key: ProgramStage
    eligible: bool
    checks: EligibilityChecks
    next_stage: Optional[ProgramStage] = None
    evaluation_id: Optional[str] = None
    hints: list[RequirementHint] = Field(default_factory=list)
    maintenance_met: Optional[bool] = Field(
        default=None,
        description="Whether maintenance thresholds hold; None when not configured",
    )

    @property
    def needs_attention(self) -> int:
        return sum(
            1 for h in self.hints
            if h.status in (RequirementStatus.NOT_MET, RequirementStatus.AT_RISK, RequirementStatus.PENDING)
        )


class AdvanceRequest(BaseModel):
    """Advance a company out of ``from_stage``."""
    from_stage: ProgramStage


class AdvanceResult(BaseModel):
    company_id: str
    advanced: bool
    from_stage: ProgramStage
    current_stage: ProgramStage
    created_deliverables: list[str] = Field(default_factory=list)
    message: str
