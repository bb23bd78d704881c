"""Program configuration models."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import PROGRAM_LABELS, ProgramStage


class Thresholds(BaseModel):
    """Minimum weighted score and per-dimension minimums, on the 0-10 scale."""
    weighted_score_min: float = Field(..., ge=0, le=10)
    dimension_mins: dict[str, float] = Field(default_factory=dict)


class RequiredDeliverable(BaseModel):
    """Deliverable a company must produce while in a stage."""
    key: str = Field(..., min_length=1)
    label: str = ""
    approval_required: bool = True


class ProgramConfig(BaseModel):
    """Immutable stage configuration, loaded once per evaluation cycle."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    key: ProgramStage
    label: str = ""
    passage_thresholds: Optional[Thresholds] = None
    maintenance_thresholds: Optional[Thresholds] = None
    gate_required: bool = True
    required_deliverables: List[RequiredDeliverable] = Field(default_factory=list)

    @property
    def stage_order(self) -> int:
        return self.key.order

    @property
    def display_label(self) -> str:
        return self.label or PROGRAM_LABELS[self.key]

    def approval_keys(self) -> list[str]:
        """Keys of deliverables that must be approved before passage."""
        return [d.key for d in self.required_deliverables if d.approval_required]
