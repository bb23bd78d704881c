"""Rubric template models.

A template is an ordered list of criteria, each with a positive weight, a
positive maximum score and an optional map of discrete score levels to
descriptions. The weights must add up to the template's declared
``total_weight`` within a small tolerance; see ``RubricTemplate.check_weights``.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from incubation.core.exceptions import InvalidRubric

DEFAULT_WEIGHT_TOLERANCE = 0.01


class Criterion(BaseModel):
    """A single scored criterion of a rubric template."""
    id: str = Field(..., min_length=1)
    name: str = ""
    weight: float = Field(..., gt=0)
    max_score: float = Field(..., gt=0)
    description: Optional[str] = None
    rubric: Optional[dict[float, str]] = Field(
        default=None,
        description="Discrete score level -> description",
    )

    @model_validator(mode="after")
    def rubric_levels_within_range(self) -> "Criterion":
        """Every rubric level must be a reachable score."""
        if self.rubric:
            for level in self.rubric:
                if level < 0 or level > self.max_score:
                    raise ValueError(
                        f"rubric level {level} outside [0, {self.max_score}] "
                        f"for criterion {self.id}"
                    )
        return self

    def levels(self) -> list[tuple[float, str]]:
        """Rubric levels sorted ascending by score."""
        return sorted((self.rubric or {}).items())

    def describe(self, score: float) -> Optional[str]:
        """Description of the rubric level matching ``score`` exactly."""
        return (self.rubric or {}).get(score)


class RubricTemplate(BaseModel):
    """Weighted rubric used by template-mode scoring."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str = ""
    description: Optional[str] = None
    total_weight: float = Field(..., gt=0)
    criteria: List[Criterion] = Field(..., min_length=1)
    is_active: bool = True
    created_at: Optional[datetime] = None

    @model_validator(mode="after")
    def unique_criterion_ids(self) -> "RubricTemplate":
        ids = [c.id for c in self.criteria]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate criterion ids in template {self.id}")
        return self

    def weight_sum(self) -> Decimal:
        return sum((Decimal(str(c.weight)) for c in self.criteria), Decimal(0))

    def check_weights(self, tolerance: float = DEFAULT_WEIGHT_TOLERANCE) -> None:
        """Raise ``InvalidRubric`` if the criterion weights miss ``total_weight``.

        This is a configuration error: the template must be rejected before
        any submission against it is accepted, never silently clamped.
        """
        weight_sum = self.weight_sum()
        deviation = abs(weight_sum - Decimal(str(self.total_weight)))
        if deviation > Decimal(str(tolerance)):
            raise InvalidRubric(self.id, float(weight_sum), self.total_weight)

    def criterion(self, criterion_id: str) -> Optional[Criterion]:
        for c in self.criteria:
            if c.id == criterion_id:
                return c
        return None
