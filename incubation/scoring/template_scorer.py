"""Rubric-template weighted score.

  contribution_c = raw_c / max_score_c × weight_c
  final          = Σ contribution_c / Σ weight_c × 100     ∈ [0, 100]

rounded to one decimal with ROUND_HALF_UP.
"""
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional

import structlog

from incubation.core.exceptions import IncompleteSubmission, ScoreOutOfRange
from incubation.models.rubric import DEFAULT_WEIGHT_TOLERANCE, RubricTemplate
from incubation.scoring.utils import clamp, exact_decimal, round_half_up, to_decimal

logger = structlog.get_logger(__name__)

HUNDRED = Decimal(100)


@dataclass
class TemplateResult:
    weighted_score: Decimal
    raw_score: Decimal
    criterion_contributions: Dict[str, Decimal]

    def to_dict(self) -> dict:
        return {
            "weighted_score": float(self.weighted_score),
            "raw_score": float(self.raw_score),
            "criterion_contributions": {
                k: float(v) for k, v in self.criterion_contributions.items()
            },
        }


class TemplateScorer:
    """Score criteria against a validated rubric template."""

    def __init__(self, weight_tolerance: float = DEFAULT_WEIGHT_TOLERANCE) -> None:
        self.weight_tolerance = weight_tolerance

    def validate(self, template: RubricTemplate, criteria_scores: Dict[str, Optional[float]]) -> None:
        """Reject bad templates first, then incomplete or out-of-range input."""
        template.check_weights(self.weight_tolerance)

        missing = [
            c.id for c in template.criteria
            if criteria_scores.get(c.id) is None
        ]
        if missing:
            raise IncompleteSubmission(missing)

        for c in template.criteria:
            value = criteria_scores[c.id]
            if not math.isfinite(value) or value < 0 or value > c.max_score:
                raise ScoreOutOfRange(c.id, value, 0, c.max_score)

    def calculate(self, template: RubricTemplate, criteria_scores: Dict[str, Optional[float]]) -> TemplateResult:
        """Validate and compute the 0–100 template score."""
        self.validate(template, criteria_scores)

        contributions: Dict[str, Decimal] = {}
        total_weight = Decimal(0)
        for c in template.criteria:
            weight = exact_decimal(c.weight)
            ratio = exact_decimal(criteria_scores[c.id]) / exact_decimal(c.max_score)
            contributions[c.id] = ratio * weight
            total_weight += weight

        # Rounded once, from the exact total
        total = clamp(sum(contributions.values()) / total_weight * HUNDRED, Decimal(0), HUNDRED)

        result = TemplateResult(
            weighted_score=round_half_up(total),
            raw_score=to_decimal(total),
            criterion_contributions={k: to_decimal(v) for k, v in contributions.items()},
        )
        logger.debug("template_score_calculated", template_id=template.id, **result.to_dict())
        return result
