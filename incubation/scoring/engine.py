"""Scoring engine: one entry point for both scoring modes.

Validation of a submission happens here, once: template weights
(``InvalidRubric``), completeness (``IncompleteSubmission``) and ranges
(``ScoreOutOfRange``, which also covers NaN and infinities). The engine is
pure; persistence is the caller's job.
"""
import math
from typing import Dict, Optional

import structlog

from incubation.core.exceptions import ConfigurationError, IncompleteSubmission, ScoreOutOfRange
from incubation.models.enums import DIMENSION_SCORE_MAX, Dimension, ScoringMode
from incubation.models.evaluation import ScoreRequest, WeightedScore
from incubation.models.rubric import DEFAULT_WEIGHT_TOLERANCE, RubricTemplate
from incubation.scoring.dimension_scorer import DimensionScorer
from incubation.scoring.template_scorer import TemplateScorer

logger = structlog.get_logger(__name__)


def validate_dimension_scores(dimension_scores: Dict[Dimension, Optional[float]]) -> None:
    """All five dimensions present, finite and within [0, 10]."""
    missing = [d.value for d in Dimension if dimension_scores.get(d) is None]
    if missing:
        raise IncompleteSubmission(missing)
    for dim in Dimension:
        value = dimension_scores[dim]
        if not math.isfinite(value) or value < 0 or value > DIMENSION_SCORE_MAX:
            raise ScoreOutOfRange(dim.value, value, 0, DIMENSION_SCORE_MAX)


class ScoringEngine:
    """Compute a ``WeightedScore`` from a score request."""

    def __init__(self, weight_tolerance: float = DEFAULT_WEIGHT_TOLERANCE) -> None:
        self.dimension_scorer = DimensionScorer()
        self.template_scorer = TemplateScorer(weight_tolerance)

    def score(self, request: ScoreRequest, template: Optional[RubricTemplate] = None) -> WeightedScore:
        if request.mode is ScoringMode.TEMPLATE:
            return self._score_template(request, template)
        return self._score_dimensions(request)

    def _score_dimensions(self, request: ScoreRequest) -> WeightedScore:
        scores = request.dimension_scores or {}
        validate_dimension_scores(scores)
        result = self.dimension_scorer.calculate(scores)

        logger.info(
            "weighted_score_calculated",
            mode=ScoringMode.DIMENSION.value,
            weighted_score=float(result.weighted_score),
            raw_score=float(result.raw_score),
        )
        return WeightedScore(
            weighted_score=float(result.weighted_score),
            mode=ScoringMode.DIMENSION,
            raw_score=float(result.raw_score),
            scale_max=DIMENSION_SCORE_MAX,
            contributions={k: float(v) for k, v in result.dimension_contributions.items()},
        )

    def _score_template(self, request: ScoreRequest, template: Optional[RubricTemplate]) -> WeightedScore:
        if template is None or template.id != request.template_id:
            raise ConfigurationError(
                f"Rubric template {request.template_id} is not available",
                {"template_id": request.template_id},
            )
        if not template.is_active:
            raise ConfigurationError(
                f"Rubric template {template.id} is inactive",
                {"template_id": template.id},
            )

        result = self.template_scorer.calculate(template, request.criteria_scores or {})

        logger.info(
            "weighted_score_calculated",
            mode=ScoringMode.TEMPLATE.value,
            template_id=template.id,
            weighted_score=float(result.weighted_score),
            raw_score=float(result.raw_score),
        )
        return WeightedScore(
            weighted_score=float(result.weighted_score),
            mode=ScoringMode.TEMPLATE,
            raw_score=float(result.raw_score),
            scale_max=100.0,
            contributions={k: float(v) for k, v in result.criterion_contributions.items()},
        )
