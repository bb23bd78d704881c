"""Fixed five-dimension weighted score.

Formula
-------
  weighted_score = Σ score_d × weight_d      d ∈ {mercado, perfil_empreendedor,
                                                  tecnologia_qualidade, gestao,
                                                  financeiro}

Scores are on the 0–10 scale and the weights sum to 0.95, so the result is
in [0, 9.5]. A missing dimension contributes 0; completeness is checked by
the engine, not here. Calculations use exact Decimal arithmetic; only the
reported values are rounded: ``raw_score`` to four decimals and the headline
score to one decimal with ROUND_HALF_UP, both from the unrounded sum.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional

import structlog

from incubation.models.enums import DIMENSION_SCORE_MAX, DIMENSION_WEIGHTS, Dimension
from incubation.scoring.utils import clamp, exact_decimal, round_half_up, to_decimal, weighted_sum

logger = structlog.get_logger(__name__)

SCORE_MAX: Decimal = Decimal(str(DIMENSION_SCORE_MAX))


@dataclass
class DimensionResult:
    """Dimension-mode calculation with per-dimension contributions."""

    weighted_score: Decimal  # one decimal, half-up
    raw_score: Decimal  # four decimals
    dimension_scores: Dict[str, Decimal]
    dimension_contributions: Dict[str, Decimal]

    def to_dict(self) -> dict:
        return {
            "weighted_score": float(self.weighted_score),
            "raw_score": float(self.raw_score),
            "dimension_scores": {k: float(v) for k, v in self.dimension_scores.items()},
            "dimension_contributions": {
                k: float(v) for k, v in self.dimension_contributions.items()
            },
        }


class DimensionScorer:
    """Compute the fixed-dimension weighted score.

    Parameters
    ----------
    dimension_weights:
        Override the default ``DIMENSION_WEIGHTS``. Only useful in tests; the
        program uses the fixed weights.
    """

    def __init__(self, dimension_weights: Optional[Dict[Dimension, float]] = None) -> None:
        self.weights: Dict[Dimension, Decimal] = {
            d: to_decimal(w)
            for d, w in (dimension_weights or DIMENSION_WEIGHTS).items()
        }

    def calculate(self, dimension_scores: Dict[str, Optional[float]]) -> DimensionResult:
        """Calculate the weighted score.

        Args:
            dimension_scores: Mapping of dimension name (or ``Dimension``) to a
                              score in [0, 10]. Missing or ``None`` counts as 0.
        """
        d_scores: Dict[Dimension, Decimal] = {}
        for dim in Dimension:
            raw = dimension_scores.get(dim.value, dimension_scores.get(dim))
            d_scores[dim] = clamp(exact_decimal(raw or 0.0), Decimal(0), SCORE_MAX)

        ordered_scores = [d_scores[d] for d in Dimension]
        ordered_weights = [self.weights[d] for d in Dimension]

        total = clamp(weighted_sum(ordered_scores, ordered_weights, places=None), Decimal(0), SCORE_MAX)
        contributions = {d.value: d_scores[d] * self.weights[d] for d in Dimension}

        result = DimensionResult(
            weighted_score=round_half_up(total),
            raw_score=to_decimal(total),
            dimension_scores={d.value: d_scores[d] for d in Dimension},
            dimension_contributions=contributions,
        )
        logger.debug("dimension_score_calculated", **result.to_dict())
        return result
