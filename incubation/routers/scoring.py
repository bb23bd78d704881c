"""Scoring endpoint: compute a weighted score without storing it."""
from fastapi import APIRouter

from incubation.config import get_settings
from incubation.models import ScoreRequest, ScoringMode, WeightedScore
from incubation.scoring import ScoringEngine
from incubation.services import get_config_store

router = APIRouter(prefix="/api/v1/scoring", tags=["Scoring"])


@router.post(
    "/evaluate",
    response_model=WeightedScore,
    summary="Calculate Weighted Score",
)
async def evaluate(request: ScoreRequest):
    """
    Weighted score for fixed dimensions (0-10) or a rubric template (0-100).

    Invalid templates, incomplete submissions and out-of-range scores are
    rejected with 422.
    """
    template = None
    if request.mode is ScoringMode.TEMPLATE:
        template = get_config_store().find_template(request.template_id)
    engine = ScoringEngine(get_settings().rubric_weight_tolerance)
    return engine.score(request, template)
