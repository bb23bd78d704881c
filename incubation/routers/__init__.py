"""Routers package - API endpoint routers."""
from .health import router as health_router
from .scoring import router as scoring_router
from .evaluations import router as evaluations_router
from .conflicts import router as conflicts_router
from .eligibility import router as eligibility_router

__all__ = [
    "health_router",
    "scoring_router",
    "evaluations_router",
    "conflicts_router",
    "eligibility_router",
]
