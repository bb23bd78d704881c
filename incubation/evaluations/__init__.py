"""Mentor evaluation submission."""
from incubation.evaluations.service import EvaluationService

__all__ = ["EvaluationService"]
