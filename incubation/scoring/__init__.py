"""Scoring module for the incubation program.

Two modes share one engine:
  dimension → five fixed weighted dimensions, 0–10
  template  → rubric template criteria, 0–100
"""
from incubation.scoring.engine import ScoringEngine, validate_dimension_scores

__all__ = ["ScoringEngine", "validate_dimension_scores"]
