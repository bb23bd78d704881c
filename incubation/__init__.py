"""Incubation progression engine.

Scores mentor evaluations against weighted rubrics, gates every evaluation
attempt through the conflict-of-interest policy, and decides when a company
may advance to the next program stage.
"""

__version__ = "1.0.0"
