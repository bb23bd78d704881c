"""
Exception taxonomy for the progression engine.

A ``blocked`` conflict check is a normal result, not an exception.
"""
import math
from typing import Any, Optional


class EngineError(Exception):
    """Base exception for engine operations."""

    error_code = "engine_error"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(EngineError):
    """Static configuration is unusable (rejected before any submission)."""

    error_code = "configuration_error"


class InvalidRubric(ConfigurationError):
    """Rubric template weights do not add up to the declared total."""

    error_code = "invalid_rubric"

    def __init__(self, template_id: str, weight_sum: float, total_weight: float):
        self.template_id = template_id
        self.weight_sum = weight_sum
        self.total_weight = total_weight
        super().__init__(
            f"Template {template_id} weights sum to {weight_sum} "
            f"but declare total_weight={total_weight}",
            {"template_id": template_id, "weight_sum": weight_sum, "total_weight": total_weight},
        )


class InputValidationError(EngineError):
    """A specific submission is incomplete or out of range."""

    error_code = "validation_error"


class IncompleteSubmission(InputValidationError):
    """One or more criteria or dimensions lack a score."""

    error_code = "incomplete_submission"

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            f"Missing scores for: {', '.join(missing)}",
            {"missing": missing},
        )


class ScoreOutOfRange(InputValidationError):
    """A score lies outside its allowed range."""

    error_code = "score_out_of_range"

    def __init__(self, field: str, value: float, min_value: float, max_value: float):
        self.field = field
        super().__init__(
            f"Score for {field}={value} outside [{min_value}, {max_value}]",
            # Non-finite values have no JSON form
            {"field": field, "value": value if math.isfinite(value) else str(value),
             "min": min_value, "max": max_value},
        )


class DependencyUnavailable(EngineError):
    """Storage or lookup failure, including timeouts."""

    error_code = "dependency_unavailable"


class EntityNotFound(EngineError):
    """Entity not found in storage."""

    error_code = "not_found"

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with ID {entity_id} not found")


class NotEligible(EngineError):
    """Advance requested for a company that does not meet every check."""

    error_code = "not_eligible"
