"""Pydantic models for the incubation progression engine."""

# Common Models
from incubation.models.common import (
    HealthResponse,
    ErrorResponse,
    MessageResponse,
)

# Enums
from incubation.models.enums import (
    ProgramStage,
    PROGRAM_LABELS,
    Dimension,
    DIMENSION_WEIGHTS,
    ScoringMode,
    GateValue,
    GATE_LABELS,
    DeliverableStatus,
    VALID_DELIVERABLE_TRANSITIONS,
    can_transition,
    PartnershipType,
    BLOCKING_PARTNERSHIP_TYPES,
    ConflictStatus,
    ConflictSeverity,
    AuditActionType,
    NotificationType,
    RequirementStatus,
)

# Rubric
from incubation.models.rubric import Criterion, RubricTemplate

# Program, company, deliverables
from incubation.models.program import ProgramConfig, RequiredDeliverable, Thresholds
from incubation.models.company import Company, Deliverable

# Evaluation
from incubation.models.evaluation import (
    ScoreRequest,
    EvaluationCommand,
    WeightedScore,
    EvaluationRecord,
    EvaluationSubmission,
)

# Conflict
from incubation.models.conflict import (
    Partnership,
    PartnershipCreate,
    PartnershipStatusUpdate,
    ConflictReason,
    ConflictCheckRequest,
    ConflictResult,
    ConflictAuditEntry,
    Notification,
)

# Eligibility
from incubation.models.eligibility import (
    EligibilityChecks,
    RequirementHint,
    EligibilityResult,
    AdvanceRequest,
    AdvanceResult,
)

__all__ = [
    # Common
    "HealthResponse",
    "ErrorResponse",
    "MessageResponse",
    # Enums
    "ProgramStage",
    "PROGRAM_LABELS",
    "Dimension",
    "DIMENSION_WEIGHTS",
    "ScoringMode",
    "GateValue",
    "GATE_LABELS",
    "DeliverableStatus",
    "VALID_DELIVERABLE_TRANSITIONS",
    "can_transition",
    "PartnershipType",
    "BLOCKING_PARTNERSHIP_TYPES",
    "ConflictStatus",
    "ConflictSeverity",
    "AuditActionType",
    "NotificationType",
    "RequirementStatus",
    # Rubric
    "Criterion",
    "RubricTemplate",
    # Program / company
    "ProgramConfig",
    "RequiredDeliverable",
    "Thresholds",
    "Company",
    "Deliverable",
    # Evaluation
    "ScoreRequest",
    "EvaluationCommand",
    "WeightedScore",
    "EvaluationRecord",
    "EvaluationSubmission",
    # Conflict
    "Partnership",
    "PartnershipCreate",
    "PartnershipStatusUpdate",
    "ConflictReason",
    "ConflictCheckRequest",
    "ConflictResult",
    "ConflictAuditEntry",
    "Notification",
    # Eligibility
    "EligibilityChecks",
    "RequirementHint",
    "EligibilityResult",
    "AdvanceRequest",
    "AdvanceResult",
]
