"""Enumeration types for the incubation program."""
from enum import Enum
from typing import Optional


class ProgramStage(str, Enum):
    """Program stages, declared in progression order."""
    HOTEL_DE_PROJETOS = "hotel_de_projetos"
    PRE_RESIDENCIA = "pre_residencia"
    RESIDENCIA = "residencia"

    @property
    def order(self) -> int:
        return list(ProgramStage).index(self)

    def next_stage(self) -> Optional["ProgramStage"]:
        """Return the following stage, or None at the terminal stage."""
        stages = list(ProgramStage)
        idx = stages.index(self)
        return stages[idx + 1] if idx + 1 < len(stages) else None

    @property
    def is_terminal(self) -> bool:
        return self.next_stage() is None


PROGRAM_LABELS: dict[ProgramStage, str] = {
    ProgramStage.HOTEL_DE_PROJETOS: "Hotel de Projetos",
    ProgramStage.PRE_RESIDENCIA: "Pré-Residência",
    ProgramStage.RESIDENCIA: "Residência",
}


class Dimension(str, Enum):
    """The five fixed evaluation dimensions."""
    MERCADO = "mercado"
    PERFIL_EMPREENDEDOR = "perfil_empreendedor"
    TECNOLOGIA_QUALIDADE = "tecnologia_qualidade"
    GESTAO = "gestao"
    FINANCEIRO = "financeiro"


# Fixed weights per dimension; they sum to 0.95, so dimension scores top out at 9.5
DIMENSION_WEIGHTS: dict[Dimension, float] = {
    Dimension.MERCADO: 0.28,
    Dimension.PERFIL_EMPREENDEDOR: 0.21,
    Dimension.TECNOLOGIA_QUALIDADE: 0.14,
    Dimension.GESTAO: 0.16,
    Dimension.FINANCEIRO: 0.16,
}

DIMENSION_SCORE_MAX: float = 10.0


class ScoringMode(str, Enum):
    """How an evaluation was scored."""
    DIMENSION = "dimension"  # five fixed dimensions, 0-10
    TEMPLATE = "template"  # rubric template criteria, 0-100


class GateValue(str, Enum):
    """Qualitative overall judgment, best first."""
    MATURE = "mature"
    POSITIVE = "positive"
    NEEDS_IMPROVEMENT = "needs_improvement"  # does not block
    BLOCKING = "blocking"

    @property
    def rank(self) -> int:
        """0 is best; the highest rank is the hard block."""
        return list(GateValue).index(self)

    @property
    def blocks_progression(self) -> bool:
        return self is GateValue.BLOCKING


GATE_LABELS: dict[GateValue, str] = {
    GateValue.MATURE: "Maduro para tornar-se empresa",
    GateValue.POSITIVE: "Avaliável positivamente",
    GateValue.NEEDS_IMPROVEMENT: "Necessita melhorias (não bloqueia)",
    GateValue.BLOCKING: "Muitas falhas / Total falta de amadurecimento (bloqueia)",
}


class DeliverableStatus(str, Enum):
    """Deliverable workflow states."""
    TO_DO = "to_do"
    IN_PROGRESS = "in_progress"
    IN_REVIEW = "in_review"
    APPROVED = "approved"


# Forward-only transitions; regressions belong to the approval workflow
VALID_DELIVERABLE_TRANSITIONS: dict[DeliverableStatus, list[DeliverableStatus]] = {
    DeliverableStatus.TO_DO: [DeliverableStatus.IN_PROGRESS],
    DeliverableStatus.IN_PROGRESS: [DeliverableStatus.IN_REVIEW],
    DeliverableStatus.IN_REVIEW: [DeliverableStatus.APPROVED],
    DeliverableStatus.APPROVED: [],
}


def can_transition(current: DeliverableStatus, target: DeliverableStatus) -> bool:
    """Check whether a deliverable may move from ``current`` to ``target``."""
    return target in VALID_DELIVERABLE_TRANSITIONS[current]


class PartnershipType(str, Enum):
    """Declared mentor/company relationship types."""
    FOUNDER = "founder"
    PARTNER = "partner"
    ADVISOR = "advisor"
    FAMILY = "family"
    INVESTOR = "investor"
    EMPLOYEE = "employee"
    OTHER = "other"


# Any active partnership of these types is a hard block
BLOCKING_PARTNERSHIP_TYPES: frozenset[PartnershipType] = frozenset({
    PartnershipType.FOUNDER,
    PartnershipType.PARTNER,
    PartnershipType.ADVISOR,
    PartnershipType.EMPLOYEE,
})


class ConflictStatus(str, Enum):
    CLEAR = "clear"
    WARNING = "warning"
    BLOCKED = "blocked"


class ConflictSeverity(str, Enum):
    """Reason severities, mildest first."""
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(ConflictSeverity).index(self)


class AuditActionType(str, Enum):
    """Action types recorded in the conflict audit log."""
    EVALUATION_ATTEMPT = "evaluation_attempt"
    CONFLICT_DETECTED = "conflict_detected"
    PARTNERSHIP_DECLARED = "partnership_declared"
    PARTNERSHIP_UPDATED = "partnership_updated"
    NOTIFICATION_SENT = "notification_sent"


class NotificationType(str, Enum):
    CONFLICT_DETECTED = "conflict_detected"
    PARTNERSHIP_DECLARED = "partnership_declared"
    VIOLATION_ATTEMPT = "violation_attempt"
    AUDIT_REQUIRED = "audit_required"


class RequirementStatus(str, Enum):
    """Informational status of a single eligibility requirement."""
    MET = "met"
    AT_RISK = "at_risk"
    NOT_MET = "not_met"
    PENDING = "pending"
    NOT_EVALUATED = "not_evaluated"
