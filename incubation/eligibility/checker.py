"""Eligibility checker.

A company may leave its current stage when all of these hold:

  has_valid_evaluation    latest valid, unexpired evaluation for the current stage
  weighted_score_met      normalized weighted score >= passage minimum
  dimension_mins_met      every configured dimension minimum met
  gate_positive           gate value present and not ``blocking``
  deliverables_approved   every approval-required deliverable approved

Requirement hints mirror the same data with an "at risk" band (0.3 on the
weighted score, 0.2 per dimension). Hints are informational and never change
the booleans. The checker is pure; loading and advancing live in
``incubation.eligibility.progression``.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional

import structlog

from incubation.models import (
    Company,
    Deliverable,
    DeliverableStatus,
    EligibilityChecks,
    EligibilityResult,
    EvaluationRecord,
    GATE_LABELS,
    ProgramConfig,
    RequirementHint,
    RequirementStatus,
    Thresholds,
)
from incubation.scoring.utils import to_decimal

logger = structlog.get_logger(__name__)

WEIGHTED_SCORE_RISK_BAND = Decimal("0.3")
DIMENSION_RISK_BAND = Decimal("0.2")

_DELIVERABLE_HINTS = {
    DeliverableStatus.APPROVED: (RequirementStatus.MET, "Approved"),
    DeliverableStatus.IN_REVIEW: (RequirementStatus.PENDING, "Submitted, awaiting review"),
    DeliverableStatus.IN_PROGRESS: (RequirementStatus.AT_RISK, "In progress"),
    DeliverableStatus.TO_DO: (RequirementStatus.NOT_MET, "To do"),
}


def _threshold_hint(
    hint_type: str,
    key: str,
    current: Decimal,
    required: Decimal,
    band: Decimal,
) -> RequirementHint:
    gap = required - current
    if current >= required:
        status = RequirementStatus.MET
    elif gap <= band:
        status = RequirementStatus.AT_RISK
    else:
        status = RequirementStatus.NOT_MET
    return RequirementHint(
        type=hint_type,
        key=key,
        status=status,
        current=float(current),
        required=float(required),
        difference=float(max(gap, Decimal(0))),
    )


def _usable_evaluation(
    company: Company,
    evaluation: Optional[EvaluationRecord],
    now: datetime,
) -> Optional[EvaluationRecord]:
    if evaluation is None:
        return None
    if evaluation.program_key != company.current_program_key:
        return None
    return evaluation if evaluation.is_current(now) else None


def meets_thresholds(evaluation: EvaluationRecord, thresholds: Thresholds) -> tuple[bool, bool]:
    """(weighted score met, every dimension minimum met) for one threshold set."""
    score_met = to_decimal(evaluation.normalized_score()) >= to_decimal(thresholds.weighted_score_min)
    dims_met = all(
        to_decimal(evaluation.score_for(name)) >= to_decimal(minimum)
        for name, minimum in thresholds.dimension_mins.items()
    )
    return score_met, dims_met


def _score_hints(evaluation: Optional[EvaluationRecord], thresholds: Optional[Thresholds]) -> List[RequirementHint]:
    if thresholds is None:
        return []
    if evaluation is None:
        hints = [RequirementHint(
            type="weighted_score",
            key="weighted_score",
            status=RequirementStatus.NOT_EVALUATED,
            required=thresholds.weighted_score_min,
        )]
        hints += [
            RequirementHint(type="dimension", key=name, status=RequirementStatus.NOT_EVALUATED, required=minimum)
            for name, minimum in thresholds.dimension_mins.items()
        ]
        return hints

    hints = [_threshold_hint(
        "weighted_score",
        "weighted_score",
        to_decimal(evaluation.normalized_score()),
        to_decimal(thresholds.weighted_score_min),
        WEIGHTED_SCORE_RISK_BAND,
    )]
    for name, minimum in thresholds.dimension_mins.items():
        hints.append(_threshold_hint(
            "dimension",
            name,
            to_decimal(evaluation.score_for(name)),
            to_decimal(minimum),
            DIMENSION_RISK_BAND,
        ))
    return hints


def _deliverable_hints(program: ProgramConfig, deliverables: dict[str, Deliverable]) -> List[RequirementHint]:
    hints = []
    for required in program.required_deliverables:
        if not required.approval_required:
            continue
        row = deliverables.get(required.key)
        if row is None:
            status, details = RequirementStatus.NOT_EVALUATED, "Not started"
        else:
            status, details = _DELIVERABLE_HINTS[row.status]
        hints.append(RequirementHint(type="deliverable", key=required.key, status=status, details=details))
    return hints


def _gate_hint(evaluation: Optional[EvaluationRecord]) -> RequirementHint:
    gate = evaluation.gate_value if evaluation else None
    if gate is None:
        return RequirementHint(
            type="gate", key="gate", status=RequirementStatus.NOT_EVALUATED, details="Not evaluated yet"
        )
    status = RequirementStatus.NOT_MET if gate.blocks_progression else RequirementStatus.MET
    return RequirementHint(type="gate", key="gate", status=status, details=GATE_LABELS[gate])


def check_eligibility(
    company: Company,
    program: ProgramConfig,
    evaluation: Optional[EvaluationRecord],
    deliverables: Iterable[Deliverable],
    now: Optional[datetime] = None,
) -> EligibilityResult:
    """Decide whether ``company`` may advance out of ``program``.

    ``evaluation`` is the latest valid evaluation for the company's current
    stage (or None). Missing deliverable rows count as not approved and a
    missing dimension score counts as 0.
    """
    now = now or datetime.now(timezone.utc)
    current = _usable_evaluation(company, evaluation, now)
    by_key = {d.key: d for d in deliverables if d.program_key == program.key}

    checks = EligibilityChecks(has_valid_evaluation=current is not None)
    maintenance_met = None

    if current is not None:
        if program.passage_thresholds is None:
            checks.weighted_score_met = checks.dimension_mins_met = True
        else:
            checks.weighted_score_met, checks.dimension_mins_met = meets_thresholds(
                current, program.passage_thresholds
            )
        if current.gate_value is None:
            checks.gate_positive = not program.gate_required
        else:
            checks.gate_positive = not current.gate_value.blocks_progression
        if program.maintenance_thresholds is not None:
            maintenance_met = all(meets_thresholds(current, program.maintenance_thresholds))

    checks.deliverables_approved = all(
        key in by_key and by_key[key].is_approved
        for key in program.approval_keys()
    )

    hints = _score_hints(current, program.passage_thresholds)
    hints += _deliverable_hints(program, by_key)
    hints.append(_gate_hint(current))

    eligible = checks.all_met()
    result = EligibilityResult(
        company_id=company.id,
        program_key=company.current_program_key,
        eligible=eligible,
        checks=checks,
        next_stage=company.current_program_key.next_stage(),
        evaluation_id=current.id if current else None,
        hints=hints,
        maintenance_met=maintenance_met,
    )

    logger.debug(
        "eligibility_checked",
        company_id=company.id,
        program_key=company.current_program_key.value,
        eligible=eligible,
        **checks.model_dump(),
    )
    return result
