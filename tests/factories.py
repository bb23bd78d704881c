"""Builders for engine entities used across the test suite."""
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from incubation.models import (
    Company,
    Deliverable,
    DeliverableStatus,
    Dimension,
    EvaluationRecord,
    GateValue,
    Partnership,
    PartnershipType,
    ProgramStage,
    ScoringMode,
)


def make_company(company_id=None, stage=ProgramStage.PRE_RESIDENCIA):
    return Company(id=company_id or str(uuid4()), name="Acme", current_program_key=stage)


def make_evaluation(
    company_id,
    program_key=ProgramStage.PRE_RESIDENCIA,
    weighted_score=7.5,
    dimension_scores=None,
    gate_value=GateValue.POSITIVE,
    mentor_id="mentor-1",
    days_ago=1,
    is_valid=True,
    mode=ScoringMode.DIMENSION,
    criteria_scores=None,
):
    evaluated = datetime.now(timezone.utc) - timedelta(days=days_ago)
    if dimension_scores is None and mode is ScoringMode.DIMENSION:
        dimension_scores = {d: 7.0 for d in Dimension}
    return EvaluationRecord(
        id=str(uuid4()),
        company_id=company_id,
        mentor_id=mentor_id,
        program_key=program_key,
        mode=mode,
        dimension_scores=dimension_scores,
        template_id="pitch-template" if mode is ScoringMode.TEMPLATE else None,
        criteria_scores=criteria_scores,
        weighted_score=weighted_score,
        gate_value=gate_value,
        evaluation_date=evaluated,
        expires_at=evaluated + timedelta(days=90),
        is_valid=is_valid,
    )


def make_deliverable(company_id, key, status=DeliverableStatus.APPROVED, program_key=ProgramStage.PRE_RESIDENCIA):
    return Deliverable(company_id=company_id, program_key=program_key, key=key, status=status)


def make_partnership(mentor_id, company_id, partnership_type=PartnershipType.PARTNER, is_active=True, ended_days_ago=None):
    end_date = None
    if ended_days_ago is not None:
        end_date = datetime.now(timezone.utc) - timedelta(days=ended_days_ago)
    return Partnership(
        id=str(uuid4()),
        mentor_id=mentor_id,
        company_id=company_id,
        partnership_type=partnership_type,
        is_active=is_active,
        end_date=end_date,
    )
