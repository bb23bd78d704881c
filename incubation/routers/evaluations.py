"""Evaluation submission endpoint."""
from typing import Optional

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from incubation.audit import AuditSink
from incubation.evaluations import EvaluationService
from incubation.models import EvaluationCommand, EvaluationSubmission
from incubation.policy import ConflictPolicyGate
from incubation.services import get_config_store, get_database_service

router = APIRouter(prefix="/api/v1/evaluations", tags=["Evaluations"])


def _service() -> EvaluationService:
    db = get_database_service()
    return EvaluationService(db, get_config_store(), ConflictPolicyGate(db, AuditSink(db)))


@router.post(
    "",
    response_model=EvaluationSubmission,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Evaluation",
    responses={403: {"description": "Blocked by the conflict-of-interest gate"}},
)
async def submit_evaluation(
    command: EvaluationCommand,
    timeout: Optional[float] = Query(None, gt=0, le=60, description="Seconds to wait on each storage call"),
):
    """Gate, score and store a mentor evaluation.

    A blocked conflict check returns 403 with the full conflict result. A
    storage call that exceeds ``timeout`` answers 503.
    """
    submission = _service().submit(command, timeout=timeout)
    if not submission.accepted:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content=submission.conflict.model_dump(mode="json"),
        )
    return submission
