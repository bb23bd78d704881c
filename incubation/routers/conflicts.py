"""Conflict-of-interest endpoints: gate checks, partnerships and audit log."""
from typing import Optional

from fastapi import APIRouter, Query, status

from incubation.audit import AuditSink
from incubation.models import (
    ConflictAuditEntry,
    ConflictCheckRequest,
    ConflictResult,
    Partnership,
    PartnershipCreate,
    PartnershipStatusUpdate,
)
from incubation.policy import ConflictPolicyGate, PartnershipService
from incubation.services import get_database_service

router = APIRouter(prefix="/api/v1/conflict", tags=["Conflict of Interest"])


def _gate() -> ConflictPolicyGate:
    db = get_database_service()
    return ConflictPolicyGate(db, AuditSink(db))


def _partnerships() -> PartnershipService:
    db = get_database_service()
    return PartnershipService(db, AuditSink(db))


@router.post(
    "/check",
    response_model=ConflictResult,
    summary="Check Conflict of Interest",
)
async def check_conflict(
    request: ConflictCheckRequest,
    timeout: Optional[float] = Query(None, gt=0, le=60, description="Seconds to wait for the partnership lookup"),
):
    """Run the gate. ``blocked`` is a normal result, so this is always 200.

    A lookup that exceeds ``timeout`` fails closed: the result is ``blocked``
    with ``error`` set.
    """
    return _gate().check(request.mentor_id, request.company_id, request.action_type, timeout=timeout)


@router.get(
    "/audit-logs",
    response_model=list[ConflictAuditEntry],
    summary="List Conflict Audit Logs",
)
async def list_audit_logs(
    mentor_id: Optional[str] = Query(None),
    company_id: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=500),
):
    db = get_database_service()
    return AuditSink(db).list_conflict_logs(mentor_id=mentor_id, company_id=company_id, limit=limit)


@router.post(
    "/partnerships",
    response_model=Partnership,
    status_code=status.HTTP_201_CREATED,
    summary="Declare Partnership",
)
async def declare_partnership(data: PartnershipCreate):
    return _partnerships().declare(data)


@router.patch(
    "/partnerships/{partnership_id}",
    response_model=Partnership,
    summary="Update Partnership Status",
)
async def update_partnership(partnership_id: str, update: PartnershipStatusUpdate):
    """Deactivating a partnership records its end date."""
    return _partnerships().set_active(partnership_id, update.is_active)


@router.get(
    "/mentors/{mentor_id}/partnerships",
    response_model=list[Partnership],
    summary="List Mentor Partnerships",
)
async def list_mentor_partnerships(mentor_id: str, active_only: bool = Query(False)):
    return _partnerships().list_for_mentor(mentor_id, active_only=active_only)


@router.get(
    "/mentors/{mentor_id}/excluded-companies",
    response_model=list[str],
    summary="Companies Excluded for a Mentor",
)
async def excluded_companies(mentor_id: str):
    """Advisory list for filtering assignments; the gate stays authoritative."""
    return _gate().advisory_exclusions(mentor_id)
