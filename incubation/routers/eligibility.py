"""Eligibility and stage advance endpoints."""
from typing import Optional

from fastapi import APIRouter, Query

from incubation.eligibility import EligibilityService
from incubation.models import AdvanceRequest, AdvanceResult, EligibilityResult
from incubation.services import get_config_store, get_database_service

router = APIRouter(prefix="/api/v1/eligibility", tags=["Eligibility"])


def _service() -> EligibilityService:
    return EligibilityService(get_database_service(), get_config_store())


@router.get(
    "/{company_id}",
    response_model=EligibilityResult,
    summary="Check Eligibility",
)
async def check_eligibility(
    company_id: str,
    timeout: Optional[float] = Query(None, gt=0, le=60, description="Seconds to wait on storage"),
):
    """Eligibility of a company to leave its current stage, with requirement hints."""
    return _service().check(company_id, timeout=timeout)


@router.post(
    "/{company_id}/advance",
    response_model=AdvanceResult,
    summary="Advance Company",
    responses={409: {"description": "Company is not eligible"}},
)
async def advance_company(
    company_id: str,
    request: AdvanceRequest,
    timeout: Optional[float] = Query(None, gt=0, le=60, description="Seconds to wait on storage"),
):
    """Advance out of ``from_stage``; repeating a completed advance is a no-op."""
    return _service().advance_company(company_id, request.from_stage, timeout=timeout)
