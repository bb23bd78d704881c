"""
HTTP client for the progression engine API.

Used by collaborators (the UI backend, reporting jobs) that call the engine
over HTTP rather than in-process. Responses are parsed into the same Pydantic
models the API returns.
"""
import logging
from typing import Any, Optional, Union

import httpx

from incubation.models import (
    AdvanceResult,
    ConflictResult,
    EligibilityResult,
    EvaluationCommand,
    EvaluationSubmission,
    ProgramStage,
    ScoreRequest,
    WeightedScore,
)

logger = logging.getLogger(__name__)


def _normalize_base_url(url: str) -> str:
    """Ensure base URL has no trailing slash."""
    return url.rstrip("/")


def _timeout_params(lookup_timeout: Optional[float]) -> dict[str, float]:
    """Server-side storage timeout, sent as a query parameter when set."""
    return {} if lookup_timeout is None else {"timeout": lookup_timeout}


class ProgressionClient:
    """Thin synchronous wrapper around the engine's endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = _normalize_base_url(base_url)
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    def _post(self, path: str, payload: dict[str, Any], lookup_timeout: Optional[float] = None) -> httpx.Response:
        with self._client() as client:
            return client.post(path, json=payload, params=_timeout_params(lookup_timeout))

    def score(self, request: ScoreRequest) -> WeightedScore:
        r = self._post("/api/v1/scoring/evaluate", request.model_dump(mode="json", exclude_none=True))
        r.raise_for_status()
        return WeightedScore.model_validate(r.json())

    def submit_evaluation(
        self,
        command: EvaluationCommand,
        lookup_timeout: Optional[float] = None,
    ) -> Union[EvaluationSubmission, ConflictResult]:
        """Submit an evaluation.

        Returns the stored submission, or the ``ConflictResult`` when the
        conflict gate refused the mentor (HTTP 403).
        """
        r = self._post(
            "/api/v1/evaluations", command.model_dump(mode="json", exclude_none=True), lookup_timeout
        )
        if r.status_code == httpx.codes.FORBIDDEN:
            result = ConflictResult.model_validate(r.json())
            logger.info(
                "Evaluation by mentor %s for company %s blocked (risk %d)",
                result.mentor_id, result.company_id, result.risk_score,
            )
            return result
        r.raise_for_status()
        return EvaluationSubmission.model_validate(r.json())

    def check_conflict(
        self, mentor_id: str, company_id: str, lookup_timeout: Optional[float] = None
    ) -> ConflictResult:
        r = self._post(
            "/api/v1/conflict/check", {"mentor_id": mentor_id, "company_id": company_id}, lookup_timeout
        )
        r.raise_for_status()
        return ConflictResult.model_validate(r.json())

    def get_eligibility(self, company_id: str, lookup_timeout: Optional[float] = None) -> EligibilityResult:
        with self._client() as client:
            r = client.get(f"/api/v1/eligibility/{company_id}", params=_timeout_params(lookup_timeout))
            r.raise_for_status()
            return EligibilityResult.model_validate(r.json())

    def advance(
        self, company_id: str, from_stage: ProgramStage, lookup_timeout: Optional[float] = None
    ) -> AdvanceResult:
        """Advance a company; a 409 (not eligible) raises ``httpx.HTTPStatusError``."""
        r = self._post(
            f"/api/v1/eligibility/{company_id}/advance",
            {"from_stage": ProgramStage(from_stage).value},
            lookup_timeout,
        )
        r.raise_for_status()
        return AdvanceResult.model_validate(r.json())
