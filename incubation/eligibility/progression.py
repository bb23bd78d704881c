"""Eligibility lookups and the explicit advance action."""
from datetime import datetime, timezone
from typing import Optional

import structlog

from incubation.config import Settings, get_settings
from incubation.core.deadlines import call_with_timeout
from incubation.core.exceptions import NotEligible
from incubation.eligibility.checker import check_eligibility
from incubation.models import AdvanceResult, EligibilityResult, ProgramStage
from incubation.services.config_store import ConfigStore
from incubation.services.database import DatabaseService

logger = structlog.get_logger(__name__)


class EligibilityService:
    """Loads the inputs of the checker and performs stage advances.

    Storage failures, including calls that exceed ``timeout``, surface as
    ``DependencyUnavailable``; a verdict is never computed from partial data.
    """

    def __init__(self, db: DatabaseService, config_store: ConfigStore, settings: Optional[Settings] = None):
        self.db = db
        self.config_store = config_store
        self.settings = settings or get_settings()

    def check(
        self,
        company_id: str,
        now: Optional[datetime] = None,
        timeout: Optional[float] = None,
    ) -> EligibilityResult:
        now = now or datetime.now(timezone.utc)
        company, program, evaluation, deliverables = call_with_timeout(
            self._load_inputs, company_id, now, timeout=self._timeout(timeout), what="eligibility lookup"
        )
        return check_eligibility(company, program, evaluation, deliverables, now)

    def advance_company(
        self,
        company_id: str,
        from_stage: ProgramStage,
        timeout: Optional[float] = None,
    ) -> AdvanceResult:
        """Move a company out of ``from_stage`` if it is eligible.

        Repeating the call after a successful advance is a no-op that returns
        ``advanced=False``; so is asking to advance from the terminal stage.
        A stage update that times out may still land, so retrying is safe.
        """
        timeout = self._timeout(timeout)
        from_stage = ProgramStage(from_stage)
        company = call_with_timeout(self.db.get_company, company_id, timeout=timeout, what="company lookup")

        if company.current_program_key != from_stage:
            return self._no_op(company_id, from_stage, company.current_program_key,
                               f"Company is no longer at {from_stage.value}")
        to_stage = from_stage.next_stage()
        if to_stage is None:
            return self._no_op(company_id, from_stage, from_stage,
                               f"{from_stage.value} is the final stage")

        result = self.check(company_id, timeout=timeout)
        if not result.eligible:
            failed = [name for name, ok in result.checks.model_dump().items() if not ok]
            logger.info("advance_rejected", company_id=company_id, from_stage=from_stage.value, failed=failed)
            raise NotEligible(
                f"Company {company_id} is not eligible to leave {from_stage.value}",
                {"failed_checks": failed, "eligibility": result.model_dump(mode="json")},
            )

        next_program = call_with_timeout(
            self.config_store.get_program, to_stage, timeout=timeout, what="program lookup"
        )
        advanced, created = call_with_timeout(
            self.db.advance_company_stage,
            company_id, from_stage, to_stage, next_program.required_deliverables,
            timeout=timeout, what="stage update",
        )
        if not advanced:
            # Lost the compare-and-set to a concurrent advance
            current = call_with_timeout(
                self.db.get_company, company_id, timeout=timeout, what="company lookup"
            ).current_program_key
            return self._no_op(company_id, from_stage, current,
                               f"Company is no longer at {from_stage.value}")

        logger.info(
            "company_advanced",
            company_id=company_id,
            from_stage=from_stage.value,
            to_stage=to_stage.value,
            created_deliverables=created,
        )
        return AdvanceResult(
            company_id=company_id,
            advanced=True,
            from_stage=from_stage,
            current_stage=to_stage,
            created_deliverables=created,
            message=f"Company advanced to {next_program.display_label}",
        )

    def _load_inputs(self, company_id: str, now: datetime):
        company = self.db.get_company(company_id)
        program = self.config_store.get_program(company.current_program_key)
        evaluation = self.db.get_latest_valid_evaluation(company.id, company.current_program_key, now)
        deliverables = self.db.list_deliverables(company.id, company.current_program_key)
        return company, program, evaluation, deliverables

    def _timeout(self, timeout: Optional[float]) -> float:
        return self.settings.storage_timeout_seconds if timeout is None else timeout

    def _no_op(self, company_id: str, from_stage: ProgramStage, current: ProgramStage, message: str) -> AdvanceResult:
        logger.info("advance_skipped", company_id=company_id, from_stage=from_stage.value, reason=message)
        return AdvanceResult(
            company_id=company_id,
            advanced=False,
            from_stage=from_stage,
            current_stage=current,
            message=message,
        )
