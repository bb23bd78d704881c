"""
Evaluation submission service.

Orchestrates one mentor evaluation end to end:

1. Conflict gate (action ``evaluation_attempt``); a blocked verdict stops here
2. Load the rubric template (template mode)
3. Score with the scoring engine
4. Persist, superseding earlier valid evaluations for the company/program

Nothing is stored when any step fails.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from incubation.config import Settings, get_settings
from incubation.core.deadlines import call_with_timeout
from incubation.models import (
    AuditActionType,
    EvaluationCommand,
    EvaluationRecord,
    EvaluationSubmission,
    ScoringMode,
)
from incubation.policy.conflict_gate import ConflictPolicyGate
from incubation.scoring.engine import ScoringEngine
from incubation.services.config_store import ConfigStore
from incubation.services.database import DatabaseService

logger = structlog.get_logger(__name__)


class EvaluationService:
    def __init__(
        self,
        db: DatabaseService,
        config_store: ConfigStore,
        gate: ConflictPolicyGate,
        settings: Optional[Settings] = None,
    ):
        self.db = db
        self.config_store = config_store
        self.gate = gate
        self.settings = settings or get_settings()
        self.engine = ScoringEngine(self.settings.rubric_weight_tolerance)

    def submit(self, command: EvaluationCommand, timeout: Optional[float] = None) -> EvaluationSubmission:
        """Gate, score and store a mentor evaluation.

        ``timeout`` bounds the conflict lookup and each storage call. A store
        that times out may still land; the next submission supersedes it.
        """
        storage_timeout = self.settings.storage_timeout_seconds if timeout is None else timeout
        conflict = self.gate.check(
            command.mentor_id,
            command.company_id,
            action_type=AuditActionType.EVALUATION_ATTEMPT,
            timeout=timeout,
        )
        if conflict.is_blocked:
            logger.warning(
                "evaluation_rejected",
                mentor_id=command.mentor_id,
                company_id=command.company_id,
                risk_score=conflict.risk_score,
                reasons=[r.type for r in conflict.reasons],
            )
            return EvaluationSubmission(accepted=False, conflict=conflict)

        # Unknown companies surface as EntityNotFound before anything is stored
        call_with_timeout(self.db.get_company, command.company_id, timeout=storage_timeout, what="company lookup")

        template = None
        if command.mode is ScoringMode.TEMPLATE:
            template = call_with_timeout(
                self.config_store.find_template, command.template_id,
                timeout=storage_timeout, what="template lookup",
            )
        score = self.engine.score(command, template)

        now = datetime.now(timezone.utc)
        record = EvaluationRecord(
            id=str(uuid.uuid4()),
            company_id=command.company_id,
            mentor_id=command.mentor_id,
            program_key=command.program_key,
            mode=score.mode,
            dimension_scores=command.dimension_scores if score.mode is ScoringMode.DIMENSION else None,
            template_id=command.template_id,
            criteria_scores=command.criteria_scores,
            weighted_score=score.weighted_score,
            gate_value=command.gate_value,
            notes=command.notes,
            evaluation_date=now,
            expires_at=now + timedelta(days=self.settings.evaluation_validity_days),
            is_valid=True,
        )
        call_with_timeout(self.db.insert_evaluation, record, timeout=storage_timeout, what="evaluation store")

        logger.info(
            "evaluation_recorded",
            evaluation_id=record.id,
            company_id=record.company_id,
            mentor_id=record.mentor_id,
            program_key=record.program_key.value,
            weighted_score=record.weighted_score,
            conflict_status=conflict.status.value,
        )
        return EvaluationSubmission(accepted=True, evaluation=record, score=score, conflict=conflict)
