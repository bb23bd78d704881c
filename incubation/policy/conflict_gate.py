"""Conflict-of-interest policy gate.

The gate is the single authoritative "mentor may not evaluate this company"
check. Every call appends one audit row, whatever the outcome, and the gate
fails closed: if partnerships or history cannot be read in time, the result
is ``blocked`` with ``error`` set.
"""
from datetime import datetime, timezone
from typing import List, Optional

import structlog

from incubation.audit.sink import AuditSink
from incubation.config import Settings, get_settings
from incubation.core.deadlines import call_with_timeout
from incubation.models import (
    AuditActionType,
    BLOCKING_PARTNERSHIP_TYPES,
    ConflictReason,
    ConflictResult,
    ConflictSeverity,
    ConflictStatus,
    EvaluationRecord,
    NotificationType,
    Partnership,
)
from incubation.policy.heuristics import HeuristicPolicy, cross_validate, direct_conflicts
from incubation.services.database import DatabaseService

logger = structlog.get_logger(__name__)

RECOMMENDATIONS: dict[ConflictStatus, str] = {
    ConflictStatus.BLOCKED: (
        "Select a different mentor for this company or have the partnership "
        "reviewed by the program administration."
    ),
    ConflictStatus.WARNING: (
        "Review the declared relationships and record a justification before "
        "proceeding with this evaluation."
    ),
    ConflictStatus.CLEAR: "No conflict of interest detected; the evaluation may proceed.",
}


def derive_status(reasons: List[ConflictReason], risk_score: int, warning_threshold: int) -> ConflictStatus:
    if any(r.severity is ConflictSeverity.CRITICAL for r in reasons):
        return ConflictStatus.BLOCKED
    if risk_score >= warning_threshold or any(r.severity is ConflictSeverity.WARNING for r in reasons):
        return ConflictStatus.WARNING
    return ConflictStatus.CLEAR


def highest_severity(reasons: List[ConflictReason]) -> ConflictSeverity:
    return max((r.severity for r in reasons), key=lambda s: s.rank, default=ConflictSeverity.INFO)


class ConflictPolicyGate:
    """Classify mentor/company conflict risk and record the decision."""

    def __init__(self, db: DatabaseService, sink: AuditSink, settings: Optional[Settings] = None):
        self.db = db
        self.sink = sink
        self.settings = settings or get_settings()
        self.policy = HeuristicPolicy.from_settings(self.settings)

    def check(
        self,
        mentor_id: str,
        company_id: str,
        action_type: AuditActionType = AuditActionType.EVALUATION_ATTEMPT,
        timeout: Optional[float] = None,
    ) -> ConflictResult:
        timeout = self.settings.conflict_lookup_timeout_seconds if timeout is None else timeout
        action_type = AuditActionType(action_type)

        try:
            partnerships, evaluations = self._lookup(mentor_id, company_id, timeout)
        except Exception as e:
            # Unverifiable is never treated as clear
            logger.error(
                "conflict_lookup_failed",
                mentor_id=mentor_id,
                company_id=company_id,
                error=str(e),
                exc_info=True,
            )
            result = self._fail_closed(mentor_id, company_id, action_type, f"Conflict lookup failed: {e}")
        else:
            result = self._evaluate(mentor_id, company_id, action_type, partnerships, evaluations)

        result = self._record(result)
        self._alert(result)

        logger.info(
            "conflict_checked",
            mentor_id=mentor_id,
            company_id=company_id,
            action_type=action_type.value,
            status=result.status.value,
            risk_score=result.risk_score,
            audit_logged=result.audit_logged,
        )
        return result

    def advisory_exclusions(self, mentor_id: str) -> list[str]:
        """Company ids a mentor should not be offered.

        List filtering only; the gate's ``check`` stays authoritative.
        """
        return sorted({
            p.company_id
            for p in self.db.list_partnerships(mentor_id, active_only=True)
            if p.partnership_type in BLOCKING_PARTNERSHIP_TYPES
        })

    # ── internals ─────────────────────────────────────────────────────────────

    def _load_signals(self, mentor_id: str, company_id: str) -> tuple[List[Partnership], List[EvaluationRecord]]:
        partnerships = self.db.list_partnerships(mentor_id, company_id=company_id)
        evaluations = self.db.list_company_evaluations(company_id)
        return partnerships, evaluations

    def _lookup(self, mentor_id: str, company_id: str, timeout: float):
        return call_with_timeout(
            self._load_signals, mentor_id, company_id, timeout=timeout, what="partnership lookup"
        )

    def _evaluate(
        self,
        mentor_id: str,
        company_id: str,
        action_type: AuditActionType,
        partnerships: List[Partnership],
        evaluations: List[EvaluationRecord],
    ) -> ConflictResult:
        reasons = direct_conflicts(partnerships)
        cross_warnings: List[ConflictReason] = []
        if reasons:
            risk_score = 100
        else:
            cross_warnings = cross_validate(
                mentor_id, partnerships, evaluations, self.policy, now=datetime.now(timezone.utc)
            )
            reasons = cross_warnings
            risk_score = min(100, sum(r.weight for r in reasons))

        status = derive_status(reasons, risk_score, self.settings.risk_warning_threshold)
        return ConflictResult(
            mentor_id=mentor_id,
            company_id=company_id,
            action_type=action_type,
            status=status,
            severity=highest_severity(reasons),
            reasons=reasons,
            risk_score=risk_score,
            recommendation=RECOMMENDATIONS[status],
            details={
                "declared_partnerships": [
                    p.model_dump(mode="json") for p in partnerships if p.is_active
                ],
                "cross_validation_warnings": [r.model_dump(mode="json") for r in cross_warnings],
                "evaluations_considered": len(evaluations),
            },
        )

    def _fail_closed(
        self,
        mentor_id: str,
        company_id: str,
        action_type: AuditActionType,
        error: str,
    ) -> ConflictResult:
        reason = ConflictReason(
            type="verification_unavailable",
            message="Conflict of interest could not be verified",
            severity=ConflictSeverity.CRITICAL,
            weight=100,
        )
        return ConflictResult(
            mentor_id=mentor_id,
            company_id=company_id,
            action_type=action_type,
            status=ConflictStatus.BLOCKED,
            severity=ConflictSeverity.CRITICAL,
            reasons=[reason],
            risk_score=100,
            recommendation=RECOMMENDATIONS[ConflictStatus.BLOCKED],
            error=error,
        )

    def _record(self, result: ConflictResult) -> ConflictResult:
        """Write the audit row; a failed write blocks the action."""
        details = {
            "status": result.status.value,
            "risk_score": result.risk_score,
            "reasons": [r.model_dump(mode="json") for r in result.reasons],
            "recommendation": result.recommendation,
            "error": result.error,
        }
        try:
            self.sink.record_conflict_check(
                mentor_id=result.mentor_id,
                company_id=result.company_id,
                action_type=result.action_type,
                severity=result.severity,
                details=details,
            )
        except Exception as e:
            logger.error(
                "conflict_audit_failed",
                mentor_id=result.mentor_id,
                company_id=result.company_id,
                error=str(e),
            )
            blocked = self._fail_closed(
                result.mentor_id, result.company_id, result.action_type,
                f"Audit log unavailable: {e}",
            )
            return blocked.model_copy(update={"reasons": result.reasons + blocked.reasons})
        return result.model_copy(update={"audit_logged": True})

    def _alert(self, result: ConflictResult) -> None:
        if result.status is ConflictStatus.CLEAR:
            return
        if result.error:
            notification_type = NotificationType.AUDIT_REQUIRED
            title = "Conflict check could not be verified"
        elif result.status is ConflictStatus.BLOCKED:
            notification_type = (
                NotificationType.VIOLATION_ATTEMPT
                if result.action_type is AuditActionType.EVALUATION_ATTEMPT
                else NotificationType.CONFLICT_DETECTED
            )
            title = "Conflict of interest blocked an action"
        else:
            notification_type = NotificationType.CONFLICT_DETECTED
            title = "Possible conflict of interest"

        self.sink.notify(
            notification_type=notification_type,
            mentor_id=result.mentor_id,
            company_id=result.company_id,
            severity=result.severity,
            title=title,
            message="; ".join(r.message for r in result.reasons),
            action_required=result.status is ConflictStatus.BLOCKED,
            metadata={"risk_score": result.risk_score, "action_type": result.action_type.value},
        )
