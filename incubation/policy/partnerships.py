"""Partnership declarations.

Declaring or changing a partnership is itself an auditable action: each
change appends an audit row and emits a notification to the administration.
"""
import structlog

from incubation.audit.sink import AuditSink
from incubation.models import (
    AuditActionType,
    BLOCKING_PARTNERSHIP_TYPES,
    ConflictSeverity,
    NotificationType,
    Partnership,
    PartnershipCreate,
)
from incubation.services.database import DatabaseService

logger = structlog.get_logger(__name__)


def _severity_for(partnership: Partnership) -> ConflictSeverity:
    if partnership.is_active and partnership.partnership_type in BLOCKING_PARTNERSHIP_TYPES:
        return ConflictSeverity.WARNING
    return ConflictSeverity.INFO


class PartnershipService:
    def __init__(self, db: DatabaseService, sink: AuditSink):
        self.db = db
        self.sink = sink

    def declare(self, data: PartnershipCreate) -> Partnership:
        partnership = self.db.insert_partnership(data)
        self._record(partnership, AuditActionType.PARTNERSHIP_DECLARED)
        self.sink.notify(
            notification_type=NotificationType.PARTNERSHIP_DECLARED,
            mentor_id=partnership.mentor_id,
            company_id=partnership.company_id,
            severity=_severity_for(partnership),
            title="Partnership declared",
            message=(
                f"Mentor {partnership.mentor_id} declared a "
                f"{partnership.partnership_type.value} relationship with company {partnership.company_id}"
            ),
            metadata={"partnership_id": partnership.id},
        )
        logger.info(
            "partnership_declared",
            partnership_id=partnership.id,
            mentor_id=partnership.mentor_id,
            company_id=partnership.company_id,
            partnership_type=partnership.partnership_type.value,
        )
        return partnership

    def set_active(self, partnership_id: str, is_active: bool) -> Partnership:
        """Reactivate or end a partnership; ending it sets ``end_date``."""
        partnership = self.db.set_partnership_active(partnership_id, is_active)
        self._record(partnership, AuditActionType.PARTNERSHIP_UPDATED)
        logger.info(
            "partnership_updated",
            partnership_id=partnership.id,
            is_active=partnership.is_active,
        )
        return partnership

    def list_for_mentor(self, mentor_id: str, active_only: bool = False) -> list[Partnership]:
        return self.db.list_partnerships(mentor_id, active_only=active_only)

    def _record(self, partnership: Partnership, action_type: AuditActionType):
        details = {"partnership": partnership.model_dump(mode="json")}
        return self.sink.record_conflict_check(
            mentor_id=partnership.mentor_id,
            company_id=partnership.company_id,
            action_type=action_type,
            severity=_severity_for(partnership),
            details=details,
        )
