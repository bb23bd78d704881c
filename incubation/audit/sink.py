"""Audit/notification sink.

Every conflict check writes exactly one audit row. Notifications are a side
channel: a failed notification is logged and never changes a verdict.
"""
from typing import Any, Optional

import structlog

from incubation.core.exceptions import DependencyUnavailable
from incubation.models import (
    AuditActionType,
    ConflictAuditEntry,
    ConflictSeverity,
    Notification,
    NotificationType,
)
from incubation.services.database import DatabaseService

logger = structlog.get_logger(__name__)


class AuditSink:
    """Writes policy decisions and alerts through the storage service."""

    def __init__(self, db: DatabaseService):
        self.db = db

    def record_conflict_check(
        self,
        mentor_id: str,
        company_id: str,
        action_type: AuditActionType,
        severity: ConflictSeverity,
        details: dict[str, Any],
    ) -> ConflictAuditEntry:
        """Append one audit row; storage failures propagate to the caller."""
        entry = self.db.insert_audit_log(
            mentor_id=mentor_id,
            company_id=company_id,
            action_type=AuditActionType(action_type).value,
            severity=ConflictSeverity(severity).value,
            details=details,
        )
        logger.info(
            "conflict_audit_recorded",
            audit_id=entry.id,
            mentor_id=mentor_id,
            company_id=company_id,
            action_type=entry.action_type.value,
            severity=entry.severity.value,
            status=details.get("status"),
        )
        return entry

    def notify(
        self,
        notification_type: NotificationType,
        mentor_id: str,
        company_id: str,
        severity: ConflictSeverity,
        title: str,
        message: str,
        action_required: bool = False,
        metadata: Optional[dict[str, Any]] = None,
    ) -> Optional[Notification]:
        try:
            notification = self.db.insert_notification(
                notification_type=NotificationType(notification_type).value,
                mentor_id=mentor_id,
                company_id=company_id,
                severity=ConflictSeverity(severity).value,
                title=title,
                message=message,
                action_required=action_required,
                metadata=metadata or {},
            )
        except DependencyUnavailable as e:
            logger.warning(
                "conflict_notification_failed",
                notification_type=NotificationType(notification_type).value,
                mentor_id=mentor_id,
                company_id=company_id,
                error=str(e),
            )
            return None

        logger.info(
            "conflict_notification_sent",
            notification_id=notification.id,
            notification_type=notification.notification_type.value,
            severity=notification.severity.value,
        )
        return notification

    def list_conflict_logs(
        self,
        mentor_id: Optional[str] = None,
        company_id: Optional[str] = None,
        limit: int = 50,
    ) -> list[ConflictAuditEntry]:
        return self.db.list_audit_logs(mentor_id=mentor_id, company_id=company_id, limit=limit)
