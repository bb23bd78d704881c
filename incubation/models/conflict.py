"""Conflict-of-interest Pydantic models."""
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import (
    AuditActionType,
    ConflictSeverity,
    ConflictStatus,
    NotificationType,
    PartnershipType,
)


class Partnership(BaseModel):
    """Declared mentor/company relationship."""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    mentor_id: str
    company_id: str
    partnership_type: PartnershipType
    is_active: bool = True
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    description: Optional[str] = None


class PartnershipCreate(BaseModel):
    """Model for declaring a partnership."""
    mentor_id: str = Field(..., min_length=1)
    company_id: str = Field(..., min_length=1)
    partnership_type: PartnershipType
    description: Optional[str] = None


class PartnershipStatusUpdate(BaseModel):
    is_active: bool


class ConflictReason(BaseModel):
    """One finding of the conflict gate."""
    type: str
    message: str
    severity: ConflictSeverity
    weight: int = 0
    partnership_type: Optional[PartnershipType] = None


class ConflictCheckRequest(BaseModel):
    mentor_id: str = Field(..., min_length=1)
    company_id: str = Field(..., min_length=1)
    action_type: AuditActionType = AuditActionType.EVALUATION_ATTEMPT


class ConflictResult(BaseModel):
    """Gate verdict. ``blocked`` is a business outcome, not an error."""
    mentor_id: str
    company_id: str
    action_type: AuditActionType
    status: ConflictStatus
    severity: ConflictSeverity
    reasons: list[ConflictReason] = Field(default_factory=list)
    risk_score: int = Field(0, ge=0, le=100)
    recommendation: str
    audit_logged: bool = False
    error: Optional[str] = None
    details: dict[str, Any] = Field(default_factory=dict)
    checked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def conflict_detected(self) -> bool:
        return self.status is not ConflictStatus.CLEAR

    @property
    def is_blocked(self) -> bool:
        return self.status is ConflictStatus.BLOCKED


class ConflictAuditEntry(BaseModel):
    """Append-only audit row; one per conflict check."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    mentor_id: str
    company_id: str
    action_type: AuditActionType
    severity: ConflictSeverity
    details: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class Notification(BaseModel):
    """Side-channel alert about a conflict incident."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    notification_type: NotificationType
    mentor_id: str
    company_id: str
    severity: ConflictSeverity
    title: str
    message: str
    action_required: bool = False
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
