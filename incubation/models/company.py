"""Company and deliverable Pydantic models."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .enums import DeliverableStatus, ProgramStage


class Company(BaseModel):
    """Company as seen by the progression engine."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str = ""
    current_program_key: ProgramStage
    hub_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Deliverable(BaseModel):
    """Deliverable row; read-only to the eligibility checker."""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    company_id: str
    program_key: ProgramStage
    key: str
    label: str = ""
    status: DeliverableStatus = DeliverableStatus.TO_DO
    approval_required: bool = True
    updated_at: Optional[datetime] = None

    @property
    def is_approved(self) -> bool:
        return self.status is DeliverableStatus.APPROVED
