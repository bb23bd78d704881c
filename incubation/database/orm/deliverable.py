"""Deliverable ORM model."""
from sqlalchemy import String, Boolean, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
import uuid

from incubation.database.base import Base
from incubation.database.orm.company import utcnow


class Deliverable(Base):
    """Deliverable of a company within one stage."""
    __tablename__ = "deliverables"
    __table_args__ = (
        UniqueConstraint("company_id", "program_key", "deliverable_key"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    company_id: Mapped[str] = mapped_column(String(36), index=True)
    program_key: Mapped[str] = mapped_column(String(50))
    deliverable_key: Mapped[str] = mapped_column(String(100))
    deliverable_label: Mapped[str] = mapped_column(String(255), default="")
    status: Mapped[str] = mapped_column(String(20), default="to_do")
    approval_required: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow
    )
