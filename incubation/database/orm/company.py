"""Company ORM model."""
from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from typing import Optional
from datetime import datetime, timezone
import uuid

from incubation.database.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Company(Base):
    """Company in the program; owned by program administration."""
    __tablename__ = "companies"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(255), default="")
    current_program_key: Mapped[str] = mapped_column(String(50), index=True)
    hub_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow
    )

    def __repr__(self):
        return f"<Company(id={self.id}, stage={self.current_program_key})>"
