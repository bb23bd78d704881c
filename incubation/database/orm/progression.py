"""ProgressionEvent ORM model: append-only record of stage advances."""
from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
import uuid

from incubation.database.base import Base
from incubation.database.orm.company import utcnow


class ProgressionEvent(Base):
    __tablename__ = "progression_events"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    company_id: Mapped[str] = mapped_column(String(36), index=True)
    from_stage: Mapped[str] = mapped_column(String(50))
    to_stage: Mapped[str] = mapped_column(String(50))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    # NO updated_at -- events are immutable
