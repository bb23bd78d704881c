"""Program and rubric template ORM models."""
from sqlalchemy import String, Integer, Float, Boolean, DateTime, JSON, Text
from sqlalchemy.orm import Mapped, mapped_column
from typing import Optional
from datetime import datetime

from incubation.database.base import Base
from incubation.database.orm.company import utcnow


class Program(Base):
    """Stage configuration; thresholds and deliverables live in ``config``."""
    __tablename__ = "programs"

    key: Mapped[str] = mapped_column(String(50), primary_key=True)
    label: Mapped[str] = mapped_column(String(255), default="")
    stage_order: Mapped[int] = mapped_column(Integer)
    config: Mapped[dict] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f"<Program(key={self.key}, order={self.stage_order})>"


class RubricTemplate(Base):
    """Evaluation template with weighted criteria."""
    __tablename__ = "evaluation_templates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), default="")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    total_weight: Mapped[float] = mapped_column(Float)
    criteria: Mapped[list] = mapped_column(JSON, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
