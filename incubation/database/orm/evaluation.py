"""Evaluation ORM model."""
from sqlalchemy import String, Float, Boolean, DateTime, JSON, Text, Index
from sqlalchemy.orm import Mapped, mapped_column
from typing import Optional
from datetime import datetime
import uuid

from incubation.database.base import Base
from incubation.database.orm.company import utcnow


class Evaluation(Base):
    """One row per mentor submission."""
    __tablename__ = "evaluations"
    __table_args__ = (
        Index("ix_evaluations_company_program_valid", "company_id", "program_key", "is_valid"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    company_id: Mapped[str] = mapped_column(String(36))
    mentor_id: Mapped[str] = mapped_column(String(36), index=True)
    program_key: Mapped[str] = mapped_column(String(50))
    mode: Mapped[str] = mapped_column(String(20), default="dimension")

    # Fixed-dimension mode
    mercado_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    perfil_empreendedor_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    tecnologia_qualidade_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    gestao_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    financeiro_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # Template mode
    template_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    criteria_scores: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    weighted_score: Mapped[float] = mapped_column(Float)
    gate_value: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    evaluation_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    is_valid: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f"<Evaluation(id={self.id}, company_id={self.company_id}, score={self.weighted_score})>"
