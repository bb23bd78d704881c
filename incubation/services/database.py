"""Database service: the storage collaborator behind the engine."""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Generator, Optional

from sqlalchemy import select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from incubation.config import get_settings
from incubation.core.exceptions import DependencyUnavailable, EntityNotFound
from incubation.database import orm
from incubation.database.connection import build_engine, get_engine, make_session_factory
from incubation.models import (
    Company,
    ConflictAuditEntry,
    Deliverable,
    Dimension,
    EvaluationRecord,
    Notification,
    Partnership,
    PartnershipCreate,
    ProgramConfig,
    ProgramStage,
    RequiredDeliverable,
    RubricTemplate,
    ScoringMode,
)

logger = logging.getLogger(__name__)


def _dimension_column(dim: Dimension) -> str:
    return f"{dim.value}_score"


def _to_evaluation(row: orm.Evaluation) -> EvaluationRecord:
    dimension_scores = None
    if row.mode == ScoringMode.DIMENSION.value:
        dimension_scores = {
            dim: getattr(row, _dimension_column(dim))
            for dim in Dimension
            if getattr(row, _dimension_column(dim)) is not None
        }
    return EvaluationRecord(
        id=row.id,
        company_id=row.company_id,
        mentor_id=row.mentor_id,
        program_key=row.program_key,
        mode=row.mode,
        dimension_scores=dimension_scores,
        template_id=row.template_id,
        criteria_scores=row.criteria_scores,
        weighted_score=row.weighted_score,
        gate_value=row.gate_value,
        notes=row.notes,
        evaluation_date=row.evaluation_date,
        expires_at=row.expires_at,
        is_valid=row.is_valid,
    )


def _to_deliverable(row: orm.Deliverable) -> Deliverable:
    return Deliverable(
        id=row.id,
        company_id=row.company_id,
        program_key=row.program_key,
        key=row.deliverable_key,
        label=row.deliverable_label,
        status=row.status,
        approval_required=row.approval_required,
        updated_at=row.updated_at,
    )


def _to_notification(row: orm.ConflictNotification) -> Notification:
    return Notification(
        id=row.id,
        notification_type=row.notification_type,
        mentor_id=row.mentor_id,
        company_id=row.company_id,
        severity=row.severity,
        title=row.title,
        message=row.message,
        action_required=row.action_required,
        metadata=row.extra or {},
        created_at=row.created_at,
    )


class DatabaseService:
    """Service for relational storage operations."""

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None):
        if engine is None:
            engine = build_engine(database_url, echo=get_settings().debug) if database_url else get_engine()
        self.engine = engine
        self._session_factory = make_session_factory(self.engine)

    def create_tables(self) -> None:
        """Create all tables (development and tests; production uses Alembic)."""
        orm.Base.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Context manager for a unit of work; storage errors become DependencyUnavailable."""
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error: {e}")
            raise DependencyUnavailable(f"Storage unavailable: {e}") from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    async def health_check(self) -> tuple[bool, Optional[str]]:
        """Check if the database connection is healthy."""
        try:
            with self.session() as db:
                result = db.execute(text("SELECT 1")).scalar()
                return result is not None, None
        except Exception as e:
            return False, str(e)

    # ================================================================
    # Companies and programs
    # ================================================================

    def insert_company(self, company: Company) -> Company:
        with self.session() as db:
            row = orm.Company(
                id=company.id,
                name=company.name,
                current_program_key=company.current_program_key.value,
                hub_id=company.hub_id,
            )
            db.add(row)
            db.flush()
            return Company.model_validate(row)

    def get_company(self, company_id: str) -> Company:
        with self.session() as db:
            row = db.get(orm.Company, company_id)
            if row is None:
                raise EntityNotFound("Company", company_id)
            return Company.model_validate(row)

    def save_program(self, program: ProgramConfig) -> ProgramConfig:
        """Insert or replace a program configuration."""
        config = program.model_dump(
            mode="json",
            include={"passage_thresholds", "maintenance_thresholds", "gate_required", "required_deliverables"},
        )
        with self.session() as db:
            row = db.get(orm.Program, program.key.value)
            if row is None:
                row = orm.Program(key=program.key.value)
                db.add(row)
            row.label = program.label
            row.stage_order = program.stage_order
            row.config = config
        return program

    def get_program(self, program_key: ProgramStage) -> ProgramConfig:
        key = ProgramStage(program_key).value
        with self.session() as db:
            row = db.get(orm.Program, key)
            if row is None:
                raise EntityNotFound("Program", key)
            return ProgramConfig(key=row.key, label=row.label, **(row.config or {}))

    # ================================================================
    # Rubric templates
    # ================================================================

    def save_template(self, template: RubricTemplate) -> RubricTemplate:
        with self.session() as db:
            row = db.get(orm.RubricTemplate, template.id)
            if row is None:
                row = orm.RubricTemplate(id=template.id)
                db.add(row)
            row.name = template.name
            row.description = template.description
            row.total_weight = template.total_weight
            row.criteria = [c.model_dump(mode="json") for c in template.criteria]
            row.is_active = template.is_active
        return template

    def get_template(self, template_id: str) -> RubricTemplate:
        with self.session() as db:
            row = db.get(orm.RubricTemplate, template_id)
            if row is None:
                raise EntityNotFound("RubricTemplate", template_id)
            return RubricTemplate.model_validate(row)

    # ================================================================
    # Partnerships
    # ================================================================

    def list_partnerships(
        self,
        mentor_id: str,
        company_id: Optional[str] = None,
        active_only: bool = False,
    ) -> list[Partnership]:
        """Partnerships declared by a mentor, newest first."""
        with self.session() as db:
            stmt = select(orm.Partnership).where(orm.Partnership.mentor_id == mentor_id)
            if company_id is not None:
                stmt = stmt.where(orm.Partnership.company_id == company_id)
            if active_only:
                stmt = stmt.where(orm.Partnership.is_active.is_(True))
            stmt = stmt.order_by(orm.Partnership.created_at.desc())
            return [Partnership.model_validate(r) for r in db.scalars(stmt)]

    def insert_partnership(self, data: PartnershipCreate) -> Partnership:
        with self.session() as db:
            row = orm.Partnership(
                mentor_id=data.mentor_id,
                company_id=data.company_id,
                partnership_type=data.partnership_type.value,
                description=data.description,
                is_active=True,
                start_date=datetime.now(timezone.utc),
            )
            db.add(row)
            db.flush()
            return Partnership.model_validate(row)

    def set_partnership_active(self, partnership_id: str, is_active: bool) -> Partnership:
        with self.session() as db:
            row = db.get(orm.Partnership, partnership_id)
            if row is None:
                raise EntityNotFound("Partnership", partnership_id)
            row.is_active = is_active
            row.end_date = None if is_active else datetime.now(timezone.utc)
            db.flush()
            return Partnership.model_validate(row)

    # ================================================================
    # Evaluations
    # ================================================================

    def list_company_evaluations(self, company_id: str) -> list[EvaluationRecord]:
        """Every evaluation of a company, including superseded ones."""
        with self.session() as db:
            stmt = (
                select(orm.Evaluation)
                .where(orm.Evaluation.company_id == company_id)
                .order_by(orm.Evaluation.evaluation_date.desc())
            )
            return [_to_evaluation(r) for r in db.scalars(stmt)]

    def get_latest_valid_evaluation(
        self,
        company_id: str,
        program_key: ProgramStage,
        now: Optional[datetime] = None,
    ) -> Optional[EvaluationRecord]:
        """The single authoritative evaluation for a company/program pair."""
        now = now or datetime.now(timezone.utc)
        with self.session() as db:
            stmt = (
                select(orm.Evaluation)
                .where(
                    orm.Evaluation.company_id == company_id,
                    orm.Evaluation.program_key == ProgramStage(program_key).value,
                    orm.Evaluation.is_valid.is_(True),
                )
                .order_by(orm.Evaluation.evaluation_date.desc())
            )
            for row in db.scalars(stmt):
                record = _to_evaluation(row)
                if record.is_current(now):
                    return record
            return None

    def insert_evaluation(self, record: EvaluationRecord) -> EvaluationRecord:
        """Persist a new valid evaluation, superseding earlier valid ones."""
        with self.session() as db:
            db.execute(
                update(orm.Evaluation)
                .where(
                    orm.Evaluation.company_id == record.company_id,
                    orm.Evaluation.program_key == record.program_key.value,
                    orm.Evaluation.is_valid.is_(True),
                )
                .values(is_valid=False)
            )
            row = orm.Evaluation(
                id=record.id,
                company_id=record.company_id,
                mentor_id=record.mentor_id,
                program_key=record.program_key.value,
                mode=record.mode.value,
                template_id=record.template_id,
                criteria_scores=record.criteria_scores,
                weighted_score=record.weighted_score,
                gate_value=record.gate_value.value if record.gate_value else None,
                notes=record.notes,
                evaluation_date=record.evaluation_date,
                expires_at=record.expires_at,
                is_valid=record.is_valid,
            )
            for dim, value in (record.dimension_scores or {}).items():
                setattr(row, _dimension_column(Dimension(dim)), value)
            db.add(row)
        return record

    # ================================================================
    # Deliverables and stage advance
    # ================================================================

    def list_deliverables(self, company_id: str, program_key: ProgramStage) -> list[Deliverable]:
        with self.session() as db:
            stmt = select(orm.Deliverable).where(
                orm.Deliverable.company_id == company_id,
                orm.Deliverable.program_key == ProgramStage(program_key).value,
            )
            return [_to_deliverable(r) for r in db.scalars(stmt)]

    def insert_deliverable(self, deliverable: Deliverable) -> Deliverable:
        with self.session() as db:
            row = orm.Deliverable(
                company_id=deliverable.company_id,
                program_key=deliverable.program_key.value,
                deliverable_key=deliverable.key,
                deliverable_label=deliverable.label,
                status=deliverable.status.value,
                approval_required=deliverable.approval_required,
            )
            db.add(row)
            db.flush()
            return _to_deliverable(row)

    def advance_company_stage(
        self,
        company_id: str,
        from_stage: ProgramStage,
        to_stage: ProgramStage,
        deliverables: list[RequiredDeliverable],
    ) -> tuple[bool, list[str]]:
        """Compare-and-set the company stage and seed the new stage's deliverables.

        Returns ``(False, [])`` when the company is no longer at ``from_stage``.
        """
        with self.session() as db:
            result = db.execute(
                update(orm.Company)
                .where(
                    orm.Company.id == company_id,
                    orm.Company.current_program_key == from_stage.value,
                )
                .values(current_program_key=to_stage.value, updated_at=datetime.now(timezone.utc))
            )
            if result.rowcount == 0:
                return False, []

            existing = set(db.scalars(
                select(orm.Deliverable.deliverable_key).where(
                    orm.Deliverable.company_id == company_id,
                    orm.Deliverable.program_key == to_stage.value,
                )
            ))
            created: list[str] = []
            for d in deliverables:
                if d.key in existing:
                    continue
                db.add(orm.Deliverable(
                    company_id=company_id,
                    program_key=to_stage.value,
                    deliverable_key=d.key,
                    deliverable_label=d.label,
                    status="to_do",
                    approval_required=d.approval_required,
                ))
                created.append(d.key)

            db.add(orm.ProgressionEvent(
                company_id=company_id,
                from_stage=from_stage.value,
                to_stage=to_stage.value,
            ))
            return True, created

    # ================================================================
    # Audit log and notifications (append-only)
    # ================================================================

    def insert_audit_log(
        self,
        mentor_id: str,
        company_id: str,
        action_type: str,
        severity: str,
        details: dict[str, Any],
    ) -> ConflictAuditEntry:
        with self.session() as db:
            row = orm.ConflictAuditLog(
                mentor_id=mentor_id,
                company_id=company_id,
                action_type=action_type,
                severity=severity,
                details=details,
            )
            db.add(row)
            db.flush()
            return ConflictAuditEntry.model_validate(row)

    def list_audit_logs(
        self,
        mentor_id: Optional[str] = None,
        company_id: Optional[str] = None,
        limit: int = 50,
    ) -> list[ConflictAuditEntry]:
        with self.session() as db:
            stmt = select(orm.ConflictAuditLog)
            if mentor_id:
                stmt = stmt.where(orm.ConflictAuditLog.mentor_id == mentor_id)
            if company_id:
                stmt = stmt.where(orm.ConflictAuditLog.company_id == company_id)
            stmt = stmt.order_by(orm.ConflictAuditLog.created_at.desc()).limit(limit)
            return [ConflictAuditEntry.model_validate(r) for r in db.scalars(stmt)]

    def insert_notification(
        self,
        notification_type: str,
        mentor_id: str,
        company_id: str,
        severity: str,
        title: str,
        message: str,
        action_required: bool,
        metadata: dict[str, Any],
    ) -> Notification:
        with self.session() as db:
            row = orm.ConflictNotification(
                notification_type=notification_type,
                mentor_id=mentor_id,
                company_id=company_id,
                severity=severity,
                title=title,
                message=message,
                action_required=action_required,
                extra=metadata,
            )
            db.add(row)
            db.flush()
            return _to_notification(row)
