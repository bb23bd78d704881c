"""SQLAlchemy ORM models for the incubation progression engine."""
from incubation.database.base import Base
from incubation.database.orm.company import Company
from incubation.database.orm.program import Program, RubricTemplate
from incubation.database.orm.evaluation import Evaluation
from incubation.database.orm.deliverable import Deliverable
from incubation.database.orm.conflict import (
    Partnership,
    ConflictAuditLog,
    ConflictNotification,
)
from incubation.database.orm.progression import ProgressionEvent

__all__ = [
    "Base",
    "Company",
    "Program",
    "RubricTemplate",
    "Evaluation",
    "Deliverable",
    "Partnership",
    "ConflictAuditLog",
    "ConflictNotification",
    "ProgressionEvent",
]
