"""Pytest fixtures and configuration."""
import pytest
from contextlib import ExitStack
from uuid import uuid4
from fastapi.testclient import TestClient
from unittest.mock import MagicMock, AsyncMock, patch
import fakeredis

from incubation.audit import AuditSink
from incubation.database.connection import build_engine
from incubation.models import (
    Criterion,
    Dimension,
    ProgramConfig,
    ProgramStage,
    RequiredDeliverable,
    RubricTemplate,
    Thresholds,
)
from incubation.services import ConfigStore, DatabaseService, RedisCache


@pytest.fixture
def mock_db():
    """Mock database service."""
    mock = MagicMock()
    mock.health_check = AsyncMock(return_value=(True, None))
    mock.list_partnerships = MagicMock(return_value=[])
    mock.list_company_evaluations = MagicMock(return_value=[])
    mock.insert_audit_log = MagicMock()
    mock.insert_notification = MagicMock()
    return mock


@pytest.fixture
def mock_redis():
    """Mock Redis service."""
    mock = MagicMock()
    mock.health_check = AsyncMock(return_value=(True, None))
    mock.get = MagicMock(return_value=None)
    mock.set = MagicMock(return_value=True)
    mock.delete = MagicMock(return_value=True)
    return mock


@pytest.fixture
def redis_cache():
    """RedisCache backed by fakeredis."""
    return RedisCache(client=fakeredis.FakeRedis(decode_responses=True))


@pytest.fixture
def sqlite_db():
    """DatabaseService on a fresh in-memory SQLite database."""
    db = DatabaseService(engine=build_engine("sqlite://"))
    db.create_tables()
    yield db
    db.engine.dispose()


@pytest.fixture
def config_store(sqlite_db, redis_cache):
    return ConfigStore(sqlite_db, redis_cache)


@pytest.fixture
def sink(sqlite_db):
    return AuditSink(sqlite_db)


# ── program configuration ─────────────────────────────────────────────────────

@pytest.fixture
def hotel_program():
    return ProgramConfig(
        key=ProgramStage.HOTEL_DE_PROJETOS,
        label="Hotel de Projetos",
        passage_thresholds=Thresholds(
            weighted_score_min=6.0,
            dimension_mins={"mercado": 5.0, "perfil_empreendedor": 5.0},
        ),
        required_deliverables=[
            RequiredDeliverable(key="business_model_canvas", label="Business Model Canvas"),
            RequiredDeliverable(key="pitch_deck", label="Pitch Deck"),
            RequiredDeliverable(key="team_photo", label="Team photo", approval_required=False),
        ],
    )


@pytest.fixture
def pre_residencia_program():
    return ProgramConfig(
        key=ProgramStage.PRE_RESIDENCIA,
        label="Pré-Residência",
        passage_thresholds=Thresholds(
            weighted_score_min=7.0,
            dimension_mins={"mercado": 6.0, "gestao": 6.0},
        ),
        maintenance_thresholds=Thresholds(weighted_score_min=5.0),
        required_deliverables=[
            RequiredDeliverable(key="mvp", label="MVP"),
            RequiredDeliverable(key="financial_plan", label="Financial plan"),
        ],
    )


@pytest.fixture
def residencia_program():
    return ProgramConfig(
        key=ProgramStage.RESIDENCIA,
        label="Residência",
        passage_thresholds=Thresholds(weighted_score_min=7.5),
        required_deliverables=[RequiredDeliverable(key="final_report", label="Final report")],
    )


@pytest.fixture
def seeded_programs(config_store, hotel_program, pre_residencia_program, residencia_program):
    for program in (hotel_program, pre_residencia_program, residencia_program):
        config_store.save_program(program)
    return {
        p.key: p for p in (hotel_program, pre_residencia_program, residencia_program)
    }


@pytest.fixture
def sample_template():
    return RubricTemplate(
        id="pitch-template",
        name="Pitch evaluation",
        total_weight=100.0,
        criteria=[
            Criterion(id="mercado", name="Market", weight=40, max_score=10,
                      rubric={0: "Absent", 5: "Partial", 10: "Complete"}),
            Criterion(id="equipe", name="Team", weight=35, max_score=5),
            Criterion(id="produto", name="Product", weight=25, max_score=20),
        ],
    )


# ── sample entities ───────────────────────────────────────────────────────────

@pytest.fixture
def sample_company_id():
    return str(uuid4())


@pytest.fixture
def sample_mentor_id():
    return str(uuid4())


@pytest.fixture
def scenario_a_scores():
    return {
        Dimension.MERCADO: 8,
        Dimension.PERFIL_EMPREENDEDOR: 7,
        Dimension.TECNOLOGIA_QUALIDADE: 6,
        Dimension.GESTAO: 7,
        Dimension.FINANCEIRO: 8,
    }


@pytest.fixture
def client(sqlite_db, config_store, redis_cache):
    """Test client wired to SQLite and fakeredis."""
    targets = [
        ("incubation.routers.health.get_database_service", sqlite_db),
        ("incubation.routers.health.get_redis_cache", redis_cache),
        ("incubation.routers.scoring.get_config_store", config_store),
        ("incubation.routers.evaluations.get_database_service", sqlite_db),
        ("incubation.routers.evaluations.get_config_store", config_store),
        ("incubation.routers.conflicts.get_database_service", sqlite_db),
        ("incubation.routers.eligibility.get_database_service", sqlite_db),
        ("incubation.routers.eligibility.get_config_store", config_store),
    ]
    with ExitStack() as stack:
        for target, value in targets:
            stack.enter_context(patch(target, return_value=value))
        from incubation.main import app
        yield TestClient(app)
