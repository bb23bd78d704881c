"""Tests for the eligibility checker and the advance action."""
import time
from unittest.mock import patch

import pytest
from sqlalchemy import select

from incubation.config import Settings
from incubation.core.exceptions import DependencyUnavailable, EntityNotFound, NotEligible
from incubation.database import orm
from incubation.eligibility import EligibilityService, check_eligibility
from incubation.models import (
    DeliverableStatus,
    Dimension,
    GateValue,
    ProgramStage,
    RequirementStatus,
    ScoringMode,
)
from factories import make_company, make_deliverable, make_evaluation


def _approved(company_id, program):
    return [make_deliverable(company_id, key, program_key=program.key) for key in program.approval_keys()]


def _hint(result, hint_type, key):
    return next(h for h in result.hints if h.type == hint_type and h.key == key)


class TestCheckEligibility:

    def test_scenario_c_deliverable_in_review(self, pre_residencia_program):
        """Score 7.5 over 7.0, dimensions met, gate fine, one deliverable in review."""
        company = make_company()
        evaluation = make_evaluation(company.id, weighted_score=7.5)
        deliverables = [
            make_deliverable(company.id, "mvp"),
            make_deliverable(company.id, "financial_plan", status=DeliverableStatus.IN_REVIEW),
        ]

        result = check_eligibility(company, pre_residencia_program, evaluation, deliverables)

        assert result.eligible is False
        assert result.checks.deliverables_approved is False
        assert result.checks.has_valid_evaluation
        assert result.checks.weighted_score_met
        assert result.checks.dimension_mins_met
        assert result.checks.gate_positive
        assert _hint(result, "deliverable", "financial_plan").status is RequirementStatus.PENDING

    def test_scenario_d_terminal_stage(self, residencia_program):
        company = make_company(stage=ProgramStage.RESIDENCIA)
        evaluation = make_evaluation(company.id, program_key=ProgramStage.RESIDENCIA, weighted_score=8.0)

        result = check_eligibility(company, residencia_program, evaluation, _approved(company.id, residencia_program))

        assert result.eligible is True
        assert result.next_stage is None

    def test_eligible_company_gets_next_stage(self, pre_residencia_program):
        company = make_company()
        evaluation = make_evaluation(company.id)

        result = check_eligibility(company, pre_residencia_program, evaluation, _approved(company.id, pre_residencia_program))

        assert result.eligible
        assert result.next_stage is ProgramStage.RESIDENCIA
        assert result.evaluation_id == evaluation.id
        assert result.needs_attention == 0

    def test_no_evaluation(self, pre_residencia_program):
        company = make_company()

        result = check_eligibility(company, pre_residencia_program, None, _approved(company.id, pre_residencia_program))

        assert not result.eligible
        assert result.checks.has_valid_evaluation is False
        assert result.checks.weighted_score_met is False
        assert result.checks.deliverables_approved is True
        assert _hint(result, "weighted_score", "weighted_score").status is RequirementStatus.NOT_EVALUATED
        assert _hint(result, "gate", "gate").status is RequirementStatus.NOT_EVALUATED

    def test_expired_evaluation_is_not_valid(self, pre_residencia_program):
        company = make_company()
        evaluation = make_evaluation(company.id, days_ago=120)

        result = check_eligibility(company, pre_residencia_program, evaluation, _approved(company.id, pre_residencia_program))

        assert result.checks.has_valid_evaluation is False
        assert result.evaluation_id is None

    def test_evaluation_for_other_stage_is_ignored(self, pre_residencia_program):
        company = make_company()
        evaluation = make_evaluation(company.id, program_key=ProgramStage.HOTEL_DE_PROJETOS)

        result = check_eligibility(company, pre_residencia_program, evaluation, [])

        assert result.checks.has_valid_evaluation is False

    def test_blocking_gate_fails(self, pre_residencia_program):
        company = make_company()
        evaluation = make_evaluation(company.id, gate_value=GateValue.BLOCKING)

        result = check_eligibility(company, pre_residencia_program, evaluation, _approved(company.id, pre_residencia_program))

        assert result.checks.gate_positive is False
        assert not result.eligible

    def test_needs_improvement_gate_does_not_block(self, pre_residencia_program):
        company = make_company()
        evaluation = make_evaluation(company.id, gate_value=GateValue.NEEDS_IMPROVEMENT)

        result = check_eligibility(company, pre_residencia_program, evaluation, _approved(company.id, pre_residencia_program))

        assert result.checks.gate_positive is True

    def test_missing_gate_depends_on_program(self, pre_residencia_program):
        company = make_company()
        evaluation = make_evaluation(company.id, gate_value=None)
        deliverables = _approved(company.id, pre_residencia_program)

        required = check_eligibility(company, pre_residencia_program, evaluation, deliverables)
        optional_program = pre_residencia_program.model_copy(update={"gate_required": False})
        optional = check_eligibility(company, optional_program, evaluation, deliverables)

        assert required.checks.gate_positive is False
        assert optional.checks.gate_positive is True

    def test_dimension_minimum_missed(self, pre_residencia_program):
        company = make_company()
        scores = {d: 8.0 for d in Dimension}
        scores[Dimension.GESTAO] = 5.0
        evaluation = make_evaluation(company.id, dimension_scores=scores)

        result = check_eligibility(company, pre_residencia_program, evaluation, _approved(company.id, pre_residencia_program))

        assert result.checks.dimension_mins_met is False
        hint = _hint(result, "dimension", "gestao")
        assert hint.status is RequirementStatus.NOT_MET
        assert hint.difference == pytest.approx(1.0)

    def test_missing_deliverable_row_is_not_approved(self, pre_residencia_program):
        company = make_company()
        evaluation = make_evaluation(company.id)

        result = check_eligibility(company, pre_residencia_program, evaluation, [make_deliverable(company.id, "mvp")])

        assert result.checks.deliverables_approved is False
        assert _hint(result, "deliverable", "financial_plan").status is RequirementStatus.NOT_EVALUATED

    def test_deliverable_of_another_stage_does_not_count(self, pre_residencia_program):
        company = make_company()
        evaluation = make_evaluation(company.id)
        deliverables = [
            make_deliverable(company.id, key, program_key=ProgramStage.HOTEL_DE_PROJETOS)
            for key in pre_residencia_program.approval_keys()
        ]

        result = check_eligibility(company, pre_residencia_program, evaluation, deliverables)

        assert result.checks.deliverables_approved is False

    def test_optional_deliverables_are_not_required(self, hotel_program):
        company = make_company(stage=ProgramStage.HOTEL_DE_PROJETOS)
        evaluation = make_evaluation(company.id, program_key=ProgramStage.HOTEL_DE_PROJETOS)

        result = check_eligibility(company, hotel_program, evaluation, _approved(company.id, hotel_program))

        assert result.checks.deliverables_approved is True
        assert all(h.key != "team_photo" for h in result.hints)

    def test_template_scores_are_normalized(self, pre_residencia_program):
        company = make_company()
        evaluation = make_evaluation(
            company.id,
            mode=ScoringMode.TEMPLATE,
            weighted_score=72.5,
            criteria_scores={"mercado": 8, "gestao": 7},
        )

        result = check_eligibility(company, pre_residencia_program, evaluation, _approved(company.id, pre_residencia_program))

        assert result.checks.weighted_score_met is True  # 7.25 >= 7.0
        assert result.checks.dimension_mins_met is True

    def test_template_mode_missing_criterion_counts_as_zero(self, pre_residencia_program):
        company = make_company()
        evaluation = make_evaluation(
            company.id, mode=ScoringMode.TEMPLATE, weighted_score=80.0, criteria_scores={"mercado": 8}
        )

        result = check_eligibility(company, pre_residencia_program, evaluation, [])

        assert result.checks.dimension_mins_met is False
        assert _hint(result, "dimension", "gestao").current == 0.0


class TestAtRiskHints:

    def test_at_risk_band_does_not_change_booleans(self, pre_residencia_program):
        company = make_company()
        evaluation = make_evaluation(company.id, weighted_score=6.8)

        result = check_eligibility(company, pre_residencia_program, evaluation, _approved(company.id, pre_residencia_program))

        hint = _hint(result, "weighted_score", "weighted_score")
        assert hint.status is RequirementStatus.AT_RISK
        assert hint.difference == pytest.approx(0.2)
        assert result.checks.weighted_score_met is False
        assert not result.eligible

    def test_weighted_score_outside_band(self, pre_residencia_program):
        company = make_company()
        evaluation = make_evaluation(company.id, weighted_score=6.6)

        result = check_eligibility(company, pre_residencia_program, evaluation, [])

        assert _hint(result, "weighted_score", "weighted_score").status is RequirementStatus.NOT_MET

    def test_dimension_band_is_narrower(self, pre_residencia_program):
        company = make_company()
        scores = {d: 8.0 for d in Dimension}
        scores[Dimension.MERCADO] = 5.8  # 0.2 below the minimum
        scores[Dimension.GESTAO] = 5.7  # 0.3 below the minimum
        evaluation = make_evaluation(company.id, dimension_scores=scores)

        result = check_eligibility(company, pre_residencia_program, evaluation, [])

        assert _hint(result, "dimension", "mercado").status is RequirementStatus.AT_RISK
        assert _hint(result, "dimension", "gestao").status is RequirementStatus.NOT_MET

    def test_in_progress_deliverable_is_at_risk(self, pre_residencia_program):
        company = make_company()
        deliverables = [make_deliverable(company.id, "mvp", status=DeliverableStatus.IN_PROGRESS)]

        result = check_eligibility(company, pre_residencia_program, None, deliverables)

        assert _hint(result, "deliverable", "mvp").status is RequirementStatus.AT_RISK
        assert result.needs_attention >= 1


class TestMaintenance:

    def test_maintenance_thresholds(self, pre_residencia_program, hotel_program):
        company = make_company()
        low = make_evaluation(company.id, weighted_score=4.5)
        ok = make_evaluation(company.id, weighted_score=5.5)

        assert check_eligibility(company, pre_residencia_program, low, []).maintenance_met is False
        assert check_eligibility(company, pre_residencia_program, ok, []).maintenance_met is True

        hotel_company = make_company(stage=ProgramStage.HOTEL_DE_PROJETOS)
        hotel_eval = make_evaluation(hotel_company.id, program_key=ProgramStage.HOTEL_DE_PROJETOS)
        assert check_eligibility(hotel_company, hotel_program, hotel_eval, []).maintenance_met is None


class TestIdempotence:

    def test_same_inputs_same_result(self, pre_residencia_program):
        company = make_company()
        evaluation = make_evaluation(company.id)
        deliverables = _approved(company.id, pre_residencia_program)

        first = check_eligibility(company, pre_residencia_program, evaluation, deliverables, now=evaluation.evaluation_date)
        second = check_eligibility(company, pre_residencia_program, evaluation, deliverables, now=evaluation.evaluation_date)

        assert first == second


# ── service (SQLite) ──────────────────────────────────────────────────────────


@pytest.fixture
def service(sqlite_db, config_store, seeded_programs):
    return EligibilityService(sqlite_db, config_store)


@pytest.fixture
def eligible_company(sqlite_db, pre_residencia_program):
    company = sqlite_db.insert_company(make_company())
    sqlite_db.insert_evaluation(make_evaluation(company.id))
    for deliverable in _approved(company.id, pre_residencia_program):
        sqlite_db.insert_deliverable(deliverable)
    return company


class TestEligibilityService:

    def test_check_loads_from_storage(self, service, eligible_company):
        result = service.check(eligible_company.id)
        assert result.eligible
        assert result.program_key is ProgramStage.PRE_RESIDENCIA

    def test_unknown_company(self, service):
        with pytest.raises(EntityNotFound):
            service.check("missing")

    def test_storage_failure_surfaces(self, mock_db, config_store):
        mock_db.get_company.side_effect = DependencyUnavailable("down")
        with pytest.raises(DependencyUnavailable):
            EligibilityService(mock_db, config_store).check("c1")

    def test_advance_moves_stage_and_seeds_deliverables(self, service, sqlite_db, eligible_company):
        result = service.advance_company(eligible_company.id, ProgramStage.PRE_RESIDENCIA)

        assert result.advanced is True
        assert result.current_stage is ProgramStage.RESIDENCIA
        assert result.created_deliverables == ["final_report"]
        assert sqlite_db.get_company(eligible_company.id).current_program_key is ProgramStage.RESIDENCIA

        seeded = sqlite_db.list_deliverables(eligible_company.id, ProgramStage.RESIDENCIA)
        assert [d.status for d in seeded] == [DeliverableStatus.TO_DO]
        with sqlite_db.session() as s:
            events = s.scalars(select(orm.ProgressionEvent)).all()
            assert [(e.from_stage, e.to_stage) for e in events] == [("pre_residencia", "residencia")]

    def test_second_advance_is_a_no_op(self, service, sqlite_db, eligible_company):
        service.advance_company(eligible_company.id, ProgramStage.PRE_RESIDENCIA)
        again = service.advance_company(eligible_company.id, ProgramStage.PRE_RESIDENCIA)

        assert again.advanced is False
        assert again.current_stage is ProgramStage.RESIDENCIA
        with sqlite_db.session() as s:
            assert len(s.scalars(select(orm.ProgressionEvent)).all()) == 1

    def test_advance_from_terminal_stage_is_a_no_op(self, service, sqlite_db):
        company = sqlite_db.insert_company(make_company(stage=ProgramStage.RESIDENCIA))
        result = service.advance_company(company.id, ProgramStage.RESIDENCIA)
        assert result.advanced is False
        assert result.current_stage is ProgramStage.RESIDENCIA

    def test_advance_not_eligible(self, service, sqlite_db):
        company = sqlite_db.insert_company(make_company())

        with pytest.raises(NotEligible) as exc_info:
            service.advance_company(company.id, ProgramStage.PRE_RESIDENCIA)

        assert "has_valid_evaluation" in exc_info.value.details["failed_checks"]
        assert sqlite_db.get_company(company.id).current_program_key is ProgramStage.PRE_RESIDENCIA

    def test_advance_keeps_existing_deliverables(self, service, sqlite_db, eligible_company):
        sqlite_db.insert_deliverable(make_deliverable(
            eligible_company.id, "final_report",
            status=DeliverableStatus.IN_PROGRESS, program_key=ProgramStage.RESIDENCIA,
        ))

        result = service.advance_company(eligible_company.id, ProgramStage.PRE_RESIDENCIA)

        assert result.created_deliverables == []
        seeded = sqlite_db.list_deliverables(eligible_company.id, ProgramStage.RESIDENCIA)
        assert [d.status for d in seeded] == [DeliverableStatus.IN_PROGRESS]


def _slow(result=None, delay=0.5):
    def call(*args, **kwargs):
        time.sleep(delay)
        return result
    return call


class TestEligibilityServiceTimeouts:

    def test_slow_deliverable_lookup_times_out(self, service, sqlite_db, eligible_company):
        with patch.object(sqlite_db, "list_deliverables", side_effect=_slow([])):
            with pytest.raises(DependencyUnavailable) as exc_info:
                service.check(eligible_company.id, timeout=0.05)

        assert "timed out" in exc_info.value.message
        assert exc_info.value.details["timeout"] == 0.05

    def test_default_timeout_comes_from_settings(self, sqlite_db, config_store, seeded_programs, eligible_company):
        service = EligibilityService(sqlite_db, config_store, settings=Settings(storage_timeout_seconds=0.05))
        with patch.object(sqlite_db, "list_deliverables", side_effect=_slow([])):
            with pytest.raises(DependencyUnavailable):
                service.check(eligible_company.id)

    def test_fast_storage_within_timeout(self, service, eligible_company):
        assert service.check(eligible_company.id, timeout=5).eligible

    def test_slow_stage_update_times_out(self, service, sqlite_db, eligible_company):
        with patch.object(sqlite_db, "advance_company_stage", side_effect=_slow((True, []))):
            with pytest.raises(DependencyUnavailable) as exc_info:
                service.advance_company(eligible_company.id, ProgramStage.PRE_RESIDENCIA, timeout=0.05)

        assert "stage update" in exc_info.value.message
