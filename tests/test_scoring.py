"""Tests for the scoring engine."""
from decimal import Decimal

import pytest

from incubation.core.exceptions import (
    ConfigurationError,
    IncompleteSubmission,
    InvalidRubric,
    ScoreOutOfRange,
)
from incubation.models import Criterion, Dimension, RubricTemplate, ScoreRequest, ScoringMode
from incubation.scoring import ScoringEngine, validate_dimension_scores
from incubation.scoring.dimension_scorer import DimensionScorer
from incubation.scoring.template_scorer import TemplateScorer
from incubation.scoring.utils import clamp, mean, round_half_up, to_decimal, weighted_sum


class TestDecimalUtils:

    def test_round_half_up_rounds_halves_away_from_zero(self):
        assert round_half_up(Decimal("7.25")) == Decimal("7.3")
        assert round_half_up(Decimal("6.95")) == Decimal("7.0")
        assert round_half_up(Decimal("7.24")) == Decimal("7.2")

    def test_to_decimal_precision(self):
        assert to_decimal(0.1 + 0.2) == Decimal("0.3000")
        assert to_decimal(1.23456, places=2) == Decimal("1.23")

    def test_clamp(self):
        assert clamp(Decimal("11")) == Decimal(10)
        assert clamp(Decimal("-1")) == Decimal(0)

    def test_weighted_sum_length_mismatch(self):
        with pytest.raises(ValueError):
            weighted_sum([Decimal(1)], [])

    def test_mean_of_empty_list_is_zero(self):
        assert mean([]) == Decimal(0)


class TestDimensionScorer:

    def test_scenario_a(self, scenario_a_scores):
        """8·.28 + 7·.21 + 6·.14 + 7·.16 + 8·.16 = 6.95, shown as 7.0."""
        result = DimensionScorer().calculate(scenario_a_scores)
        assert result.raw_score == Decimal("6.9500")
        assert result.weighted_score == Decimal("7.0")

    def test_contributions_sum_to_raw_score(self, scenario_a_scores):
        result = DimensionScorer().calculate(scenario_a_scores)
        assert sum(result.dimension_contributions.values()) == result.raw_score
        assert result.dimension_contributions["mercado"] == Decimal("2.24")

    def test_missing_dimension_counts_as_zero(self):
        result = DimensionScorer().calculate({"mercado": 10})
        assert result.weighted_score == Decimal("2.8")
        assert result.dimension_scores["financeiro"] == Decimal(0)

    def test_accepts_string_keys(self):
        scores = {d.value: 10 for d in Dimension}
        assert DimensionScorer().calculate(scores).weighted_score == Decimal("9.5")

    def test_scores_are_clamped(self):
        result = DimensionScorer().calculate({d: 15 for d in Dimension})
        assert result.raw_score == Decimal("9.5000")


class TestTemplateScorer:

    def test_weighted_percentage(self, sample_template):
        # 8/10·40 + 4/5·35 + 10/20·25 = 32 + 28 + 12.5 = 72.5 of 100
        result = TemplateScorer().calculate(
            sample_template, {"mercado": 8, "equipe": 4, "produto": 10}
        )
        assert result.weighted_score == Decimal("72.5")
        assert result.criterion_contributions["equipe"] == Decimal("28.0000")

    def test_maximum_scores_give_100(self, sample_template):
        result = TemplateScorer().calculate(
            sample_template, {"mercado": 10, "equipe": 5, "produto": 20}
        )
        assert result.weighted_score == Decimal("100.0")

    def test_total_weight_other_than_100(self):
        template = RubricTemplate(
            id="t",
            total_weight=1.0,
            criteria=[
                Criterion(id="a", weight=0.5, max_score=10),
                Criterion(id="b", weight=0.5, max_score=10),
            ],
        )
        result = TemplateScorer().calculate(template, {"a": 10, "b": 5})
        assert result.weighted_score == Decimal("75.0")

    def test_rounds_once_from_the_exact_total(self):
        # 0.5 · 2489.6/10000 = 0.12448 of the total: 12.448 rounds to 12.4, not 12.5
        template = RubricTemplate(
            id="fine",
            total_weight=1.0,
            criteria=[
                Criterion(id="a", weight=0.5, max_score=10000),
                Criterion(id="b", weight=0.5, max_score=10),
            ],
        )
        result = TemplateScorer().calculate(template, {"a": 2489.6, "b": 0})
        assert result.raw_score == Decimal("12.4480")
        assert result.weighted_score == Decimal("12.4")

    def test_invalid_weights_rejected_before_scores_are_checked(self):
        template = RubricTemplate(
            id="broken",
            total_weight=100,
            criteria=[Criterion(id="a", weight=60, max_score=10), Criterion(id="b", weight=30, max_score=10)],
        )
        with pytest.raises(InvalidRubric) as exc_info:
            TemplateScorer().calculate(template, {})
        assert exc_info.value.weight_sum == 90
        assert exc_info.value.error_code == "invalid_rubric"

    def test_weight_within_tolerance_is_accepted(self):
        template = RubricTemplate(
            id="close",
            total_weight=1.0,
            criteria=[Criterion(id="a", weight=0.333, max_score=5),
                      Criterion(id="b", weight=0.333, max_score=5),
                      Criterion(id="c", weight=0.333, max_score=5)],
        )
        result = TemplateScorer().calculate(template, {"a": 5, "b": 5, "c": 5})
        assert result.weighted_score == Decimal("100.0")

    def test_missing_criterion(self, sample_template):
        with pytest.raises(IncompleteSubmission) as exc_info:
            TemplateScorer().calculate(sample_template, {"mercado": 8, "equipe": None})
        assert exc_info.value.missing == ["equipe", "produto"]

    def test_score_above_criterion_max(self, sample_template):
        with pytest.raises(ScoreOutOfRange) as exc_info:
            TemplateScorer().calculate(sample_template, {"mercado": 8, "equipe": 6, "produto": 10})
        assert exc_info.value.field == "equipe"


class TestScoringEngine:

    engine = ScoringEngine()

    def test_dimension_mode(self, scenario_a_scores):
        result = self.engine.score(ScoreRequest(dimension_scores=scenario_a_scores))
        assert result.mode is ScoringMode.DIMENSION
        assert result.weighted_score == 7.0
        assert result.raw_score == 6.95
        assert result.scale_max == 10.0
        assert set(result.contributions) == {d.value for d in Dimension}

    def test_dimension_mode_requires_all_five(self):
        request = ScoreRequest(dimension_scores={Dimension.MERCADO: 8, Dimension.GESTAO: None})
        with pytest.raises(IncompleteSubmission) as exc_info:
            self.engine.score(request)
        assert "gestao" in exc_info.value.missing
        assert "mercado" not in exc_info.value.missing

    def test_dimension_out_of_range(self, scenario_a_scores):
        scenario_a_scores[Dimension.FINANCEIRO] = 10.5
        with pytest.raises(ScoreOutOfRange):
            self.engine.score(ScoreRequest(dimension_scores=scenario_a_scores))

    def test_negative_dimension_score(self):
        with pytest.raises(ScoreOutOfRange):
            validate_dimension_scores({d: -1 for d in Dimension})

    def test_template_mode(self, sample_template):
        request = ScoreRequest(
            template_id="pitch-template",
            criteria_scores={"mercado": 8, "equipe": 4, "produto": 10},
        )
        result = self.engine.score(request, sample_template)
        assert result.mode is ScoringMode.TEMPLATE
        assert result.weighted_score == 72.5
        assert result.scale_max == 100.0

    def test_template_mode_without_template(self):
        request = ScoreRequest(template_id="missing", criteria_scores={})
        with pytest.raises(ConfigurationError):
            self.engine.score(request, None)

    def test_inactive_template(self, sample_template):
        inactive = sample_template.model_copy(update={"is_active": False})
        request = ScoreRequest(template_id="pitch-template", criteria_scores={"mercado": 1})
        with pytest.raises(ConfigurationError, match="inactive"):
            self.engine.score(request, inactive)

    def test_invalid_rubric_is_a_configuration_error(self):
        template = RubricTemplate(
            id="broken", total_weight=10, criteria=[Criterion(id="a", weight=5, max_score=10)]
        )
        request = ScoreRequest(template_id="broken", criteria_scores={"a": 5})
        with pytest.raises(ConfigurationError):
            self.engine.score(request, template)

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_dimension_score(self, scenario_a_scores, bad):
        scenario_a_scores[Dimension.MERCADO] = bad
        with pytest.raises(ScoreOutOfRange) as exc_info:
            self.engine.score(ScoreRequest(dimension_scores=scenario_a_scores))
        assert exc_info.value.field == "mercado"
        assert exc_info.value.details["value"] == str(bad)

    def test_non_finite_criterion_score(self, sample_template):
        request = ScoreRequest(
            template_id="pitch-template",
            criteria_scores={"mercado": 8, "equipe": float("nan"), "produto": 10},
        )
        with pytest.raises(ScoreOutOfRange) as exc_info:
            self.engine.score(request, sample_template)
        assert exc_info.value.field == "equipe"
