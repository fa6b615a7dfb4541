"""
Tests for HIRADC risk scoring.
"""
import pytest

from app.models.hiradc_analysis import RiskCategory
from app.services.risk_scoring import (
    RECOMMENDED_CONTROLS,
    assess_risk,
    calculate_risk_score,
    categorize_risk,
    dashboard_risk_level,
    requires_immediate_action,
)


@pytest.mark.parametrize("score,expected", [
    (1, RiskCategory.LOW),
    (5, RiskCategory.LOW),
    (6, RiskCategory.MEDIUM),
    (12, RiskCategory.MEDIUM),
    (13, RiskCategory.HIGH),
    (20, RiskCategory.HIGH),
    (21, RiskCategory.EXTREME),
    (25, RiskCategory.EXTREME),
])
def test_category_boundaries(score, expected):
    assert categorize_risk(score) == expected


def test_every_scale_pair_is_scored_and_bucketed():
    for severity in range(1, 6):
        for likelihood in range(1, 6):
            assessment = assess_risk(severity, likelihood)
            assert assessment.score == severity * likelihood
            assert 1 <= assessment.score <= 25
            assert assessment.category == categorize_risk(assessment.score)


def test_high_severity_example():
    """Severity 4, likelihood 5 scores 20 which is High, not Extreme."""
    assessment = assess_risk(4, 5)
    assert assessment.score == 20
    assert assessment.category == RiskCategory.HIGH
    assert assessment.requires_immediate_action is True


def test_medium_risk_does_not_require_immediate_action():
    assessment = assess_risk(3, 3)
    assert assessment.score == 9
    assert assessment.category == RiskCategory.MEDIUM
    assert assessment.requires_immediate_action is False
    assert requires_immediate_action(RiskCategory.EXTREME) is True
    assert requires_immediate_action(RiskCategory.LOW) is False


@pytest.mark.parametrize("severity,likelihood", [(0, 3), (6, 3), (3, 0), (3, 6), (2.5, 3), (True, 3)])
def test_out_of_scale_values_are_rejected(severity, likelihood):
    with pytest.raises(ValueError):
        calculate_risk_score(severity, likelihood)


def test_controls_follow_hierarchy():
    assert RECOMMENDED_CONTROLS[0] == "Elimination"
    assert RECOMMENDED_CONTROLS[-1] == "Personal Protective Equipment (PPE)"
    assert len(RECOMMENDED_CONTROLS) == 5


@pytest.mark.parametrize("score,level", [(5, "low"), (6, "medium"), (12, "medium"), (13, "high"), (25, "high")])
def test_dashboard_levels(score, level):
    assert dashboard_risk_level(score) == level


def test_same_inputs_give_same_assessment():
    assert assess_risk(4, 2) == assess_risk(4, 2)
    grid = [(severity, likelihood) for severity in range(1, 6) for likelihood in range(1, 6)]
    assert [assess_risk(*pair) for pair in grid] == [assess_risk(*pair) for pair in grid]
