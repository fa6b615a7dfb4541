"""
HIRADC risk scoring.

Risk score is severity x likelihood on two 1-5 scales (so 1-25), bucketed into
Low (<=5), Medium (<=12), High (<=20) and Extreme.
"""
from dataclasses import dataclass
from typing import List

from app.models.hiradc_analysis import RiskCategory

SCALE_MIN = 1
SCALE_MAX = 5

# Upper bound (inclusive) of each bucket, checked in order
CATEGORY_THRESHOLDS = (
    (5, RiskCategory.LOW),
    (12, RiskCategory.MEDIUM),
    (20, RiskCategory.HIGH),
)

# Hierarchy of controls, most to least effective
RECOMMENDED_CONTROLS: List[str] = [
    "Elimination",
    "Substitution",
    "Engineering Controls",
    "Administrative Controls",
    "Personal Protective Equipment (PPE)",
]


@dataclass(frozen=True)
class RiskAssessment:
    """Score and category for one severity/likelihood pair."""
    severity: int
    likelihood: int
    score: int
    category: RiskCategory

    @property
    def requires_immediate_action(self) -> bool:
        return requires_immediate_action(self.category)


def _check_scale(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer between {SCALE_MIN} and {SCALE_MAX}")
    if not SCALE_MIN <= value <= SCALE_MAX:
        raise ValueError(f"{name} must be between {SCALE_MIN} and {SCALE_MAX}, got {value}")


def calculate_risk_score(severity: int, likelihood: int) -> int:
    """Return severity x likelihood. Raises ValueError outside the 1-5 scales."""
    _check_scale("severity", severity)
    _check_scale("likelihood", likelihood)
    return severity * likelihood


def categorize_risk(score: int) -> RiskCategory:
    """Bucket a risk score into its category."""
    for upper, category in CATEGORY_THRESHOLDS:
        if score <= upper:
            return category
    return RiskCategory.EXTREME


def assess_risk(severity: int, likelihood: int) -> RiskAssessment:
    """Compute score and category together."""
    score = calculate_risk_score(severity, likelihood)
    return RiskAssessment(
        severity=severity,
        likelihood=likelihood,
        score=score,
        category=categorize_risk(score),
    )


def requires_immediate_action(category: RiskCategory) -> bool:
    """High and Extreme risks must be controlled before the activity continues."""
    return category in (RiskCategory.HIGH, RiskCategory.EXTREME)


def dashboard_risk_level(score: int) -> str:
    """
    Three-level bucket used by the dashboard KPI cards.

    Extreme folds into High, so the boundaries are 6 and 13.
    """
    if score >= 13:
        return "high"
    if score >= 6:
        return "medium"
    return "low"
