"""
Occupational safety (K3) rate metrics.

All formulas are pure and return 0 instead of dividing by zero.
"""
from dataclasses import dataclass, asdict
from typing import Dict

# Normalisation bases
LTIR_BASE = 1_000_000
TRIR_BASE = 200_000
FREQUENCY_BASE = 1_000_000
HOURS_PER_DAY = 8


@dataclass(frozen=True)
class SafetyInputs:
    """Raw counts and hours entered on the calculator page."""
    total_lti: float = 0
    total_incidents: float = 0
    total_work_hours: float = 0
    total_days_lost: float = 0
    employees_with_ppe: float = 0
    total_employees: float = 0


@dataclass(frozen=True)
class SafetyMetrics:
    ltir: float
    trir: float
    severity_rate: float
    frequency_rate: float
    safe_man_hours: float
    compliance_ppe: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def lost_time_injury_rate(lost_time_injuries: float, work_hours: float) -> float:
    if work_hours <= 0:
        return 0.0
    return lost_time_injuries / work_hours * LTIR_BASE


def total_recordable_incident_rate(incidents: float, work_hours: float) -> float:
    if work_hours <= 0:
        return 0.0
    return incidents / work_hours * TRIR_BASE


def severity_rate(days_lost: float, incidents: float) -> float:
    if incidents <= 0:
        return 0.0
    return days_lost / incidents


def frequency_rate(incidents: float, work_hours: float) -> float:
    if work_hours <= 0:
        return 0.0
    return incidents / work_hours * FREQUENCY_BASE


def safe_man_hours(work_hours: float, days_lost: float) -> float:
    return max(0.0, work_hours - days_lost * HOURS_PER_DAY)


def compliance_rate(employees_with_ppe: float, total_employees: float) -> float:
    if total_employees <= 0:
        return 0.0
    return employees_with_ppe / total_employees * 100


def calculate_safety_metrics(inputs: SafetyInputs) -> SafetyMetrics:
    """Compute all six metrics; rates are rounded to two decimals."""
    return SafetyMetrics(
        ltir=round(lost_time_injury_rate(inputs.total_lti, inputs.total_work_hours), 2),
        trir=round(total_recordable_incident_rate(inputs.total_incidents, inputs.total_work_hours), 2),
        severity_rate=round(severity_rate(inputs.total_days_lost, inputs.total_incidents), 2),
        frequency_rate=round(frequency_rate(inputs.total_incidents, inputs.total_work_hours), 2),
        safe_man_hours=safe_man_hours(inputs.total_work_hours, inputs.total_days_lost),
        compliance_ppe=round(compliance_rate(inputs.employees_with_ppe, inputs.total_employees), 2),
    )


INCIDENT_RATE_METRICS = ("ltir", "trir", "frequency_rate")


def rate_status(metric: str, value: float) -> str:
    """
    Traffic-light status for a metric value.

    Incident rates: good <= 2, warning <= 5, else critical.
    PPE compliance: good >= 90, warning >= 70, else critical.
    Other metrics are informational.
    """
    if metric in INCIDENT_RATE_METRICS:
        if value <= 2:
            return "good"
        if value <= 5:
            return "warning"
        return "critical"
    if metric == "compliance_ppe":
        if value >= 90:
            return "good"
        if value >= 70:
            return "warning"
        return "critical"
    return "info"
