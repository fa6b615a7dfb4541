"""
Event tree outcome enumeration.

For n ordered barriers every success/fail combination is generated by binary
counting over n bits: in combination k, bit j set means barrier j succeeded.
The frequency of a path is the product of p_j (success) or 1 - p_j (failure)
in barrier order. Barrier counts are entered by hand, so the O(2^n) expansion
is bounded by MAX_BARRIERS.
"""
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from app.models.eta_analysis import OutcomeSeverity

MAX_BARRIERS = 12


@dataclass(frozen=True)
class EventTreeOutcome:
    """One path through the tree."""
    path: Tuple[bool, ...]
    frequency: float
    severity: OutcomeSeverity

    def to_dict(self) -> Dict:
        return {
            "path": list(self.path),
            "frequency": self.frequency,
            "severity": self.severity.value,
        }


def path_frequency(path: Sequence[bool], success_rates: Sequence[float]) -> float:
    """Multiply the branch probabilities along a path."""
    frequency = 1.0
    for succeeded, rate in zip(path, success_rates):
        frequency *= rate if succeeded else (1 - rate)
    return frequency


def classify_path(path: Sequence[bool]) -> OutcomeSeverity:
    """Low when every barrier held, High when every barrier failed, else Medium."""
    if all(path):
        return OutcomeSeverity.LOW
    if not any(path):
        return OutcomeSeverity.HIGH
    return OutcomeSeverity.MEDIUM


def enumerate_outcomes(success_rates: Sequence[float]) -> List[EventTreeOutcome]:
    """
    Enumerate all 2^n outcomes in binary counting order.

    Args:
        success_rates: success probability of each barrier, in barrier order

    Returns:
        List of EventTreeOutcome, outcome k at index k

    Raises:
        ValueError: If a probability is outside [0, 1] or there are too many barriers
    """
    rates = [float(rate) for rate in success_rates]
    for index, rate in enumerate(rates):
        if not 0.0 <= rate <= 1.0:
            raise ValueError(f"Barrier {index + 1} success rate must be between 0 and 1, got {rate}")
    if len(rates) > MAX_BARRIERS:
        raise ValueError(f"At most {MAX_BARRIERS} barriers are supported, got {len(rates)}")

    n = len(rates)
    outcomes = []
    for k in range(2 ** n):
        path = tuple(bool(k & (1 << j)) for j in range(n))
        outcomes.append(EventTreeOutcome(
            path=path,
            frequency=path_frequency(path, rates),
            severity=classify_path(path),
        ))
    return outcomes


def outcome_summary(outcomes: Sequence[EventTreeOutcome]) -> Dict:
    """Total frequency and frequency/count per severity bucket."""
    summary = {
        "total_frequency": 0.0,
        "counts": {s.value: 0 for s in OutcomeSeverity},
        "frequency_by_severity": {s.value: 0.0 for s in OutcomeSeverity},
    }
    for outcome in outcomes:
        summary["total_frequency"] += outcome.frequency
        summary["counts"][outcome.severity.value] += 1
        summary["frequency_by_severity"][outcome.severity.value] += outcome.frequency
    return summary


def normalize_barriers(barriers: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Barrier dicts in input order, with an id minted for any barrier that lacks one."""
    return [
        {
            "id": barrier.get("id") or f"barrier-{uuid.uuid4().hex[:12]}",
            "name": barrier["name"],
            "success_rate": float(barrier["success_rate"]),
        }
        for barrier in barriers
    ]


def evaluate(barriers: Sequence[Dict[str, Any]]) -> List[Dict]:
    """Outcome dicts for a list of barrier dicts."""
    return [o.to_dict() for o in enumerate_outcomes([b["success_rate"] for b in barriers])]
