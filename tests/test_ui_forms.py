"""
Tests for UI form validation and diagram rendering.
"""
import pytest

from app.services.event_tree import evaluate
from app.services.fault_tree import add_basic_event, add_intermediate_event, empty_structure
from app.ui.diagrams import cause_consequence_dot, event_tree_dot, fault_tree_dot
from app.ui.validation import (
    password_strength,
    required_fields,
    strength_label,
    validate_contact,
    validate_email,
    validate_probability,
    validate_registration,
)


def test_required_fields_reports_each_blank_field():
    errors = required_fields(
        {"activity_name": "Welding", "location": "  ", "hazard": None},
        {"activity_name": "Activity name", "location": "Location", "hazard": "Hazard"},
    )
    assert errors == ["Location is required", "Hazard is required"]


@pytest.mark.parametrize("email,errors", [
    ("", ["Email is required"]),
    ("user@", ["Please enter a valid email address"]),
    ("user @example.com", ["Please enter a valid email address"]),
    (" user@example.com ", []),
])
def test_validate_email(email, errors):
    assert validate_email(email) == errors


def test_validate_registration_collects_all_errors():
    errors = validate_registration("", "bad", "short", "other")
    assert errors == [
        "Name is required",
        "Please enter a valid email address",
        "Password must be at least 8 characters long",
        "Passwords do not match",
    ]
    assert validate_registration("Rina", "rina@example.com", "Sup3r-secret!", "Sup3r-secret!") == []


def test_validate_contact():
    assert validate_contact("Rina", "rina@example.com", "Hello") == []
    assert validate_contact("Rina", "rina@example.com", " ") == ["Message is required"]


@pytest.mark.parametrize("password,strength,label", [
    ("", 0, "Weak"),
    ("abcdefgh", 1, "Weak"),
    ("abcdefgh1", 2, "Medium"),
    ("Abcdefgh1", 3, "Medium"),
    ("Abcdefgh1!", 4, "Strong"),
    ("Abcdefgh1!xyz", 5, "Strong"),
])
def test_password_strength(password, strength, label):
    assert password_strength(password) == strength
    assert strength_label(strength) == label


def test_validate_probability():
    assert validate_probability(0.0) == []
    assert validate_probability(1.0) == []
    assert validate_probability(1.01) == ["Success rate must be between 0 and 1"]
    assert validate_probability(None) == ["Success rate must be between 0 and 1"]


def test_fault_tree_dot_links_parents_to_children():
    structure = add_intermediate_event(empty_structure('Fire "A"'), "Fuel present")
    gate_id = structure["gates"][0]["id"]
    structure = add_basic_event(structure, "Leaking tank", parent_gate_id=gate_id)

    dot = fault_tree_dot(structure)
    assert dot.startswith("digraph G {")
    assert 'label="Fire \\"A\\""' in dot
    assert f'"top" -> "{gate_id}"' in dot
    assert f'"{gate_id}" -> "{structure["basic_events"][0]["id"]}"' in dot


def test_event_tree_dot_has_one_leaf_per_outcome():
    barriers = [{"name": "Alarm", "success_rate": 0.9}, {"name": "Sprinkler", "success_rate": 0.8}]
    dot = event_tree_dot("Fire starts", barriers, evaluate(barriers))

    assert "rankdir=LR" in dot
    assert dot.count('shape="note"') == 4
    assert 'label="0.90"' in dot
    assert 'label="0.20"' in dot
    assert "Alarm\\nSuccess" in dot


def test_event_tree_dot_without_barriers():
    dot = event_tree_dot("Spill", [], evaluate([]))
    assert '"ie" -> "out-1"' in dot


def test_cause_consequence_dot_keeps_order():
    dot = cause_consequence_dot(
        "Overpressure",
        [{"id": "c1", "text": "Valve stuck", "gate_type": "OR"}, {"text": "Controller failure"}],
        [{"id": "q1", "text": "Rupture"}],
    )
    assert dot.index('"c1"') < dot.index('"cause-2"')
    assert '"c1" -> "critical" [label="OR"]' in dot
    assert '"critical" -> "q1" [label="AND"]' in dot
