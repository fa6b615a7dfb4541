"""
Fault tree structure editing.

Node positions are assigned when a node is added and persisted as-is, so a
saved tree redraws exactly as it was built.
"""
import copy
import uuid
from typing import Any, Dict, Optional

from app.models.fta_analysis import GateType

TOP_EVENT_ID = "top"
TOP_EVENT_POSITION = (400, 50)


def _new_id(kind: str) -> str:
    return f"{kind}-{uuid.uuid4().hex[:12]}"


def empty_structure(top_event_text: str = "") -> Dict[str, Any]:
    x, y = TOP_EVENT_POSITION
    return {
        "top_event": {"id": TOP_EVENT_ID, "text": top_event_text, "x": x, "y": y},
        "gates": [],
        "intermediate_events": [],
        "basic_events": [],
    }


def _gate_ids(structure: Dict[str, Any]) -> set:
    return {TOP_EVENT_ID} | {gate["id"] for gate in structure.get("gates", [])}


def _check_parent(structure: Dict[str, Any], parent_id: str) -> None:
    if parent_id not in _gate_ids(structure):
        raise ValueError(f"Unknown parent '{parent_id}'")


def add_intermediate_event(
    structure: Dict[str, Any],
    text: str,
    gate_type: GateType = GateType.AND,
    parent_id: str = TOP_EVENT_ID,
    node_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Return a copy of the structure with a new intermediate event and its gate.

    The gate sits 40 units above the event and hangs off parent_id.
    """
    if not text or not text.strip():
        raise ValueError("Event text is required")
    _check_parent(structure, parent_id)

    new_structure = copy.deepcopy(structure)
    n = len(new_structure["intermediate_events"])
    event_id = node_id or _new_id("intermediate")
    gate_id = f"gate-{event_id}"
    x = 200 + (n % 3) * 200
    y = 150 + n * 120

    new_structure["gates"].append({
        "id": gate_id,
        "type": GateType(gate_type).value,
        "x": x,
        "y": y - 40,
        "parent_id": parent_id,
    })
    new_structure["intermediate_events"].append({
        "id": event_id,
        "text": text.strip(),
        "x": x,
        "y": y,
        "gate_id": gate_id,
    })
    return new_structure


def add_basic_event(
    structure: Dict[str, Any],
    text: str,
    parent_gate_id: str = TOP_EVENT_ID,
    node_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Return a copy of the structure with a new basic event under parent_gate_id."""
    if not text or not text.strip():
        raise ValueError("Event text is required")
    _check_parent(structure, parent_gate_id)

    new_structure = copy.deepcopy(structure)
    n = len(new_structure["basic_events"])
    new_structure["basic_events"].append({
        "id": node_id or _new_id("basic"),
        "text": text.strip(),
        "x": 150 + (n % 4) * 150,
        "y": 350 + n * 100,
        "parent_gate_id": parent_gate_id,
    })
    return new_structure


def with_top_event(structure: Dict[str, Any], top_event_text: str) -> Dict[str, Any]:
    """Copy of the structure whose top event carries the given text."""
    new_structure = copy.deepcopy(structure)
    new_structure["top_event"] = {**new_structure["top_event"], "text": top_event_text}
    return new_structure


def count_nodes(structure: Dict[str, Any]) -> Dict[str, int]:
    return {
        "gates": len(structure.get("gates", [])),
        "intermediate_events": len(structure.get("intermediate_events", [])),
        "basic_events": len(structure.get("basic_events", [])),
    }
