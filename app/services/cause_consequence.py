"""Cause-consequence diagram helpers."""
import uuid
from typing import Any, Dict, List

from app.models.fta_analysis import GateType


def new_event(text: str, gate_type: GateType = GateType.AND) -> Dict[str, Any]:
    if not text or not text.strip():
        raise ValueError("Event text is required")
    return {
        "id": f"event-{uuid.uuid4().hex[:12]}",
        "text": text.strip(),
        "gate_type": GateType(gate_type).value,
    }


def add_event(tree: List[Dict[str, Any]], text: str, gate_type: GateType = GateType.AND) -> List[Dict[str, Any]]:
    """Return a new list with the event appended; diagram order follows list order."""
    return [*tree, new_event(text, gate_type)]


def normalize_tree(events: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Keep client ids, mint ids for new events, preserve order."""
    tree = []
    for event in events:
        if event.get("id"):
            tree.append({
                "id": event["id"],
                "text": event["text"].strip(),
                "gate_type": GateType(event.get("gate_type", GateType.AND)).value,
            })
        else:
            tree.append(new_event(event["text"], event.get("gate_type", GateType.AND)))
    return tree
