"""
Graphviz DOT builders for the FTA, ETA and CCA diagrams.

The pages render the returned source with ``st.graphviz_chart``.
"""
from typing import Any, Dict, List, Sequence

SEVERITY_COLORS = {"Low": "#22C55E", "Medium": "#EAB308", "High": "#EF4444"}
GATE_COLORS = {"AND": "#3B82F6", "OR": "#F97316"}


def _quote(text: Any) -> str:
    value = str(text if text is not None else "")
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n") + '"'


def _node(node_id: str, label: Any, **attrs) -> str:
    parts = [f"label={_quote(label)}"]
    parts += [f"{key}={_quote(value)}" for key, value in attrs.items()]
    return f"  {_quote(node_id)} [{', '.join(parts)}];"


def _edge(source: str, target: str, **attrs) -> str:
    suffix = ""
    if attrs:
        suffix = " [" + ", ".join(f"{key}={_quote(value)}" for key, value in attrs.items()) + "]"
    return f"  {_quote(source)} -> {_quote(target)}{suffix};"


def _digraph(lines: List[str], rankdir: str = "TB") -> str:
    header = [
        "digraph G {",
        f"  rankdir={rankdir};",
        '  node [fontname="Helvetica", fontsize=10, style="filled", fillcolor="#F8FAFC"];',
        '  edge [color="#64748B"];',
    ]
    return "\n".join(header + lines + ["}"])


def fault_tree_dot(structure: Dict[str, Any]) -> str:
    """Top event, gates and events; edges run from parent to child."""
    top = structure.get("top_event") or {}
    lines = [_node("top", top.get("text") or "Top Event", shape="box", fillcolor="#FEE2E2")]
    for gate in structure.get("gates", []):
        gate_type = gate.get("type", "AND")
        lines.append(_node(gate["id"], gate_type, shape="invhouse", fillcolor=GATE_COLORS.get(gate_type, "#CBD5E1")))
        lines.append(_edge(gate.get("parent_id", "top"), gate["id"]))
    for event in structure.get("intermediate_events", []):
        lines.append(_node(event["id"], event.get("text", ""), shape="box"))
        lines.append(_edge(event["gate_id"], event["id"]))
    for event in structure.get("basic_events", []):
        lines.append(_node(event["id"], event.get("text", ""), shape="ellipse"))
        lines.append(_edge(event.get("parent_gate_id", "top"), event["id"]))
    return _digraph(lines)


def event_tree_dot(initiating_event: str, barriers: Sequence[Dict[str, Any]], outcomes: Sequence[Dict[str, Any]]) -> str:
    """Left-to-right tree: one column per barrier, one leaf per outcome."""
    lines = [_node("ie", initiating_event or "Initiating Event", shape="box", fillcolor="#DBEAFE")]
    created = set()
    for index, outcome in enumerate(outcomes, start=1):
        parent = "ie"
        path = outcome.get("path", [])
        for depth, succeeded in enumerate(path):
            prefix = "".join("S" if step else "F" for step in path[:depth + 1])
            node_id = f"n-{prefix}"
            if node_id not in created:
                created.add(node_id)
                barrier = barriers[depth] if depth < len(barriers) else {}
                rate = float(barrier.get("success_rate", 0))
                probability = rate if succeeded else 1 - rate
                state = "Success" if succeeded else "Failure"
                lines.append(_node(node_id, f"{barrier.get('name', f'Barrier {depth + 1}')}\n{state}", shape="box"))
                lines.append(_edge(parent, node_id, label=f"{probability:.2f}"))
            parent = node_id
        severity = outcome.get("severity", "Low")
        leaf = f"out-{index}"
        lines.append(_node(
            leaf,
            f"Outcome {index}\n{severity} ({float(outcome.get('frequency', 0)):.4f})",
            shape="note",
            fillcolor=SEVERITY_COLORS.get(severity, "#CBD5E1"),
        ))
        lines.append(_edge(parent, leaf))
    return _digraph(lines, rankdir="LR")


def cause_consequence_dot(
    critical_event: str,
    causes: Sequence[Dict[str, Any]],
    consequences: Sequence[Dict[str, Any]],
) -> str:
    """Causes feed the critical event, which fans out to consequences, in list order."""
    lines = [_node("critical", critical_event or "Critical Event", shape="doubleoctagon", fillcolor="#FEE2E2")]
    for index, cause in enumerate(causes, start=1):
        node_id = cause.get("id") or f"cause-{index}"
        lines.append(_node(node_id, cause.get("text", ""), shape="box", fillcolor="#FEF3C7"))
        lines.append(_edge(node_id, "critical", label=cause.get("gate_type", "AND")))
    for index, consequence in enumerate(consequences, start=1):
        node_id = consequence.get("id") or f"consequence-{index}"
        lines.append(_node(node_id, consequence.get("text", ""), shape="box", fillcolor="#DCFCE7"))
        lines.append(_edge("critical", node_id, label=consequence.get("gate_type", "AND")))
    return _digraph(lines, rankdir="LR")
