"""Computation graph of the behavior configuration.

Renders how external facts and internal state flow through emotions into
action scores as a Mermaid diagram, for documentation and review of weight
changes.
"""

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel

from catmind.core.behavior_config import BehaviorConfig, WeightedLinear
from catmind.core.schemas import EXTERNAL_FACTS, INTERNAL_AXES

NODE_SHAPES: Dict[str, Tuple[str, str]] = {
    "input": ("[", "]"),
    "external": (">", "]"),
    "emotion": ("(", ")"),
    "action": ("{", "}"),
    "output": ("[[", "]]"),
}

NODE_STYLES: Dict[str, str] = {
    "input": "fill:#e1f5fe,stroke:#0277bd,stroke-width:2px",
    "external": "fill:#fff8e1,stroke:#ff8f00,stroke-width:2px",
    "emotion": "fill:#f3e5f5,stroke:#7b1fa2,stroke-width:2px",
    "action": "fill:#fff3e0,stroke:#f57c00,stroke-width:2px",
    "output": "fill:#e8f5e8,stroke:#388e3c,stroke-width:2px",
}


class GraphNode(BaseModel):
    id: str
    label: str
    type: str


class GraphEdge(BaseModel):
    source: str
    target: str
    label: str = ""


def format_weight(weight: float) -> str:
    return f"{weight:g}"


def format_formula(section: WeightedLinear) -> str:
    """Human-readable right-hand side of a weighted-linear entry."""
    terms = []
    for i, name in enumerate(section.inputs):
        weight = section.weights[i] if i < len(section.weights) else 0.0
        if weight == 0:
            continue
        terms.append(name if weight == 1 else f"{format_weight(weight)}×{name}")

    if section.bias:
        terms.append(f"+{format_weight(section.bias)}" if section.bias > 0 else format_weight(section.bias))

    return f"= {' '.join(terms)}" if terms else "= 0"


class ComputationGraph:
    """Nodes and weighted edges of the scoring pipeline."""

    def __init__(self, config: BehaviorConfig):
        self.config = config
        self.nodes: Dict[str, GraphNode] = {}
        self.edges: List[GraphEdge] = []
        self._build()

    def _build(self) -> None:
        for axis in INTERNAL_AXES:
            self._add_node(axis, axis, "input")
        for fact in EXTERNAL_FACTS:
            self._add_node(fact, fact, "external")
        self._add_node("bias", "bias", "input")

        for axis, section in self.config.external_state_influence.items():
            for i, name in enumerate(section.inputs):
                weight = section.weights[i] if i < len(section.weights) else 0.0
                if weight != 0:
                    self._add_edge(name, axis, format_weight(weight))
            if section.bias != 0:
                self._add_edge("bias", axis, format_weight(section.bias))

        for emotion, section in self.config.emotion_calculation.items():
            self._add_node(emotion, emotion, "emotion")
            self._add_weighted_edges(emotion, section)

        for action_name, action in self.config.actions.items():
            label = f"{action_name}\\n{action.name}" if action.name else action_name
            self._add_node(action_name, label, "action")
            self._add_weighted_edges(action_name, action)

        temperature = self.config.probability_calculation.temperature
        self._add_node("action_selection", f"Action Selection\\nsoftmax(temp={format_weight(temperature)})", "output")
        for action_name in self.config.actions:
            self._add_edge(action_name, "action_selection")

    def _add_node(self, node_id: str, label: str, node_type: str) -> None:
        self.nodes[node_id] = GraphNode(id=node_id, label=label, type=node_type)

    def _add_edge(self, source: str, target: str, label: str = "") -> None:
        self.edges.append(GraphEdge(source=source, target=target, label=label))

    def _add_weighted_edges(self, target: str, section: WeightedLinear) -> None:
        for i, name in enumerate(section.inputs):
            weight = section.weights[i] if i < len(section.weights) else 0.0
            self._add_edge(name, target, "" if weight == 1 else format_weight(weight))

        # Bias-only entries always show their bias, even when it is 0
        if not section.inputs or section.bias != 0:
            self._add_edge("bias", target, format_weight(section.bias))

    def stats(self) -> Dict[str, object]:
        layer_counts: Dict[str, int] = {}
        for node in self.nodes.values():
            layer_counts[node.type] = layer_counts.get(node.type, 0) + 1
        return {
            "node_count": len(self.nodes),
            "edge_count": len(self.edges),
            "layer_counts": layer_counts,
        }

    def to_mermaid(self) -> str:
        lines = ["graph TD"]
        for node in self.nodes.values():
            open_, close = NODE_SHAPES.get(node.type, ("[", "]"))
            lines.append(f'  {node.id}{open_}"{node.label}"{close}')
        lines.append("")

        for edge in self.edges:
            label = f'|"{edge.label}"| ' if edge.label else ""
            lines.append(f"  {edge.source} --> {label}{edge.target}")
        lines.append("")

        for node_type, style in NODE_STYLES.items():
            lines.append(f"  classDef {node_type}Style {style}")
        lines.append("")
        for node_type in NODE_STYLES:
            members = [node.id for node in self.nodes.values() if node.type == node_type]
            if members:
                lines.append(f"  class {','.join(members)} {node_type}Style")

        return "\n".join(lines)

    def formulas(self) -> Dict[str, str]:
        """Formula of every influence, emotion and action.

        Influences are keyed `<axis>/s` since they are per-second deltas.
        """
        result = {
            f"{axis}/s": format_formula(section)
            for axis, section in self.config.external_state_influence.items()
        }
        result.update({
            emotion: format_formula(section)
            for emotion, section in self.config.emotion_calculation.items()
        })
        result.update({
            name: format_formula(action) for name, action in self.config.actions.items()
        })
        return result

    def render_markdown(self, title: Optional[str] = None) -> str:
        stats = self.stats()
        out = [f"# {title or 'Cat Behavior Computation Graph'}", ""]

        out += ["## Graph Statistics", ""]
        out.append(f"- Total nodes: {stats['node_count']}")
        out.append(f"- Total edges: {stats['edge_count']}")
        out.append("- Layer breakdown:")
        for layer, count in stats["layer_counts"].items():
            out.append(f"  - {layer}: {count} nodes")
        out.append("")

        out += ["## Formulas", ""]
        for name, formula in self.formulas().items():
            out.append(f"- `{name} {formula}`")
        out.append("")

        out += ["## Computation Flow Diagram", "", "```mermaid", self.to_mermaid(), "```", ""]
        return "\n".join(out)
