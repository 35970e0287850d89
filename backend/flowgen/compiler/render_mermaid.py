# backend/flowgen/compiler/render_mermaid.py

import logging
import re
from typing import List

from flowgen.compiler.types import RenderFailure, RenderOutcome
from flowgen.ir.diagram import DiagramSpec, EdgeSpec, NodeSpec, RenderedDiagram
from flowgen.ir.errors import RenderError, RenderErrorKind

logger = logging.getLogger(__name__)

# Mermaid flowchart shape syntax, "{}" is the quoted label
SHAPE_TEMPLATES = {
    "rect": '["{}"]',
    "rounded": '("{}")',
    "stadium": '(["{}"])',
    "circle": '(("{}"))',
    "diamond": '{{"{}"}}',
    "hexagon": '{{{{"{}"}}}}',
    "cylinder": '[("{}")]',
    "parallelogram": '[/"{}"/]',
    "subroutine": '[["{}"]]',
}


def _escape_label(label: str) -> str:
    label = label.replace('"', "'")
    return re.sub(r"\s+", " ", label).strip()


def _escape_edge_label(label: str) -> str:
    label = re.sub(r'[|"#;]', "", label)
    return re.sub(r"\s+", " ", label).strip()


def _escape_message(text: str) -> str:
    text = re.sub(r"[#;]", "", text)
    return re.sub(r"\s+", " ", text).strip()


def _node_label(node: NodeSpec) -> str:
    return _escape_label(node.label) or node.id


def _check_references(diagram: DiagramSpec) -> None:
    node_ids = set(diagram.node_ids())
    for edge in diagram.edges:
        for endpoint in (edge.source, edge.target):
            if endpoint not in node_ids:
                raise RenderError(
                    f"Edge {edge.source} -> {edge.target} references unknown node '{endpoint}'",
                    RenderErrorKind.INVALID_REFERENCE,
                    diagram_title=diagram.title,
                )


def _render_flowchart(diagram: DiagramSpec) -> List[str]:
    lines = [f"flowchart {diagram.direction}"]

    for node in diagram.nodes:
        template = SHAPE_TEMPLATES.get(node.shape or "rect", SHAPE_TEMPLATES["rect"])
        lines.append(f"    {node.id}{template.format(_node_label(node))}")

    for edge in diagram.edges:
        label = _escape_edge_label(edge.label) if edge.label else ""
        arrow = f"-->|{label}|" if label else "-->"
        lines.append(f"    {edge.source} {arrow} {edge.target}")

    return lines


def _sequence_message(edge: EdgeSpec, labels: dict) -> str:
    if edge.label:
        message = _escape_message(edge.label)
        if message:
            return message
    return _escape_message(labels[edge.target])


def _render_sequence(diagram: DiagramSpec) -> List[str]:
    lines = ["sequenceDiagram"]
    labels = {}

    for node in diagram.nodes:
        label = _escape_message(_node_label(node)) or node.id
        labels[node.id] = label
        lines.append(f"    participant {node.id} as {label}")

    for edge in diagram.edges:
        lines.append(f"    {edge.source}->>{edge.target}: {_sequence_message(edge, labels)}")

    return lines


class DiagramRenderer:
    """
    Stage 2: DiagramSpec -> Mermaid text.

    Pure and deterministic: no I/O, no backend, same input gives the same
    bytes. A diagram with a dangling edge fails on its own; the others
    still render.
    """

    def render_one(self, diagram: DiagramSpec) -> RenderedDiagram:
        _check_references(diagram)

        if diagram.diagram_type == "sequence":
            lines = _render_sequence(diagram)
        else:
            lines = _render_flowchart(diagram)

        return RenderedDiagram(mmd="\n".join(lines), source_title=diagram.title)

    def render(self, diagrams: List[DiagramSpec]) -> RenderOutcome:
        outcome = RenderOutcome()

        for index, diagram in enumerate(diagrams):
            try:
                rendered = self.render_one(diagram)
            except RenderError as e:
                logger.warning("[RENDER] diagram %d (%s) failed: %s", index, diagram.title, e.message)
                outcome.failures.append(RenderFailure(index=index, error=e))
                continue
            outcome.diagrams.append(rendered)
            outcome.indices.append(index)

        logger.info(
            "[RENDER] rendered %d/%d diagrams",
            len(outcome.diagrams), len(diagrams),
        )
        return outcome


def render_mermaid(diagram: DiagramSpec) -> str:
    return DiagramRenderer().render_one(diagram).mmd
