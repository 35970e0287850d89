"""DiagramSpec -> Mermaid text"""

import pytest

from flowgen.compiler import DiagramRenderer, render_mermaid
from flowgen.ir.diagram import DiagramSpec, EdgeSpec, NodeSpec
from flowgen.ir.errors import RenderError

from conftest import diagram


def _spec(**kwargs) -> DiagramSpec:
    return DiagramSpec.model_validate(diagram(**kwargs))


def test_flowchart_output():
    mmd = render_mermaid(_spec())
    assert mmd == "\n".join([
        "flowchart TD",
        '    start["Start"]',
        '    pay["Take payment"]',
        '    ship["Ship order"]',
        "    start --> pay",
        "    pay -->|paid| ship",
    ])


def test_direction_marker():
    assert render_mermaid(_spec(direction="LR")).startswith("flowchart LR\n")


def test_shapes():
    mmd = render_mermaid(_spec(
        nodes=[
            {"id": "s", "label": "Start", "shape": "stadium"},
            {"id": "d", "label": "Valid?", "shape": "diamond"},
            {"id": "db", "label": "Orders", "shape": "cylinder"},
            {"id": "h", "label": "Prep", "shape": "hexagon"},
        ],
        edges=[],
    ))
    assert '    s(["Start"])' in mmd
    assert '    d{"Valid?"}' in mmd
    assert '    db[("Orders")]' in mmd
    assert '    h{{"Prep"}}' in mmd


def test_labels_are_escaped():
    mmd = render_mermaid(_spec(
        nodes=[{"id": "a", "label": 'Say "hi"\nthere'}, {"id": "b", "label": "B"}],
        edges=[{"from": "a", "to": "b", "label": 'yes | "no"; #1'}],
    ))
    assert "    a[\"Say 'hi' there\"]" in mmd
    assert "    a -->|yes no 1| b" in mmd


def test_empty_label_falls_back_to_id():
    mmd = render_mermaid(_spec(nodes=[{"id": "lonely", "label": ""}], edges=[]))
    assert '    lonely["lonely"]' in mmd


def test_self_loop_and_parallel_edges():
    mmd = render_mermaid(_spec(
        nodes=[{"id": "a", "label": "A"}, {"id": "b", "label": "B"}],
        edges=[{"from": "a", "to": "a", "label": "retry"}, {"from": "a", "to": "b"}, {"from": "a", "to": "b"}],
    ))
    lines = mmd.splitlines()
    assert "    a -->|retry| a" in lines
    assert lines.count("    a --> b") == 2


def test_sequence_output():
    spec = _spec(
        title="Checkout",
        diagramType="sequence",
        nodes=[{"id": "user", "label": "Customer"}, {"id": "shop", "label": "Web shop"}],
        edges=[{"from": "user", "to": "shop", "label": "place order"}, {"from": "shop", "to": "user"}],
    )
    assert render_mermaid(spec) == "\n".join([
        "sequenceDiagram",
        "    participant user as Customer",
        "    participant shop as Web shop",
        "    user->>shop: place order",
        "    shop->>user: Customer",
    ])


def test_every_node_and_edge_appears():
    spec = _spec()
    mmd = render_mermaid(spec)
    for node in spec.nodes:
        assert node.id in mmd
    edge_lines = [line for line in mmd.splitlines() if "-->" in line]
    assert len(edge_lines) == len(spec.edges)


def test_rendering_is_deterministic():
    spec = _spec()
    renderer = DiagramRenderer()
    assert renderer.render_one(spec).mmd == renderer.render_one(spec).mmd
    assert render_mermaid(spec) == render_mermaid(_spec())


def test_invalid_reference_raises_for_single_diagram():
    spec = DiagramSpec(
        title="Broken",
        nodes=[NodeSpec(id="a", label="A")],
        edges=[EdgeSpec(source="a", target="ghost")],
    )
    with pytest.raises(RenderError) as exc:
        DiagramRenderer().render_one(spec)
    assert exc.value.kind == "invalid_reference"
    assert exc.value.diagram_title == "Broken"


def test_render_isolates_failures():
    broken = DiagramSpec(
        title="Broken",
        nodes=[NodeSpec(id="a", label="A")],
        edges=[EdgeSpec(source="a", target="ghost")],
    )
    outcome = DiagramRenderer().render([_spec(title="One"), broken, _spec(title="Three")])

    assert [d.source_title for d in outcome.diagrams] == ["One", "Three"]
    assert outcome.indices == [0, 2]
    assert len(outcome.failures) == 1
    assert outcome.failures[0].index == 1
    assert outcome.failures[0].error.kind == "invalid_reference"


def test_rendered_diagram_wire_names():
    rendered = DiagramRenderer().render_one(_spec(title="Wire"))
    assert rendered.model_dump(by_alias=True) == {"mmd": rendered.mmd, "sourceTitle": "Wire"}
