"""PipelineExecutor: Stage 1 -> Stage 2, count bounds and alignment"""

import pytest
import requests

from flowgen.ir.diagram import DiagramSpec, EdgeSpec, NodeSpec
from flowgen.ir.errors import AIError, InputValidationError, RenderError
from flowgen.pipeline.executor import PipelineExecutor, clamp_count
from flowgen.pipeline.extractor import ExtractionResult

from conftest import ARTICLE, FakeLLMClient, diagram, diagrams_json, make_engine


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, 3),
        (0, 3),
        ("abc", 3),
        (True, 3),
        (15, 10),
        (10, 10),
        (1, 1),
        (-4, 1),
        ("5", 5),
        (2.9, 2),
    ],
)
def test_clamp_count(raw, expected):
    assert clamp_count(raw) == expected


class StubExtractor:
    """Hands back fixed specs without validating them."""

    def __init__(self, diagrams):
        self.diagrams = diagrams
        self.calls = []

    def extract(self, article, theme_instructions, count):
        self.calls.append((article, theme_instructions, count))
        return ExtractionResult(diagrams=self.diagrams, count=len(self.diagrams))


def _spec(title):
    return DiagramSpec.model_validate(diagram(title))


def _broken(title):
    return DiagramSpec(
        title=title,
        nodes=[NodeSpec(id="a", label="A")],
        edges=[EdgeSpec(source="a", target="ghost")],
    )


def test_end_to_end_counts_match():
    client = FakeLLMClient([diagrams_json(diagram("A"), diagram("B"), diagram("C"))])
    result = PipelineExecutor(engine=make_engine(client)).run(ARTICLE, "", 3)

    assert result.step1.count == result.step2.count == 3
    assert len(result.step1.diagrams) == len(result.step2.diagrams) == 3
    for spec, rendered in zip(result.step1.diagrams, result.step2.diagrams):
        assert rendered.source_title == spec.title
        assert rendered.mmd.startswith("flowchart TD")


def test_two_of_three_is_not_an_error():
    client = FakeLLMClient([diagrams_json(diagram("A"), diagram("B"))])
    result = PipelineExecutor(engine=make_engine(client)).run(ARTICLE, "", 3)
    assert result.step1.count == result.step2.count == 2


def test_count_is_clamped_before_extraction():
    stub = StubExtractor([_spec("A")])
    PipelineExecutor(extractor=stub).run(ARTICLE, "theme", 15)
    PipelineExecutor(extractor=stub).run(ARTICLE, "theme", None)
    assert [c[2] for c in stub.calls] == [10, 3]


def test_short_article_makes_no_backend_call():
    client = FakeLLMClient([])
    with pytest.raises(InputValidationError):
        PipelineExecutor(engine=make_engine(client)).run("hi", "", 3)
    assert client.calls == []


def test_render_failure_keeps_steps_aligned():
    stub = StubExtractor([_spec("One"), _broken("Two"), _spec("Three")])
    result = PipelineExecutor(extractor=stub).run(ARTICLE, "", 3)

    assert [d.title for d in result.step1.diagrams] == ["One", "Three"]
    assert [d.source_title for d in result.step2.diagrams] == ["One", "Three"]
    assert result.step1.count == result.step2.count == 2


def test_every_render_failing_raises_first_error():
    stub = StubExtractor([_broken("X"), _broken("Y")])
    with pytest.raises(RenderError) as exc:
        PipelineExecutor(extractor=stub).run(ARTICLE, "", 2)
    assert exc.value.diagram_title == "X"


def test_total_backend_failure_is_single_ai_error():
    client = FakeLLMClient([requests.Timeout("slow")])
    with pytest.raises(AIError) as exc:
        PipelineExecutor(engine=make_engine(client)).run(ARTICLE, "", 3)
    assert exc.value.kind == "timeout"


def test_result_wire_format():
    client = FakeLLMClient([diagrams_json(diagram("A"))])
    result = PipelineExecutor(engine=make_engine(client)).run(ARTICLE, "", 1)

    data = result.model_dump(by_alias=True, exclude_none=True)
    assert data["step1"]["diagramCount"] == 1
    assert data["step2"]["diagramCount"] == 1
    assert data["step1"]["diagrams"][0]["diagramType"] == "flowchart"
    assert data["step1"]["diagrams"][0]["edges"][0] == {"from": "start", "to": "pay"}
    assert data["step2"]["diagrams"][0]["sourceTitle"] == "A"
