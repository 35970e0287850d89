"""LLM output -> loosely normalized diagram candidates"""

import pytest

from flowgen.llm.parser import (
    coerce_diagrams,
    normalize_direction,
    normalize_diagram_type,
    parse_diagrams,
    slugify_id,
)
from flowgen.utils.json_extract import extract_json


class TestExtractJson:
    def test_plain_json(self):
        assert extract_json('{"diagrams": []}') == {"diagrams": []}

    def test_fenced_block_with_prose(self):
        text = 'Here you go:\n```json\n{"diagrams": [{"title": "A"}]}\n```\nEnjoy!'
        assert extract_json(text) == {"diagrams": [{"title": "A"}]}

    def test_object_embedded_in_prose(self):
        text = 'Sure! {"title": "X", "nodes": []} Hope that helps {not json}'
        assert extract_json(text) == {"title": "X", "nodes": []}

    def test_braces_inside_strings_do_not_break_span(self):
        text = 'Result: {"title": "uses } and { inside", "nodes": []} done'
        assert extract_json(text)["title"] == "uses } and { inside"

    def test_bare_list(self):
        assert extract_json('prefix [1, 2, 3] suffix') == [1, 2, 3]

    def test_nothing_parseable_raises(self):
        with pytest.raises(ValueError):
            extract_json("I could not produce a diagram, sorry.")

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            extract_json("")


class TestSlugify:
    def test_keeps_safe_ids(self):
        assert slugify_id("order_service") == "order_service"

    def test_replaces_unsafe_characters(self):
        assert slugify_id("Order Service!") == "Order_Service"

    def test_leading_digit(self):
        assert slugify_id("1st step") == "n_1st_step"

    def test_reserved_word(self):
        assert slugify_id("end") == "end_node"
        assert slugify_id("End") == "End_node"

    def test_nothing_left(self):
        assert slugify_id("!!!") == ""
        assert slugify_id(None) == ""


def test_direction_aliases():
    assert normalize_direction("LR") == "LR"
    assert normalize_direction("horizontal") == "LR"
    assert normalize_direction("Top Down") == "TD"
    assert normalize_direction("bottom_up") == "BT"
    assert normalize_direction("diagonal") == "TD"
    assert normalize_direction(None) == "TD"


def test_diagram_type_aliases():
    assert normalize_diagram_type("sequenceDiagram") == "sequence"
    assert normalize_diagram_type("graph") == "flowchart"
    assert normalize_diagram_type("mindmap") == "flowchart"


class TestCoerceDiagrams:
    def test_diagrams_wrapper(self):
        out = coerce_diagrams({"diagrams": [{"title": "A", "nodes": ["x"]}, {"title": "B", "nodes": ["y"]}]})
        assert [d["title"] for d in out] == ["A", "B"]

    def test_bare_list(self):
        out = coerce_diagrams([{"title": "A", "nodes": ["x"]}])
        assert len(out) == 1

    def test_single_diagram_object(self):
        out = coerce_diagrams({"title": "Solo", "nodes": [{"id": "a", "label": "A"}], "edges": []})
        assert len(out) == 1
        assert out[0]["title"] == "Solo"

    def test_object_without_diagrams_is_malformed(self):
        with pytest.raises(ValueError):
            coerce_diagrams({"answer": "no"})

    def test_scalar_is_malformed(self):
        with pytest.raises(ValueError):
            coerce_diagrams("just text")

    def test_string_nodes_become_id_and_label(self):
        out = coerce_diagrams({"diagrams": [{"title": "T", "nodes": ["Check stock"], "edges": []}]})
        assert out[0]["nodes"] == [{"id": "Check_stock", "label": "Check stock", "shape": None}]

    def test_edge_endpoints_follow_slugified_ids(self):
        out = coerce_diagrams({"diagrams": [{
            "title": "T",
            "nodes": [{"id": "end", "label": "Finish"}, {"id": "1", "label": "One"}],
            "edges": [{"from": "1", "to": "end"}],
        }]})
        d = out[0]
        assert [n["id"] for n in d["nodes"]] == ["end_node", "n_1"]
        assert d["edges"] == [{"from": "n_1", "to": "end_node", "label": None}]

    def test_edges_may_reference_labels_and_alternate_keys(self):
        out = coerce_diagrams({"diagrams": [{
            "title": "T",
            "nodes": [{"id": "a", "label": "Receive order"}, {"id": "b", "label": "Pack"}],
            "edges": [{"source": "Receive order", "target": "b", "text": "next"}],
        }]})
        assert out[0]["edges"] == [{"from": "a", "to": "b", "label": "next"}]

    def test_unknown_endpoint_is_kept_not_invented(self):
        out = coerce_diagrams({"diagrams": [{
            "title": "T",
            "nodes": [{"id": "a", "label": "A"}],
            "edges": [{"from": "a", "to": "ghost"}],
        }]})
        d = out[0]
        assert [n["id"] for n in d["nodes"]] == ["a"]
        assert d["edges"][0]["to"] == "ghost"

    def test_type_direction_and_shape_normalized(self):
        out = coerce_diagrams({"diagrams": [{
            "title": "T",
            "type": "sequenceDiagram",
            "orientation": "horizontal",
            "nodes": [{"id": "db", "label": "DB", "shape": "database"}, {"id": "x", "label": "X", "shape": "blob"}],
        }]})
        d = out[0]
        assert d["diagramType"] == "sequence"
        assert d["direction"] == "LR"
        assert [n["shape"] for n in d["nodes"]] == ["cylinder", None]

    def test_non_object_items_pass_through(self):
        out = coerce_diagrams({"diagrams": ["not a diagram", {"title": "ok", "nodes": ["a"]}]})
        assert out[0] == "not a diagram"
        assert out[1]["title"] == "ok"


def test_parse_diagrams_from_fenced_response():
    text = '```json\n{"diagrams": [{"title": "Flow", "nodes": ["a", "b"], "edges": [{"from": "a", "to": "b"}]}]}\n```'
    out = parse_diagrams(text)
    assert out[0]["edges"] == [{"from": "a", "to": "b", "label": None}]


def test_parse_diagrams_skips_bracketed_prose():
    text = (
        "Here are the [2] diagrams you asked for:\n"
        '{"diagrams": [{"title": "A", "nodes": ["a"]}, {"title": "B", "nodes": ["b"]}]}'
    )
    out = parse_diagrams(text)
    assert [d["title"] for d in out] == ["A", "B"]


def test_parse_diagrams_prefers_diagram_payload_over_earlier_object():
    text = 'Settings {"note": "v1"} then {"diagrams": [{"title": "A", "nodes": ["a"]}]}'
    assert parse_diagrams(text)[0]["title"] == "A"


def test_parse_diagrams_without_json_raises():
    with pytest.raises(ValueError):
        parse_diagrams("No diagrams today, sorry.")
