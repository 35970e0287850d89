import re
from typing import Any, Dict, List, Optional

from flowgen.utils.json_extract import iter_json_values


# ============================================================
# NORMALIZATION TABLES (LLM TRUST BOUNDARY)
# ============================================================

DIRECTION_ALIASES = {
    "td": "TD",
    "tb": "TB",
    "lr": "LR",
    "rl": "RL",
    "bt": "BT",
    "vertical": "TD",
    "top-down": "TD",
    "top-to-bottom": "TB",
    "top-bottom": "TB",
    "horizontal": "LR",
    "left-right": "LR",
    "left-to-right": "LR",
    "right-left": "RL",
    "right-to-left": "RL",
    "bottom-up": "BT",
    "bottom-top": "BT",
    "bottom-to-top": "BT",
}

DIAGRAM_TYPE_ALIASES = {
    "flowchart": "flowchart",
    "flow": "flowchart",
    "graph": "flowchart",
    "process": "flowchart",
    "sequence": "sequence",
    "sequencediagram": "sequence",
    "sequence-diagram": "sequence",
}

SHAPE_ALIASES = {
    "rect": "rect",
    "rectangle": "rect",
    "box": "rect",
    "process": "rect",
    "rounded": "rounded",
    "round": "rounded",
    "rounded-rect": "rounded",
    "rounded_rect": "rounded",
    "stadium": "stadium",
    "pill": "stadium",
    "terminal": "stadium",
    "start": "stadium",
    "end": "stadium",
    "circle": "circle",
    "diamond": "diamond",
    "rhombus": "diamond",
    "decision": "diamond",
    "hexagon": "hexagon",
    "cylinder": "cylinder",
    "database": "cylinder",
    "db": "cylinder",
    "parallelogram": "parallelogram",
    "io": "parallelogram",
    "input": "parallelogram",
    "output": "parallelogram",
    "subroutine": "subroutine",
}

# Words the Mermaid lexer treats as keywords when used as bare ids
MERMAID_RESERVED = {
    "end", "graph", "flowchart", "subgraph", "direction", "style", "class",
    "classdef", "click", "linkstyle", "default", "participant", "actor",
    "loop", "alt", "else", "opt", "par", "and", "rect", "note", "critical",
    "break", "activate", "deactivate", "autonumber", "sequencediagram",
}


def slugify_id(raw: Any) -> str:
    """
    Turn an LLM-supplied identifier into a Mermaid-safe one:
    [A-Za-z0-9_], no leading digit, never a reserved word.
    Returns "" when nothing usable is left.
    """
    if raw is None:
        return ""
    slug = re.sub(r"[^A-Za-z0-9_]+", "_", str(raw).strip()).strip("_")
    if not slug:
        return ""
    if slug[0].isdigit():
        slug = f"n_{slug}"
    if slug.lower() in MERMAID_RESERVED:
        slug = f"{slug}_node"
    return slug


def normalize_direction(value: Any) -> str:
    if not isinstance(value, str):
        return "TD"
    key = value.strip().lower().replace("_", "-").replace(" ", "-")
    return DIRECTION_ALIASES.get(key, "TD")


def normalize_diagram_type(value: Any) -> str:
    if not isinstance(value, str):
        return "flowchart"
    key = value.strip().lower().replace("_", "-").replace(" ", "-")
    return DIAGRAM_TYPE_ALIASES.get(key, "flowchart")


def normalize_shape(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return SHAPE_ALIASES.get(value.strip().lower().replace(" ", "-"))


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _first(data: Dict, *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return value
    return None


# ============================================================
# DIAGRAM COERCION
# ============================================================

def _coerce_nodes(raw_nodes: Any):
    """
    Returns (nodes, id_map, label_map). Items that are neither strings
    nor objects are passed through so schema validation reports them.
    """
    nodes: List[Any] = []
    id_map: Dict[str, str] = {}
    label_map: Dict[str, str] = {}

    if not isinstance(raw_nodes, list):
        return nodes, id_map, label_map

    for n in raw_nodes:
        if isinstance(n, str):
            raw_id, label, shape = n, n, None
        elif isinstance(n, dict):
            raw_id = _first(n, "id", "name", "key")
            label = _first(n, "label", "text", "name", "id")
            shape = normalize_shape(n.get("shape") or n.get("type"))
        else:
            nodes.append(n)
            continue

        node_id = slugify_id(raw_id)
        if raw_id is not None:
            id_map.setdefault(_text(raw_id), node_id)
        if label is not None:
            label_map.setdefault(_text(label).lower(), node_id)

        nodes.append({"id": node_id, "label": _text(label), "shape": shape})

    return nodes, id_map, label_map


def _resolve_endpoint(raw: Any, id_map: Dict[str, str], label_map: Dict[str, str]) -> Optional[str]:
    if raw is None:
        return None
    key = _text(raw)
    if key in id_map:
        return id_map[key]
    if key.lower() in label_map:
        return label_map[key.lower()]
    # Unknown endpoint: keep it recognisable so the validator can report it
    return slugify_id(key) or key


def _coerce_edges(raw_edges: Any, id_map: Dict[str, str], label_map: Dict[str, str]) -> List[Any]:
    edges: List[Any] = []
    if not isinstance(raw_edges, list):
        return edges

    for e in raw_edges:
        if not isinstance(e, dict):
            edges.append(e)
            continue
        label = _text(_first(e, "label", "text", "relation"))
        edges.append({
            "from": _resolve_endpoint(_first(e, "from", "source", "start"), id_map, label_map),
            "to": _resolve_endpoint(_first(e, "to", "target", "end"), id_map, label_map),
            "label": label or None,
        })
    return edges


def coerce_diagram(data: Any) -> Any:
    """Coerce one loosely-typed diagram object. Non-objects pass through untouched."""
    if not isinstance(data, dict):
        return data

    nodes, id_map, label_map = _coerce_nodes(data.get("nodes"))
    edges = _coerce_edges(data.get("edges", data.get("connections")), id_map, label_map)

    return {
        "title": _text(_first(data, "title", "name")),
        "diagramType": normalize_diagram_type(_first(data, "diagramType", "diagram_type", "type")),
        "direction": normalize_direction(_first(data, "direction", "orientation")),
        "nodes": nodes,
        "edges": edges,
    }


def coerce_diagrams(payload: Any) -> List[Any]:
    """
    Accepts {"diagrams": [...]}, a bare list of diagrams, or a single
    diagram object. Raises ValueError when the payload has none of
    these shapes.

    Coercion never invents nodes or edges.
    """
    if isinstance(payload, dict):
        if isinstance(payload.get("diagrams"), list):
            items = payload["diagrams"]
        elif "nodes" in payload:
            items = [payload]
        else:
            raise ValueError("Response JSON has no 'diagrams' array")
    elif isinstance(payload, list):
        items = payload
    else:
        raise ValueError(f"Response JSON is a {type(payload).__name__}, expected an object or array")

    return [coerce_diagram(item) for item in items]


def _carries_diagrams(payload: Any) -> bool:
    if isinstance(payload, dict):
        return isinstance(payload.get("diagrams"), list) or "nodes" in payload
    if isinstance(payload, list):
        return any(isinstance(item, dict) for item in payload)
    return False


def parse_diagrams(text: str) -> List[Any]:
    """
    Find the JSON value in the response that holds the diagrams and coerce
    it. Prose such as "the [2] diagrams you asked for" can contain JSON-looking
    fragments, so the first value shaped like a diagram payload wins; when
    none is, the first parseable value is coerced (and usually rejected).

    Raises ValueError on malformed output.
    """
    first = None
    found = False
    for value in iter_json_values(text):
        if _carries_diagrams(value):
            return coerce_diagrams(value)
        if not found:
            first, found = value, True

    if not found:
        raise ValueError("No JSON value found in response")
    return coerce_diagrams(first)
