import json
import re
from typing import Any, Iterator

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)


def _balanced_spans(text: str) -> Iterator[str]:
    """
    Yield every top-level {...} / [...] span, in order of appearance.
    Brackets inside JSON strings are ignored.
    """
    openers = {"{": "}", "[": "]"}
    start = None
    stack = []
    in_string = False
    escaped = False

    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"' and stack:
            in_string = True
        elif ch in openers:
            if not stack:
                start = i
            stack.append(openers[ch])
        elif stack and ch == stack[-1]:
            stack.pop()
            if not stack:
                yield text[start:i + 1]
                start = None
        elif stack and ch in ("}", "]"):
            # mismatched closer: abandon this span
            stack = []
            start = None


def iter_json_values(text: str) -> Iterator[Any]:
    """
    Yield every parseable JSON value in LLM output, most likely first:
    fenced ```json blocks, then the whole text, then each balanced
    {...} or [...] span in order of appearance.
    """
    if not text or not isinstance(text, str):
        return

    candidates = [m.strip() for m in _FENCE_RE.findall(text)]
    candidates.append(text.strip())

    for candidate in candidates:
        if not candidate:
            continue
        try:
            yield json.loads(candidate)
        except json.JSONDecodeError:
            pass

    for span in _balanced_spans(text):
        try:
            yield json.loads(span)
        except json.JSONDecodeError:
            continue


def extract_json(text: str) -> Any:
    """
    Extract the first parseable JSON value from LLM output
    (see iter_json_values for the search order).

    Raises ValueError when nothing parses.
    """
    if not text or not isinstance(text, str):
        raise ValueError("Empty response")

    for value in iter_json_values(text):
        return value

    raise ValueError("No JSON value found in response")
