from __future__ import annotations

import re
from typing import Iterator

# ```json ... ``` (tag optional). An unterminated fence runs to end of text.
FENCE_RE = re.compile(r"```[ \t]*(?:json|JSON)?[ \t]*\r?\n?(.*?)(?:```|\Z)", re.DOTALL)


def find_fenced_block(text: str) -> str | None:
    for m in FENCE_RE.finditer(text):
        body = m.group(1).strip()
        if body:
            return body
    return None


def _span_end(text: str, start: int) -> int | None:
    """Index just past the closer matching text[start], or None if it never closes."""
    depth = 0
    in_str = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_str:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_str = False
            continue
        if ch == '"':
            in_str = True
        elif ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
            if depth == 0:
                return i + 1
    return None


def iter_json_spans(text: str) -> Iterator[str]:
    """
    Yield every top-level {...} or [...] span in order, scanning string-aware
    so braces inside string literals don't count. A span that never closes
    (truncated output) runs to the end of the text and ends the scan.
    """
    pos = 0
    while True:
        starts = [i for i in (text.find("{", pos), text.find("[", pos)) if i != -1]
        if not starts:
            return
        start = min(starts)
        end = _span_end(text, start)
        if end is None:
            yield text[start:].strip()
            return
        yield text[start:end]
        pos = end


def find_json_span(text: str) -> str | None:
    """First span from iter_json_spans, or None."""
    return next(iter_json_spans(text), None)


def find_candidates(text: str) -> tuple[list[str], str]:
    """
    All spans worth parsing, in order: those inside the first fenced block
    (or the block itself when it holds none), else the bare spans of the text.
    """
    fenced = find_fenced_block(text)
    if fenced is not None:
        # fenced blocks sometimes carry prose around the object too
        return (list(iter_json_spans(fenced)) or [fenced]), "fenced_block"

    spans = list(iter_json_spans(text))
    if spans:
        return spans, "bare_span"
    return [], "no_candidate"


def find_candidate(text: str) -> tuple[str | None, str]:
    """Fenced block first, then the first bare object/array span."""
    spans, where = find_candidates(text)
    return (spans[0] if spans else None), where
