from __future__ import annotations

import json
import re

from ..utils import field_words


def _json_string_re(field: str) -> re.Pattern[str]:
    return re.compile(r'"' + re.escape(field) + r'"\s*:\s*"((?:[^"\\]|\\.)*)"', re.DOTALL)


def _json_array_re(field: str) -> re.Pattern[str]:
    return re.compile(r'"' + re.escape(field) + r'"\s*:\s*(\[[^\]]*\])', re.DOTALL)


def _loose_re(field: str, is_array: bool = False) -> re.Pattern[str]:
    # title: Foo   /   'title' = Foo   (stops at comma, newline or })
    # array fields keep their commas: keyPoints: a, b, c
    stop = r"\n}" if is_array else r",\n}"
    return re.compile(
        r"""(?<![\w"'])["']?""" + re.escape(field) + r"""["']?\s*[:=]\s*([^""" + stop + r"""]+)""",
    )


def _label_re(field: str) -> re.Pattern[str]:
    # "Key points - a, b and c." ; label words may be split by space, _ or -
    words = field_words(field)
    if not words:
        words = [field]
    label = r"[\s_\-]*".join(re.escape(w) for w in words)
    return re.compile(r"\b" + label + r"\b\W{0,3}\s*([^.!?\n]+[.!?]?)", re.IGNORECASE)


def _unescape(raw: str) -> str:
    try:
        return json.loads(f'"{raw}"')
    except (json.JSONDecodeError, ValueError):
        return raw


def _clean(value: str) -> str:
    return value.strip().strip("\"'").strip()


def scrape_field(text: str, field: str, is_array: bool = False) -> tuple[str | None, str]:
    """
    Pull one field's value out of text that no longer parses as JSON.
    Returns (value, reason); value is None when nothing matched.

    Patterns, in order:
      1) "field": [ ... ]          (array fields only, returned raw)
      2) "field": "value"
      3) field: value              (ends at comma / newline / closing brace;
                                    array fields only stop at newline or brace)
      4) Field label ... up to the next sentence terminator
    """
    if is_array:
        m = _json_array_re(field).search(text)
        if m:
            return m.group(1), "scraped_json_array"

    m = _json_string_re(field).search(text)
    if m:
        return _unescape(m.group(1)).strip(), "scraped_json_pair"

    m = _loose_re(field, is_array).search(text)
    if m:
        val = _clean(m.group(1))
        if val:
            return val, "scraped_loose_pair"

    m = _label_re(field).search(text)
    if m:
        # the terminator bounds the capture but is not part of the value
        val = _clean(m.group(1).rstrip(".!?"))
        if val:
            return val, "scraped_label"

    return None, "not_found"
