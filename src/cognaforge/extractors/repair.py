from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable

from ..utils import strip_control_chars

logger = logging.getLogger(__name__)

# {'key': or {key: or , key:  -> "key":
_KEY_RE = re.compile(r"([{,]\s*)(?:'([^'\"\n]+)'|([A-Za-z_][\w\-]*))\s*:")
# : 'value'  -> : "value"
_SQ_VALUE_RE = re.compile(r"(:\s*)'((?:[^'\\\n]|\\.)*)'(\s*[,}\]\n])")
# ['a', 'b']  -> ["a", "b"]
_SQ_ITEM_RE = re.compile(r"([\[,]\s*)'((?:[^'\\\n]|\\.)*)'(?=\s*[,\]])")
_PY_LITERALS = [
    (re.compile(r"(:\s*|[\[,]\s*)True\b"), r"\1true"),
    (re.compile(r"(:\s*|[\[,]\s*)False\b"), r"\1false"),
    (re.compile(r"(:\s*|[\[,]\s*)None\b"), r"\1null"),
]
# "a": "x"\n"b": ...  -> "a": "x",\n"b": ...
_MISSING_COMMA_RE = re.compile(r'("|\d|true|false|null|[}\]])([ \t]*\r?\n\s*)(")')
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
# a double-quoted literal, possibly unterminated at end of text
_STRING_RE = re.compile(r'"(?:[^"\\]|\\.)*(?:"|\\?\Z)', re.DOTALL)


def _outside_strings(s: str, fn: Callable[[str], str]) -> str:
    out: list[str] = []
    pos = 0
    for m in _STRING_RE.finditer(s):
        out.append(fn(s[pos:m.start()]))
        out.append(m.group(0))
        pos = m.end()
    out.append(fn(s[pos:]))
    return "".join(out)


def _quote_keys(chunk: str) -> str:
    chunk = _KEY_RE.sub(lambda m: f'{m.group(1)}"{m.group(2) or m.group(3)}":', chunk)
    chunk = _SQ_VALUE_RE.sub(lambda m: m.group(1) + json.dumps(m.group(2)) + m.group(3), chunk)
    chunk = _SQ_ITEM_RE.sub(lambda m: m.group(1) + json.dumps(m.group(2)), chunk)
    for pat, repl in _PY_LITERALS:
        chunk = pat.sub(repl, chunk)
    return chunk


def _drop_trailing_commas(s: str) -> str:
    return _outside_strings(s, lambda chunk: _TRAILING_COMMA_RE.sub(r"\1", chunk))


def try_parse(candidate: str) -> Any | None:
    try:
        return json.loads(candidate)
    except (json.JSONDecodeError, TypeError, ValueError):
        return None


def escape_newlines_in_strings(s: str) -> str:
    out: list[str] = []
    in_str = False
    escaped = False
    for ch in s:
        if in_str:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_str = False
            elif ch == "\n":
                out.append("\\n")
                continue
            elif ch == "\r":
                continue
            elif ch == "\t":
                out.append("\\t")
                continue
        elif ch == '"':
            in_str = True
        out.append(ch)
    return "".join(out)


def balance_brackets(s: str) -> str:
    """
    Append the closers for every unmatched { / [ (innermost first), closing an
    unterminated string literal on the way. Stray closers are dropped.
    """
    stack: list[str] = []
    out: list[str] = []
    in_str = False
    escaped = False
    for ch in s:
        if in_str:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_str = False
            out.append(ch)
            continue
        if ch == '"':
            in_str = True
        elif ch == "{":
            stack.append("}")
        elif ch == "[":
            stack.append("]")
        elif ch in "}]":
            if not stack or stack[-1] != ch:
                continue
            stack.pop()
        out.append(ch)

    if in_str:
        if escaped:
            out.pop()
        out.append('"')
    out.extend(reversed(stack))
    return "".join(out)


def drop_incomplete_tail(s: str) -> str | None:
    """
    Cut back to the last comma outside a string literal, i.e. drop a member
    that was truncated mid-way ({"a": 1, "b": ). None if there is no comma.
    """
    in_str = False
    escaped = False
    last_comma = -1
    for i, ch in enumerate(s):
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
        elif ch == ",":
            last_comma = i
    if last_comma == -1:
        return None
    return s[:last_comma]


def _textual_repairs(s: str) -> str:
    s = strip_control_chars(s)
    s = escape_newlines_in_strings(s)
    s = _outside_strings(s, _quote_keys)
    # raw newlines only survive outside literals at this point
    s = _MISSING_COMMA_RE.sub(r"\1,\2\3", s)
    return s


def repair_json(candidate: str) -> tuple[Any | None, list[str]]:
    """
    Best-effort repair of a malformed JSON candidate.

    Returns (parsed, reasons). parsed is None when every repair attempt
    still fails to parse.
    """
    reasons: list[str] = []

    fixed = _drop_trailing_commas(_textual_repairs(candidate))
    parsed = try_parse(fixed)
    if parsed is not None:
        reasons.append("repair_textual")
        return parsed, reasons

    balanced = _drop_trailing_commas(balance_brackets(fixed))
    parsed = try_parse(balanced)
    if parsed is not None:
        reasons.append("repair_balanced")
        return parsed, reasons

    # truncated mid-member: drop the tail member(s) and rebalance
    trimmed = fixed
    for _ in range(3):
        trimmed = drop_incomplete_tail(trimmed)
        if trimmed is None:
            break
        parsed = try_parse(_drop_trailing_commas(balance_brackets(trimmed)))
        if parsed is not None:
            reasons.append("repair_truncated_tail")
            return parsed, reasons

    logger.debug("JSON repair failed for candidate of %d chars", len(candidate))
    reasons.append("repair_failed")
    return None, reasons
