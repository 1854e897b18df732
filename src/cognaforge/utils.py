from __future__ import annotations
import re

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

def strip_control_chars(s: str) -> str:
    # keeps \t, \n and \r
    return _CONTROL_RE.sub("", s)

def field_words(field: str) -> list[str]:
    """
    Split a field name into lowercase words:
      keyPoints -> ["key", "points"], smart_notes -> ["smart", "notes"]
    """
    spaced = _CAMEL_RE.sub(" ", field).replace("_", " ").replace("-", " ")
    return [w.lower() for w in spaced.split() if w]
