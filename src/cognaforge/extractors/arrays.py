from __future__ import annotations

import json
import re
from typing import Any

BULLET_LINE_RE = re.compile(r"^\s*(?:[-•*]|\d+[.)])\s+(.+?)\s*$", re.MULTILINE)


def _bullet_items(s: str) -> list[str]:
    return [m.group(1).strip() for m in BULLET_LINE_RE.finditer(s)]


def _clean_item(item: Any) -> Any:
    if isinstance(item, str):
        return item.strip().strip("\"'").strip()
    return item


def _keep(item: Any) -> bool:
    return item not in ("", None)


def coerce_array(value: Any) -> list[Any]:
    """
    Turn whatever the model gave for a list-typed field into a list.

    Strings are tried as: a JSON array, a multi-line bullet list, a comma
    separated list, and finally a single item.
    """
    if isinstance(value, list):
        return [_clean_item(v) for v in value if _keep(_clean_item(v))]
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    if not isinstance(value, str):
        return [value]

    s = value.strip()
    if not s:
        return []

    if s.startswith("["):
        try:
            parsed = json.loads(s)
        except (json.JSONDecodeError, ValueError):
            parsed = None
        if isinstance(parsed, list):
            return coerce_array(parsed)
        # ["a", "b"  (truncated) -> fall through without the bracket
        s = s.strip("[]").strip()

    bullets = _bullet_items(s)
    if len(bullets) >= 2:
        return [b for b in (_clean_item(x) for x in bullets) if _keep(b)]

    if "," in s:
        return [p for p in (_clean_item(x) for x in s.split(",")) if _keep(p)]

    if len(bullets) == 1:
        return [_clean_item(bullets[0])]

    return [_clean_item(s)]
