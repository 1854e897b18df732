from __future__ import annotations

import re
from typing import Iterable

from rapidfuzz import fuzz

_PUNCT_RE = re.compile(r"[.,?!;:¿¡\"'()]")


def keywords(question: str) -> list[str]:
    """Lowercased words longer than 3 characters, punctuation removed."""
    if not isinstance(question, str):
        return []
    cleaned = _PUNCT_RE.sub("", question.lower())
    return [w for w in cleaned.split() if len(w) > 3]


def keyword_overlap(previous: str, candidate: str) -> float:
    """Share of the previous question's keywords that reappear in the candidate."""
    prev = keywords(previous)
    if not prev:
        return 0.0
    cand = set(keywords(candidate))
    return sum(1 for w in prev if w in cand) / len(prev)


def fuzzy_score(a: str, b: str) -> float:
    if not isinstance(a, str) or not isinstance(b, str):
        return 0.0
    return fuzz.token_set_ratio(a.lower(), b.lower())


def is_repeat(
    candidate: str,
    previous: Iterable[str | None],
    threshold: float = 0.7,
    fuzzy_ratio: float = 92.0,
) -> bool:
    for prev in previous:
        if not prev:
            continue
        if keyword_overlap(prev, candidate) > threshold:
            return True
        if fuzzy_score(prev, candidate) >= fuzzy_ratio:
            return True
    return False
