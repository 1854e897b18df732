from .base import FieldSchema, Normalized, placeholder, is_placeholder
from .candidates import find_candidate, find_candidates, find_fenced_block, find_json_span, iter_json_spans
from .repair import repair_json, try_parse
from .scrape import scrape_field
from .arrays import coerce_array

__all__ = [
    "FieldSchema",
    "Normalized",
    "placeholder",
    "is_placeholder",
    "find_candidate",
    "find_candidates",
    "find_fenced_block",
    "find_json_span",
    "iter_json_spans",
    "repair_json",
    "try_parse",
    "scrape_field",
    "coerce_array",
]
