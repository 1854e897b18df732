"""
Best-effort conversion of free-text model output into a complete record.

normalize_llm_output never raises on bad model text. The tiers run in order,
each only when the previous one came up empty:

  candidate  fenced ```json block, else every top-level {...} / [...] span
  direct     strict json.loads of a candidate
  repaired   textual repairs + bracket balancing, then json.loads
  regex      per-field scrape of the raw text
  defaults   [] for arrays, "" for optional fields, placeholder otherwise

The first candidate whose parse names a schema field wins; prose such as
"see [1]" ahead of the real object is skipped. Array fields holding a string
are coerced into lists at the end.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from .extractors import (
    FieldSchema,
    Normalized,
    coerce_array,
    find_candidates,
    is_placeholder,
    repair_json,
    scrape_field,
    try_parse,
)

logger = logging.getLogger(__name__)


def _names_field(parsed: Any, schema: FieldSchema) -> dict[str, Any] | None:
    """The record carried by parsed if it names at least one schema field."""
    if isinstance(parsed, list) and parsed:
        parsed = parsed[0]
    if isinstance(parsed, dict) and any(name in parsed for name in schema.fields):
        return parsed
    return None


def _as_record(parsed: Any, schema: FieldSchema) -> dict[str, Any] | None:
    """Map a parsed JSON value onto a dict, or None if it can't carry fields."""
    if isinstance(parsed, dict):
        return parsed
    if isinstance(parsed, list) and parsed:
        # a bare list answers the schema's only list field: [{"front": ...}, ...]
        if len(schema.array_fields) == 1:
            (only,) = schema.array_fields
            return {only: parsed}
        if isinstance(parsed[0], dict):
            return parsed[0]
    return None


def _parse_span(span: str, reasons: list[str]) -> tuple[Any | None, str]:
    parsed = try_parse(span)
    if parsed is not None:
        return parsed, "direct"
    parsed, repair_reasons = repair_json(span)
    reasons.extend(repair_reasons)
    return parsed, "repaired"


def _parse_candidate(text: str, schema: FieldSchema, reasons: list[str]) -> tuple[dict[str, Any] | None, str]:
    spans, where = find_candidates(text)
    reasons.append(where)

    fallback: tuple[dict[str, Any], str] | None = None
    for span in spans:
        parsed, tier = _parse_span(span, reasons)
        if parsed is None:
            continue
        record = _names_field(parsed, schema)
        if record is not None:
            return record, tier
        if fallback is None:
            record = _as_record(parsed, schema)
            if record is not None:
                fallback = (record, tier)

    if fallback is not None:
        reasons.append("no_schema_field_in_spans")
        return fallback
    return None, "regex"


def _as_text(value: Any) -> str:
    """Scalar fields hold strings; nested JSON is kept as its JSON text."""
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return value if isinstance(value, str) else str(value)


def normalize_with_trace(raw_text: Any, schema: FieldSchema) -> Normalized:
    """Like normalize_llm_output, but also reports the tier used and why."""
    text = raw_text if isinstance(raw_text, str) else ""
    reasons: list[str] = []

    record, tier = _parse_candidate(text, schema, reasons)
    found = record or {}

    values: dict[str, Any] = {}
    scraped_any = False
    for name in schema.fields:
        if name in found:
            if found[name] is None:
                # explicit null from the model: don't go scraping for it
                values[name] = schema.neutral_default(name)
                reasons.append(f"field_null:{name}")
            elif schema.is_array(name):
                values[name] = found[name]
            else:
                values[name] = _as_text(found[name])
            continue

        val, why = scrape_field(text, name, schema.is_array(name))
        if val is not None:
            values[name] = val
            scraped_any = True
            reasons.append(f"{why}:{name}")
            continue

        values[name] = schema.neutral_default(name)
        reasons.append(f"field_missing:{name}")

    for name in schema.array_fields:
        if not isinstance(values[name], list):
            values[name] = coerce_array(values[name])

    if record is None and not scraped_any:
        tier = "empty"

    placeholders = [n for n in schema.fields if is_placeholder(values[n], n)]
    if placeholders:
        logger.warning("could not extract %s from model output (tier=%s)", ", ".join(placeholders), tier)
    else:
        logger.debug("normalized model output via %s: %s", tier, reasons)

    return Normalized(values=values, tier=tier, reasons=reasons)


def normalize_llm_output(raw_text: Any, schema: FieldSchema) -> dict[str, Any]:
    return normalize_with_trace(raw_text, schema).values
