from __future__ import annotations

import json
import logging
from typing import Any

from ..extractors import FieldSchema
from ..normalizer import normalize_with_trace

logger = logging.getLogger(__name__)

LANGUAGE_LINE = "Responda em português do Brasil."


def output_instructions(schema: FieldSchema) -> str:
    """Tell the model the exact JSON shape to answer with."""
    example: dict[str, Any] = {}
    for name in schema.fields:
        example[name] = ["..."] if schema.is_array(name) else "..."
    return (
        "Formate a saída APENAS como um objeto JSON válido, sem texto antes ou depois, "
        f"com as chaves: {', '.join(schema.fields)}.\n"
        f"Exemplo de formato:\n{json.dumps(example, ensure_ascii=False)}"
    )


def require_min_length(name: str, value: str, min_len: int) -> str:
    value = (value or "").strip()
    if len(value) < min_len:
        raise ValueError(f"{name} precisa ter pelo menos {min_len} caracteres.")
    return value


def run_flow(client: Any, name: str, prompt: str, schema: FieldSchema) -> dict[str, Any]:
    """
    Ask the model and normalize its answer. Transport errors from the client
    propagate; malformed answers never do.
    """
    raw = client.generate(prompt)
    result = normalize_with_trace(raw, schema)
    logger.info("flow %s answered via %s", name, result.tier)
    return result.values
