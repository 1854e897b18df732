from __future__ import annotations

from typing import Any

from ..extractors import FieldSchema
from .base import LANGUAGE_LINE, output_instructions, require_min_length, run_flow

SUMMARY_SCHEMA = FieldSchema.of(["summary"])
ANALYSIS_SCHEMA = FieldSchema.of(["summary", "keyPoints", "keywords"], arrays=["keyPoints", "keywords"])


def build_summary_prompt(note_content: str) -> str:
    return f"""
Você é um assistente especialista em resumir textos de forma eficaz. {LANGUAGE_LINE}
Resuma a nota abaixo (em Markdown) de forma concisa, mantendo as ideias principais.

NOTA:
<<<{note_content}>>>

{output_instructions(SUMMARY_SCHEMA)}
""".strip()


def summarize_note(client: Any, note_content: str) -> dict[str, Any]:
    note_content = require_min_length("O conteúdo da nota", note_content, 20)
    return run_flow(client, "summarize_note", build_summary_prompt(note_content), SUMMARY_SCHEMA)


def build_analysis_prompt(text: str) -> str:
    return f"""
Você é um assistente especialista em análise e sumarização de textos. {LANGUAGE_LINE}
Analise o texto abaixo e forneça:
1. summary: um resumo conciso.
2. keyPoints: os principais pontos-chave ou argumentos.
3. keywords: as palavras-chave mais relevantes.

TEXTO:
<<<{text}>>>

{output_instructions(ANALYSIS_SCHEMA)}
""".strip()


def analyze_text(client: Any, text: str) -> dict[str, Any]:
    text = require_min_length("O texto", text, 50)
    return run_flow(client, "analyze_text", build_analysis_prompt(text), ANALYSIS_SCHEMA)
