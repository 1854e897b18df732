from __future__ import annotations

from typing import Any

from ..extractors import FieldSchema
from .base import LANGUAGE_LINE, output_instructions, run_flow

CONCEPT_SCHEMA = FieldSchema.of(
    ["simplifiedExplanation", "analogy", "keyPoints", "understandingQuestion"],
    arrays=["keyPoints"],
)
FLASHCARD_SCHEMA = FieldSchema.of(["flashcards"], arrays=["flashcards"])
KNOWLEDGE_SCHEMA = FieldSchema.of(["mindMap", "smartNotes"])

MIN_CARDS = 1
MAX_CARDS = 20


def build_concept_prompt(concept: str) -> str:
    return f"""
Você é um educador especialista em simplificar conceitos complexos. {LANGUAGE_LINE}
Clarifique o conceito "{concept}" fornecendo:
1. simplifiedExplanation: uma explicação clara em linguagem simples.
2. analogy: uma analogia ou metáfora intuitiva.
3. keyPoints: de 3 a 5 pontos mais importantes.
4. understandingQuestion: uma pergunta para o usuário verificar sua compreensão.

{output_instructions(CONCEPT_SCHEMA)}
""".strip()


def clarify_concept(client: Any, concept: str) -> dict[str, Any]:
    concept = (concept or "").strip()
    if not concept:
        raise ValueError("concept is required")
    return run_flow(client, "clarify_concept", build_concept_prompt(concept), CONCEPT_SCHEMA)


def build_flashcard_prompt(topic: str, number_of_cards: int) -> str:
    return f"""
Você é um assistente especialista em criar materiais de estudo eficazes. {LANGUAGE_LINE}
Gere {number_of_cards} flashcards distintos sobre o tópico: "{topic}".
Cada flashcard tem "front" (termo, conceito ou pergunta curta) e "back" (definição ou resposta concisa).

Formate a saída como um objeto JSON com a chave "flashcards", um array de objetos com as chaves "front" e "back".
Exemplo: {{"flashcards": [{{"front": "...", "back": "..."}}]}}
""".strip()


def _valid_card(card: Any) -> bool:
    return (
        isinstance(card, dict)
        and isinstance(card.get("front"), str) and card["front"].strip() != ""
        and isinstance(card.get("back"), str) and card["back"].strip() != ""
    )


def generate_flashcards(client: Any, topic: str, number_of_cards: int) -> dict[str, Any]:
    topic = (topic or "").strip()
    if not topic:
        raise ValueError("topic is required")
    if not MIN_CARDS <= number_of_cards <= MAX_CARDS:
        raise ValueError(f"number_of_cards must be between {MIN_CARDS} and {MAX_CARDS}")

    out = run_flow(client, "generate_flashcards", build_flashcard_prompt(topic, number_of_cards), FLASHCARD_SCHEMA)
    out["flashcards"] = [
        {"front": c["front"].strip(), "back": c["back"].strip()}
        for c in out["flashcards"] if _valid_card(c)
    ]
    return out


def build_knowledge_prompt(
    topic: str,
    learning_style: str | None = None,
    pace: str | None = None,
    retention_capacity: str | None = None,
) -> str:
    return f"""
Você é um assistente ajudando estudantes a construir conhecimento. {LANGUAGE_LINE}
Com base no tópico e no perfil do estudante, gere um mapa mental e anotações inteligentes.

Tópico: {topic}
Estilo de Aprendizagem: {learning_style or "Não especificado"}
Ritmo: {pace or "Não especificado"}
Capacidade de Retenção: {retention_capacity or "Não especificada"}

mindMap: mapa mental em Markdown com as seções "Conceitos-Chave", "Relações entre Conceitos" e "Aplicações Práticas".
smartNotes: anotações em Markdown com definições, exemplos práticos e questões-chave.

{output_instructions(KNOWLEDGE_SCHEMA)}
""".strip()


def construct_knowledge(
    client: Any,
    topic: str,
    learning_style: str | None = None,
    pace: str | None = None,
    retention_capacity: str | None = None,
) -> dict[str, Any]:
    topic = (topic or "").strip()
    if not topic:
        raise ValueError("topic is required")
    prompt = build_knowledge_prompt(topic, learning_style, pace, retention_capacity)
    return run_flow(client, "construct_knowledge", prompt, KNOWLEDGE_SCHEMA)
