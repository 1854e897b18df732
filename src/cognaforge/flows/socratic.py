from __future__ import annotations

import logging
import random
from typing import Any

from ..config import SOCRATIC_STAGES, Settings
from ..extractors import FieldSchema, is_placeholder
from ..repeat import is_repeat
from .base import LANGUAGE_LINE, output_instructions, run_flow

logger = logging.getLogger(__name__)

START_SCHEMA = FieldSchema.of(["question"])
DIALOGUE_SCHEMA = FieldSchema.of(["nextQuestion", "analysis", "dialogueStage"])

FALLBACK_QUESTIONS = [
    'De que outra perspectiva podemos analisar "{topic}"?',
    'Quais consequências práticas você vê se aplicarmos este entendimento de "{topic}" ao mundo real?',
    'Como sua visão sobre "{topic}" se relaciona com outros conceitos fundamentais?',
    'O que seria necessário para mudar sua compreensão atual sobre "{topic}"?',
    'Que evidências sustentam ou contradizem sua posição sobre "{topic}"?',
]
FALLBACK_ANALYSIS = "Utilizando pergunta de fallback devido à dificuldade em gerar uma pergunta não repetitiva."


def build_start_prompt(topic: str) -> str:
    return f"""
Crie uma pergunta inicial provocativa e aberta no estilo socrático sobre o tópico "{topic}".
A pergunta deve estimular o pensamento crítico e a reflexão profunda.
Evite perguntas que possam ser respondidas com sim/não. {LANGUAGE_LINE}

{output_instructions(START_SCHEMA)}
""".strip()


def start_socratic_dialogue(client: Any, topic: str) -> dict[str, str]:
    topic = (topic or "").strip()
    if not topic:
        raise ValueError("topic is required")
    out = run_flow(client, "start_socratic_dialogue", build_start_prompt(topic), START_SCHEMA)
    question = out["question"]
    if not isinstance(question, str) or not question.strip() or is_placeholder(question, "question"):
        question = f"O que você entende por '{topic}'?"
    return {"question": question}


def build_dialogue_prompt(
    topic: str,
    user_response: str,
    previous_exchanges: list[dict[str, str]] | None = None,
    current_question: str | None = None,
) -> str:
    parts = [
        "Você é um guia socrático especializado em estimular o pensamento crítico através de perguntas.",
        f'Seu objetivo é conduzir um diálogo socrático sobre o tópico "{topic}" sem repetir perguntas. {LANGUAGE_LINE}',
        "",
        f"RESPOSTA ATUAL DO USUÁRIO: {user_response}",
    ]
    if current_question:
        parts.append(f"PERGUNTA ATUAL QUE GEROU ESTA RESPOSTA: {current_question}")
    if previous_exchanges:
        parts.append("")
        parts.append("HISTÓRICO DO DIÁLOGO:")
        for ex in previous_exchanges:
            parts.append(f"P: {ex.get('question', '')}")
            parts.append(f"R: {ex.get('answer', '')}")
    parts += [
        "",
        "Sua tarefa é:",
        "1. analysis: analisar brevemente a resposta do usuário (pressupostos, contradições, insights).",
        "2. nextQuestion: formular uma NOVA pergunta socrática, nunca repetindo perguntas anteriores.",
        f"3. dialogueStage: o estágio atual do diálogo, um de: {', '.join(SOCRATIC_STAGES)}.",
        "",
        output_instructions(DIALOGUE_SCHEMA),
    ]
    return "\n".join(parts)


def _fallback(topic: str, previous_exchanges: list[dict[str, str]] | None, settings: Settings) -> dict[str, str]:
    n = len(previous_exchanges or [])
    return {
        "nextQuestion": random.choice(FALLBACK_QUESTIONS).format(topic=topic),
        "analysis": FALLBACK_ANALYSIS,
        "dialogueStage": "avançado" if n > settings.fallback_advanced_after else "intermediário",
    }


def continue_socratic_dialogue(
    client: Any,
    settings: Settings,
    topic: str,
    user_response: str,
    previous_exchanges: list[dict[str, str]] | None = None,
    current_question: str | None = None,
) -> dict[str, str]:
    """
    Ask for the next Socratic question, re-asking up to
    settings.max_flow_attempts times while the model repeats itself.
    Falls back to a canned question after that.
    """
    topic = (topic or "").strip()
    if not topic:
        raise ValueError("topic is required")

    asked = [ex.get("question") for ex in (previous_exchanges or [])]
    asked.append(current_question)

    prompt_topic = topic
    for attempt in range(1, settings.max_flow_attempts + 1):
        prompt = build_dialogue_prompt(prompt_topic, user_response, previous_exchanges, current_question)
        out = run_flow(client, "continue_socratic_dialogue", prompt, DIALOGUE_SCHEMA)
        question = out["nextQuestion"]

        if not isinstance(question, str) or not question.strip() or is_placeholder(question, "nextQuestion"):
            logger.info("socratic attempt %d produced no question", attempt)
            continue

        if not is_repeat(
            question, asked,
            threshold=settings.repeat_threshold,
            fuzzy_ratio=settings.fuzzy_repeat_ratio,
        ):
            return out

        logger.info("socratic attempt %d repeated a previous question", attempt)
        prompt_topic = f'{prompt_topic} (IMPORTANTE: Evite perguntas similares a: "{question}")'

    return _fallback(topic, previous_exchanges, settings)
