from __future__ import annotations

import logging
from typing import Any

from ..extractors import FieldSchema, is_placeholder
from .base import LANGUAGE_LINE, output_instructions, run_flow

logger = logging.getLogger(__name__)

DUEL_SCHEMA = FieldSchema.of(["aiCritique", "reasoningFlaws", "improvementRecommendations"])
BOSS_SCHEMA = FieldSchema.of(["challenge"])
BIAS_SCHEMA = FieldSchema.of(["scenario", "initialQuestion", "biasName", "biasExplanation", "reflectionPrompt"])
BATTLE_SCHEMA = FieldSchema.of(["question", "evaluation", "feedback"], optional=["evaluation", "feedback"])
BATTLE_SOCRATIC_SCHEMA = FieldSchema.of(["question"])
EVALUATION_SCHEMA = FieldSchema.of(["evaluation", "isCorrect", "correctAnswer", "nextQuestion"])

NO_EVALUATION = "Não foi possível avaliar sua resposta neste momento."
NO_CORRECT_ANSWER = "A resposta correta não está disponível neste momento."
CORRECT_PREFIX = "Sua resposta está CORRETA: "
INCORRECT_PREFIX = "Sua resposta está PARCIALMENTE CORRETA/INCORRETA: "

_TRUE_WORDS = {"true", "sim", "yes", "1", "correta", "correto"}


def _required(**values: str) -> list[str]:
    out = []
    for name, value in values.items():
        value = (value or "").strip()
        if not value:
            raise ValueError(f"{name} is required")
        out.append(value)
    return out


def _missing(value: Any, name: str) -> bool:
    return not isinstance(value, str) or not value.strip() or is_placeholder(value, name)


def build_duel_prompt(topic: str, user_stance: str) -> str:
    return f"""
Você é um oponente de debate experiente num duelo argumentativo. {LANGUAGE_LINE}
Tópico: "{topic}"
Posição do usuário: "{user_stance}"

Critique a posição do usuário com rigor e respeito, fornecendo:
1. aiCritique: a crítica aos argumentos, identificando falhas e fraquezas.
2. reasoningFlaws: uma análise detalhada das falhas de raciocínio (falácias, premissas frágeis).
3. improvementRecommendations: recomendações específicas para argumentar melhor.

{output_instructions(DUEL_SCHEMA)}
""".strip()


def argument_duel(client: Any, topic: str, user_stance: str) -> dict[str, Any]:
    topic, user_stance = _required(topic=topic, user_stance=user_stance)
    return run_flow(client, "argument_duel", build_duel_prompt(topic, user_stance), DUEL_SCHEMA)


def build_boss_prompt(topic: str, user_context: str) -> str:
    return f"""
Você é um mestre de jogo que cria o desafio final (Nível Desafiador) de uma trilha de estudos. {LANGUAGE_LINE}
Tópico: "{topic}"
Contexto do usuário: {user_context or "(não informado)"}

Crie um único desafio difícil, que exija aplicar e combinar o que o usuário aprendeu,
e não apenas lembrar definições (challenge).

{output_instructions(BOSS_SCHEMA)}
""".strip()


def boss_level_challenge(client: Any, topic: str, user_context: str = "") -> dict[str, Any]:
    (topic,) = _required(topic=topic)
    return run_flow(client, "boss_level", build_boss_prompt(topic, (user_context or "").strip()), BOSS_SCHEMA)


def build_bias_prompt() -> str:
    return f"""
Você é um especialista em psicologia cognitiva e vieses de pensamento. {LANGUAGE_LINE}
Escolha um viés cognitivo comum e crie um exercício de reflexão com:
1. scenario: um breve cenário do dia a dia onde o viés pode surgir.
2. initialQuestion: uma pergunta para o usuário refletir sobre o cenário antes de conhecer o viés.
3. biasName: o nome do viés (ex: "Viés de Confirmação").
4. biasExplanation: uma explicação clara do viés e de como ele aparece no cenário.
5. reflectionPrompt: uma pergunta sobre como o viés pode afetar as decisões do usuário.

{output_instructions(BIAS_SCHEMA)}
""".strip()


def navigate_cognitive_bias(client: Any) -> dict[str, Any]:
    return run_flow(client, "cognitive_bias_navigator", build_bias_prompt(), BIAS_SCHEMA)


def build_battle_prompt(
    topic: str,
    user_answer: str | None = None,
    previous_ai_response: str | None = None,
    socratic_mode: bool = False,
) -> str:
    if socratic_mode:
        header = (
            "Você é um Guia Socrático. Responda APENAS com uma pergunta instigante que ajude o usuário "
            "a examinar as próprias ideias. Não dê respostas, explicações nem avaliações."
        )
        schema = BATTLE_SOCRATIC_SCHEMA
    else:
        header = (
            "Você é uma IA desafiadora numa batalha cognitiva: faz perguntas sobre o tópico, "
            "avalia o entendimento do usuário e dá feedback com correções, contraexemplos e analogias."
        )
        schema = BATTLE_SCHEMA

    parts = [f"{header} {LANGUAGE_LINE}", "", f"Tópico: {topic}"]
    if user_answer:
        parts.append(f"Resposta do usuário: {user_answer}")
        parts.append(f"Sua resposta anterior: {previous_ai_response or ''}")
        if socratic_mode:
            parts.append("Faça uma nova pergunta baseada na resposta do usuário.")
        else:
            parts.append(
                "Avalie a resposta (evaluation), dê feedback (feedback) e faça uma pergunta de acompanhamento "
                "(question), ajustando a dificuldade ao desempenho do usuário."
            )
    else:
        parts.append("Este é o primeiro turno: faça uma pergunta inicial desafiadora sobre o tópico (question).")
    parts += ["", output_instructions(schema)]
    return "\n".join(parts)


def cognitive_battle(
    client: Any,
    topic: str,
    user_answer: str | None = None,
    previous_ai_response: str | None = None,
    socratic_mode: bool = False,
) -> dict[str, Any]:
    """
    One turn of a cognitive battle. The first turn (no user_answer) only
    asks; later turns also evaluate. In Socratic mode the model only asks,
    and evaluation / feedback are always None.
    """
    (topic,) = _required(topic=topic)
    schema = BATTLE_SOCRATIC_SCHEMA if socratic_mode else BATTLE_SCHEMA
    prompt = build_battle_prompt(topic, user_answer, previous_ai_response, socratic_mode)
    out = run_flow(client, "cognitive_battle", prompt, schema)

    question = out["question"]
    if _missing(question, "question"):
        question = f"O que você sabe sobre {topic}?"

    result: dict[str, Any] = {"question": question, "evaluation": None, "feedback": None}
    if not socratic_mode and user_answer:
        for name in ("evaluation", "feedback"):
            if not _missing(out.get(name), name):
                result[name] = out[name]
    return result


def format_battle_history(previous_exchanges: list[dict[str, str]] | None) -> str:
    if not previous_exchanges:
        return ""
    lines = ["HISTÓRICO DE INTERAÇÕES:"]
    for ex in previous_exchanges:
        lines.append(f"Q: {ex.get('question', '')}")
        lines.append(f"R: {ex.get('userAnswer', '')}")
        if ex.get("evaluation"):
            lines.append(f"AVALIAÇÃO: {ex['evaluation']}")
    return "\n".join(lines)


def build_evaluation_prompt(
    topic: str,
    question: str,
    user_answer: str,
    previous_exchanges: list[dict[str, str]] | None = None,
) -> str:
    return f"""
Você é um educador especializado em avaliar respostas e fazer perguntas sobre tópicos acadêmicos. {LANGUAGE_LINE}

TÓPICO: {topic}
PERGUNTA ANTERIOR: {question}
RESPOSTA DO USUÁRIO: {user_answer}

{format_battle_history(previous_exchanges)}

Sua tarefa é:
1. evaluation: avaliar a resposta, começando com "Sua resposta está [CORRETA/PARCIALMENTE CORRETA/INCORRETA]:".
2. isCorrect: true se a resposta está correta, senão false.
3. correctAnswer: a resposta correta ou mais completa.
4. nextQuestion: uma nova pergunta desafiadora, mas respondível, sobre o mesmo tópico.
Sempre avalie a resposta, mesmo quando for curta ou parecer sem sentido.

{output_instructions(EVALUATION_SCHEMA)}
""".strip()


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if not isinstance(value, str):
        return False
    return value.strip().lower() in _TRUE_WORDS


def evaluate_answer_and_continue(
    client: Any,
    topic: str,
    question: str,
    user_answer: str,
    previous_exchanges: list[dict[str, str]] | None = None,
) -> dict[str, Any]:
    """
    Evaluate the user's answer and ask the next battle question. Missing
    fields get fixed fallbacks, and the evaluation always opens with a
    correctness verdict.
    """
    topic, question, user_answer = _required(topic=topic, question=question, user_answer=user_answer)
    prompt = build_evaluation_prompt(topic, question, user_answer, previous_exchanges)
    out = run_flow(client, "evaluate_answer", prompt, EVALUATION_SCHEMA)

    is_correct = _as_bool(out["isCorrect"])
    evaluation = NO_EVALUATION if _missing(out["evaluation"], "evaluation") else out["evaluation"]
    if "CORRETA" not in evaluation:
        evaluation = (CORRECT_PREFIX if is_correct else INCORRECT_PREFIX) + evaluation
    correct_answer = NO_CORRECT_ANSWER if _missing(out["correctAnswer"], "correctAnswer") else out["correctAnswer"]
    next_question = out["nextQuestion"]
    if _missing(next_question, "nextQuestion"):
        logger.info("battle evaluation came back without a next question")
        next_question = f'Vamos continuar explorando o tópico "{topic}". O que mais você sabe sobre isso?'

    return {
        "evaluation": evaluation,
        "isCorrect": is_correct,
        "correctAnswer": correct_answer,
        "nextQuestion": next_question,
    }
