from __future__ import annotations

from typing import Any

from ..extractors import FieldSchema, is_placeholder
from .base import LANGUAGE_LINE, output_instructions, run_flow

INTERVIEW_SCHEMA = FieldSchema.of(["aiQuestion", "feedbackOnAnswer"], optional=["feedbackOnAnswer"])


def format_interview_history(history: list[dict[str, str]] | None) -> str:
    if not history:
        return "(Esta é a primeira pergunta da entrevista)"
    lines = []
    for item in history:
        sender = item.get("sender", "user")
        if sender not in ("user", "ai"):
            raise ValueError(f"invalid sender in interview history: {sender!r}")
        lines.append(f"[{sender}]: {item.get('message', '')}")
    return "\n".join(lines)


def build_interview_prompt(
    job_role: str,
    interviewer_persona: str,
    user_answer: str | None = None,
    history: list[dict[str, str]] | None = None,
) -> str:
    if user_answer:
        task = (
            f'Resposta anterior do usuário à sua última pergunta: "{user_answer}"\n'
            "Agora, forneça:\n"
            "1. feedbackOnAnswer: feedback conciso e construtivo sobre a resposta.\n"
            "2. aiQuestion: sua próxima pergunta, relevante para o cargo e o fluxo da conversa."
        )
    else:
        task = (
            "Agora, forneça:\n"
            "1. aiQuestion: sua primeira pergunta para o usuário.\n"
            '2. feedbackOnAnswer: deixe vazio ("").'
        )
    return f"""
Você é um sistema que simula uma entrevista de emprego. {LANGUAGE_LINE}
Assuma a persona de um entrevistador para o cargo de "{job_role}".
Sua persona como entrevistador é: "{interviewer_persona}".

Histórico da Entrevista até agora ([user] precede a resposta do candidato, [ai] a sua pergunta):
{format_interview_history(history)}

{task}

{output_instructions(INTERVIEW_SCHEMA)}
""".strip()


def simulate_interview(
    client: Any,
    job_role: str,
    interviewer_persona: str,
    user_answer: str | None = None,
    history: list[dict[str, str]] | None = None,
) -> dict[str, Any]:
    if not (job_role or "").strip() or not (interviewer_persona or "").strip():
        raise ValueError("job_role and interviewer_persona are required")

    prompt = build_interview_prompt(job_role, interviewer_persona, user_answer, history)
    out = run_flow(client, "simulate_interview", prompt, INTERVIEW_SCHEMA)

    feedback = out.get("feedbackOnAnswer")
    if not user_answer or not isinstance(feedback, str) or not feedback.strip() \
            or is_placeholder(feedback, "feedbackOnAnswer"):
        out["feedbackOnAnswer"] = None
    return out
