from __future__ import annotations

from typing import Any

from ..extractors import FieldSchema
from .base import LANGUAGE_LINE, output_instructions, run_flow

WRITING_SCHEMA = FieldSchema.of(["suggestedText"])
TEASER_SCHEMA = FieldSchema.of(["teaser", "answer"])
PLANNER_SCHEMA = FieldSchema.of(["actionPlan", "motivationalQuote"])


def build_writing_prompt(note_context: str, user_prompt: str) -> str:
    return f"""
Você é um assistente de escrita criativo e útil, integrado a um aplicativo de notas. {LANGUAGE_LINE}
Com base no contexto da nota e no pedido do usuário, gere o texto solicitado (suggestedText),
em Markdown quando fizer sentido, coerente com o conteúdo existente.

CONTEXTO DA NOTA:
<<<{note_context or "(nota vazia)"}>>>

PEDIDO DO USUÁRIO: {user_prompt}

{output_instructions(WRITING_SCHEMA)}
""".strip()


def writing_assistant(client: Any, user_prompt: str, note_context: str = "") -> dict[str, Any]:
    user_prompt = (user_prompt or "").strip()
    if not user_prompt:
        raise ValueError("user_prompt is required")
    return run_flow(client, "writing_assistant", build_writing_prompt(note_context, user_prompt), WRITING_SCHEMA)


def build_teaser_prompt() -> str:
    return f"""
Gere um quebra-cabeça curto e envolvente, uma charada ou um pequeno desafio lógico para o dia. {LANGUAGE_LINE}
Forneça:
1. teaser: o desafio, curto e autocontido.
2. answer: a resposta, com uma explicação breve se necessário.

{output_instructions(TEASER_SCHEMA)}
""".strip()


def generate_daily_teaser(client: Any) -> dict[str, Any]:
    return run_flow(client, "daily_teaser", build_teaser_prompt(), TEASER_SCHEMA)


def format_events(events: list[dict[str, str]] | None) -> str:
    if not events:
        return "Não há eventos pré-agendados para hoje."
    lines = ["Eventos já agendados para hoje:"]
    for ev in events:
        if not isinstance(ev, dict) or not ev.get("time") or not ev.get("title"):
            raise ValueError(f"event needs time and title: {ev!r}")
        line = f"- {ev['time']}: {ev['title']}"
        if ev.get("description"):
            line += f" ({ev['description']})"
        lines.append(line)
    return "\n".join(lines)


def build_planner_prompt(date: str, main_goal: str, existing_events: list[dict[str, str]] | None = None) -> str:
    return f"""
Você é um assistente de planejamento e produtividade altamente eficaz. {LANGUAGE_LINE}
O usuário deseja planejar o dia {date}.
O objetivo principal para hoje é: "{main_goal}".

{format_events(existing_events)}

Sua tarefa é:
1. actionPlan: um plano de ação prático em Markdown, com tarefas e blocos de tempo que respeitem os eventos existentes.
2. motivationalQuote: uma citação motivacional curta e inspiradora para o dia.

{output_instructions(PLANNER_SCHEMA)}
""".strip()


def plan_day(
    client: Any,
    date: str,
    main_goal: str,
    existing_events: list[dict[str, str]] | None = None,
) -> dict[str, Any]:
    date = (date or "").strip()
    main_goal = (main_goal or "").strip()
    if not date or not main_goal:
        raise ValueError("date and main_goal are required")
    prompt = build_planner_prompt(date, main_goal, existing_events)
    return run_flow(client, "plan_day", prompt, PLANNER_SCHEMA)
