from .notes import summarize_note, analyze_text
from .study import clarify_concept, generate_flashcards, construct_knowledge
from .interview import simulate_interview
from .socratic import start_socratic_dialogue, continue_socratic_dialogue
from .productivity import writing_assistant, generate_daily_teaser, plan_day
from .challenges import (
    argument_duel,
    boss_level_challenge,
    navigate_cognitive_bias,
    cognitive_battle,
    evaluate_answer_and_continue,
)

__all__ = [
    "summarize_note",
    "analyze_text",
    "clarify_concept",
    "generate_flashcards",
    "construct_knowledge",
    "simulate_interview",
    "start_socratic_dialogue",
    "continue_socratic_dialogue",
    "writing_assistant",
    "generate_daily_teaser",
    "plan_day",
    "argument_duel",
    "boss_level_challenge",
    "navigate_cognitive_bias",
    "cognitive_battle",
    "evaluate_answer_and_continue",
]
