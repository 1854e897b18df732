from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Callable

from dotenv import load_dotenv

from .config import Settings, load_settings
from .extractors import FieldSchema
from .llm import OllamaClient, OllamaError
from .normalizer import normalize_with_trace
from .flows import (
    analyze_text,
    argument_duel,
    boss_level_challenge,
    clarify_concept,
    cognitive_battle,
    construct_knowledge,
    continue_socratic_dialogue,
    evaluate_answer_and_continue,
    generate_daily_teaser,
    generate_flashcards,
    navigate_cognitive_bias,
    plan_day,
    simulate_interview,
    start_socratic_dialogue,
    summarize_note,
    writing_assistant,
)

logger = logging.getLogger("cognaforge")

# flow name -> (callable(client, settings, **params), params parsed as JSON)
FLOWS: dict[str, tuple[Callable[..., dict[str, Any]], set[str]]] = {
    "summarize-note": (lambda c, s, **kw: summarize_note(c, **kw), set()),
    "analyze-text": (lambda c, s, **kw: analyze_text(c, **kw), set()),
    "clarify-concept": (lambda c, s, **kw: clarify_concept(c, **kw), set()),
    "flashcards": (lambda c, s, **kw: generate_flashcards(c, **kw), {"number_of_cards"}),
    "knowledge": (lambda c, s, **kw: construct_knowledge(c, **kw), set()),
    "interview": (lambda c, s, **kw: simulate_interview(c, **kw), {"history"}),
    "socratic-start": (lambda c, s, **kw: start_socratic_dialogue(c, **kw), set()),
    "socratic": (lambda c, s, **kw: continue_socratic_dialogue(c, s, **kw), {"previous_exchanges"}),
    "writing-assistant": (lambda c, s, **kw: writing_assistant(c, **kw), set()),
    "daily-teaser": (lambda c, s, **kw: generate_daily_teaser(c, **kw), set()),
    "plan-day": (lambda c, s, **kw: plan_day(c, **kw), {"existing_events"}),
    "argument-duel": (lambda c, s, **kw: argument_duel(c, **kw), set()),
    "boss-level": (lambda c, s, **kw: boss_level_challenge(c, **kw), set()),
    "bias-navigator": (lambda c, s, **kw: navigate_cognitive_bias(c, **kw), set()),
    "cognitive-battle": (lambda c, s, **kw: cognitive_battle(c, **kw), {"socratic_mode"}),
    "battle-evaluate": (lambda c, s, **kw: evaluate_answer_and_continue(c, **kw), {"previous_exchanges"}),
}


def parse_params(pairs: list[str], json_keys: set[str]) -> dict[str, Any]:
    params: dict[str, Any] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"expected key=value, got {pair!r}")
        key, value = pair.split("=", 1)
        key = key.strip().replace("-", "_")
        params[key] = json.loads(value) if key in json_keys else value
    return params


def _print_json(obj: Any) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2))


def cmd_flow(settings: Settings, name: str, pairs: list[str]) -> int:
    fn, json_keys = FLOWS[name]
    params = parse_params(pairs, json_keys)
    client = OllamaClient.from_settings(settings)
    _print_json(fn(client, settings, **params))
    return 0


def cmd_normalize(path: str | None, fields: list[str], arrays: list[str], optional: list[str]) -> int:
    if path:
        with open(path, "r", encoding="utf-8") as f:
            raw = f.read()
    else:
        raw = sys.stdin.read()
    schema = FieldSchema.of(fields, arrays=arrays, optional=optional)
    result = normalize_with_trace(raw, schema)
    _print_json({"values": result.values, "tier": result.tier, "reasons": result.reasons})
    return 0


def cmd_ping(settings: Settings) -> int:
    client = OllamaClient.from_settings(settings)
    ok = client.is_available()
    print(f"[OLLAMA] host={settings.ollama_host} model={settings.ollama_model} available={ok}")
    return 0 if ok else 1


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="cognaforge", description="CognaForge study tools on a local Ollama model")
    sub = p.add_subparsers(dest="command", required=True)

    pf = sub.add_parser("flow", help="Run a study flow and print its record as JSON")
    pf.add_argument("name", choices=sorted(FLOWS))
    pf.add_argument("params", nargs="*", help="key=value inputs, e.g. topic=Entropia number_of_cards=5")

    pn = sub.add_parser("normalize", help="Normalize raw model text (file or stdin) into a record")
    pn.add_argument("--input", "-i", type=str, help="File with raw model output (default: stdin)")
    pn.add_argument("--field", "-f", action="append", required=True, dest="fields")
    pn.add_argument("--array", "-a", action="append", default=[], dest="arrays")
    pn.add_argument("--optional", "-o", action="append", default=[], dest="optional")

    sub.add_parser("ping", help="Check whether the Ollama server is reachable")
    return p


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_arg_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ValueError as e:
        print(f"config error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "flow":
            return cmd_flow(settings, args.name, args.params)
        if args.command == "normalize":
            return cmd_normalize(args.input, args.fields, args.arrays, args.optional)
        return cmd_ping(settings)
    except OllamaError as e:
        logger.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1
    except (ValueError, TypeError) as e:
        print(f"invalid input: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"cannot read input: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
