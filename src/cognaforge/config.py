from __future__ import annotations
from dataclasses import dataclass
import os

PLACEHOLDER_TEMPLATE = 'Não foi possível extrair o campo "{field}"'

SOCRATIC_STAGES = ["inicial", "intermediário", "avançado", "conclusivo"]

@dataclass(frozen=True)
class Settings:
    ollama_host: str = "http://localhost:11434"
    ollama_model: str = "llama3.2:3b"
    timeout_s: int = 600
    max_retries: int = 3
    keep_alive: str = "10m"
    temperature: float = 0.7

    # Repeat guard (socratic dialogue)
    max_flow_attempts: int = 3
    repeat_threshold: float = 0.7
    fuzzy_repeat_ratio: float = 92.0
    fallback_advanced_after: int = 5

    log_level: str = "WARNING"

def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None

def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None

def load_settings() -> Settings:
    settings = Settings(
        ollama_host=os.getenv("OLLAMA_HOST", "http://localhost:11434").strip(),
        ollama_model=os.getenv("OLLAMA_MODEL", "llama3.2:3b").strip(),
        timeout_s=_env_int("OLLAMA_TIMEOUT_S", 600),
        max_retries=_env_int("OLLAMA_MAX_RETRIES", 3),
        keep_alive=os.getenv("OLLAMA_KEEP_ALIVE", "10m").strip(),
        temperature=_env_float("OLLAMA_TEMPERATURE", 0.7),
        max_flow_attempts=_env_int("FLOW_MAX_ATTEMPTS", 3),
        repeat_threshold=_env_float("REPEAT_THRESHOLD", 0.7),
        log_level=os.getenv("LOG_LEVEL", "WARNING").strip().upper(),
    )
    if settings.max_retries < 1:
        raise ValueError("OLLAMA_MAX_RETRIES must be >= 1")
    if settings.max_flow_attempts < 1:
        raise ValueError("FLOW_MAX_ATTEMPTS must be >= 1")
    return settings
