from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable

import requests

from .config import Settings
from .extractors import FieldSchema
from .normalizer import normalize_llm_output

logger = logging.getLogger(__name__)


class OllamaError(RuntimeError):
    """The Ollama server could not be reached or returned an error."""


class OllamaClient:
    """
    Client for a local Ollama server:
    - generate(): one-shot completion, retried with exponential backoff
    - stream(): chat completion delivered token by token (not retried)
    - keep_alive to reduce cold-start latency
    """
    def __init__(
        self,
        host: str,
        model: str,
        timeout_s: int = 600,
        max_retries: int = 3,
        keep_alive: str = "10m",
        temperature: float = 0.7,
    ):
        self.host = host.rstrip("/")
        self.model = model
        self.timeout_s = timeout_s
        self.max_retries = max_retries
        self.keep_alive = keep_alive
        self.temperature = temperature

    @classmethod
    def from_settings(cls, settings: Settings) -> "OllamaClient":
        return cls(
            settings.ollama_host,
            settings.ollama_model,
            timeout_s=settings.timeout_s,
            max_retries=settings.max_retries,
            keep_alive=settings.keep_alive,
            temperature=settings.temperature,
        )

    def _options(self) -> dict[str, Any]:
        return {"temperature": self.temperature}

    def generate(self, prompt: str, model: str | None = None) -> str:
        url = f"{self.host}/api/generate"
        payload = {
            "model": model or self.model,
            "prompt": prompt,
            "stream": False,
            "keep_alive": self.keep_alive,
            "options": self._options(),
        }

        last_err: Exception | None = None

        for attempt in range(1, self.max_retries + 1):
            try:
                r = requests.post(url, json=payload, timeout=self.timeout_s)
                r.raise_for_status()
                data = r.json()
                return (data.get("response") or "").strip()
            except (requests.RequestException, ValueError) as e:
                last_err = e
                logger.warning("Ollama generate failed (attempt %d/%d): %s", attempt, self.max_retries, e)
                if attempt < self.max_retries:
                    # backoff: 2,4,8 seconds (cap)
                    time.sleep(min(2 ** attempt, 8))

        raise OllamaError(f"Ollama generate failed after {self.max_retries} attempts: {last_err}") from last_err

    def stream(self, prompt: str, on_token: Callable[[str], None], model: str | None = None) -> str:
        url = f"{self.host}/api/chat"
        payload = {
            "model": model or self.model,
            "messages": [{"role": "user", "content": prompt}],
            "stream": True,
            "keep_alive": self.keep_alive,
            "options": self._options(),
        }

        parts: list[str] = []
        try:
            with requests.post(url, json=payload, timeout=self.timeout_s, stream=True) as r:
                r.raise_for_status()
                for line in r.iter_lines(decode_unicode=True):
                    if not line:
                        continue
                    chunk = json.loads(line)
                    if chunk.get("error"):
                        raise OllamaError(f"Ollama stream error: {chunk['error']}")
                    token = (chunk.get("message") or {}).get("content")
                    if token:
                        parts.append(token)
                        on_token(token)
                    if chunk.get("done"):
                        break
        except (requests.RequestException, ValueError) as e:
            logger.error("Ollama stream failed: %s", e)
            raise OllamaError(f"Ollama stream failed: {e}") from e

        return "".join(parts)

    def is_available(self) -> bool:
        try:
            r = requests.get(f"{self.host}/api/tags", timeout=5)
            r.raise_for_status()
            return True
        except requests.RequestException:
            return False

    def generate_record(self, prompt: str, schema: FieldSchema, model: str | None = None) -> dict[str, Any]:
        """generate() + normalize the answer into the schema's fields."""
        return normalize_llm_output(self.generate(prompt, model=model), schema)
