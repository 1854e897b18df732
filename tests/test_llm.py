import json

import pytest
import requests

from cognaforge import FieldSchema, OllamaClient, OllamaError, Settings
from cognaforge import llm as llm_mod


class FakeResponse:
    def __init__(self, payload=None, status=200, lines=None):
        self.payload = payload
        self.status_code = status
        self.lines = lines or []

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")

    def json(self):
        return self.payload

    def iter_lines(self, decode_unicode=False):
        yield from self.lines

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def no_sleep(monkeypatch):
    sleeps = []
    monkeypatch.setattr(llm_mod.time, "sleep", sleeps.append)
    return sleeps


def test_generate_posts_payload_and_returns_text(monkeypatch):
    calls = []

    def fake_post(url, json=None, timeout=None, **kw):
        calls.append((url, json, timeout))
        return FakeResponse({"response": "  olá  "})

    monkeypatch.setattr(llm_mod.requests, "post", fake_post)
    client = OllamaClient("http://ollama:11434/", "llama3.2:3b", timeout_s=30)

    assert client.generate("oi") == "olá"
    url, payload, timeout = calls[0]
    assert url == "http://ollama:11434/api/generate"
    assert payload["model"] == "llama3.2:3b"
    assert payload["prompt"] == "oi"
    assert payload["stream"] is False
    assert timeout == 30


def test_generate_model_override(monkeypatch):
    seen = {}

    def fake_post(url, json=None, timeout=None, **kw):
        seen.update(json)
        return FakeResponse({"response": "x"})

    monkeypatch.setattr(llm_mod.requests, "post", fake_post)
    OllamaClient("http://h", "a").generate("p", model="b")
    assert seen["model"] == "b"


def test_generate_retries_then_succeeds(monkeypatch, no_sleep):
    answers = [requests.ConnectionError("down"), FakeResponse(status=503), FakeResponse({"response": "ok"})]

    def fake_post(url, json=None, timeout=None, **kw):
        a = answers.pop(0)
        if isinstance(a, Exception):
            raise a
        return a

    monkeypatch.setattr(llm_mod.requests, "post", fake_post)
    client = OllamaClient("http://h", "m", max_retries=3)
    assert client.generate("p") == "ok"
    assert no_sleep == [2, 4]


def test_generate_raises_after_last_attempt(monkeypatch, no_sleep):
    def fake_post(url, json=None, timeout=None, **kw):
        raise requests.Timeout("slow")

    monkeypatch.setattr(llm_mod.requests, "post", fake_post)
    client = OllamaClient("http://h", "m", max_retries=2)
    with pytest.raises(OllamaError) as exc:
        client.generate("p")
    assert isinstance(exc.value.__cause__, requests.Timeout)
    assert no_sleep == [2]


def test_stream_delivers_tokens(monkeypatch):
    lines = [
        json.dumps({"message": {"content": "Olá"}, "done": False}),
        "",
        json.dumps({"message": {"content": ", mundo"}, "done": False}),
        json.dumps({"message": {"content": ""}, "done": True}),
    ]
    monkeypatch.setattr(llm_mod.requests, "post", lambda *a, **kw: FakeResponse(lines=lines))

    tokens = []
    text = OllamaClient("http://h", "m").stream("p", tokens.append)
    assert tokens == ["Olá", ", mundo"]
    assert text == "Olá, mundo"


def test_stream_error_chunk_raises(monkeypatch):
    lines = [json.dumps({"error": "model not found"})]
    monkeypatch.setattr(llm_mod.requests, "post", lambda *a, **kw: FakeResponse(lines=lines))
    with pytest.raises(OllamaError, match="model not found"):
        OllamaClient("http://h", "m").stream("p", lambda t: None)


def test_stream_transport_error_raises(monkeypatch):
    def boom(*a, **kw):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(llm_mod.requests, "post", boom)
    with pytest.raises(OllamaError):
        OllamaClient("http://h", "m").stream("p", lambda t: None)


def test_is_available(monkeypatch):
    monkeypatch.setattr(llm_mod.requests, "get", lambda *a, **kw: FakeResponse({"models": []}))
    assert OllamaClient("http://h", "m").is_available() is True

    def boom(*a, **kw):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(llm_mod.requests, "get", boom)
    assert OllamaClient("http://h", "m").is_available() is False


def test_generate_record_normalizes(monkeypatch):
    monkeypatch.setattr(
        llm_mod.requests, "post",
        lambda *a, **kw: FakeResponse({"response": 'Aqui está: {"summary": "ok"'}),
    )
    out = OllamaClient("http://h", "m").generate_record("p", FieldSchema.of(["summary"]))
    assert out == {"summary": "ok"}


def test_from_settings():
    s = Settings(ollama_host="http://x:1", ollama_model="qwen", timeout_s=5, max_retries=4)
    c = OllamaClient.from_settings(s)
    assert (c.host, c.model, c.timeout_s, c.max_retries) == ("http://x:1", "qwen", 5, 4)
