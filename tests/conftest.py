import pytest

from cognaforge.config import Settings


class FakeClient:
    """Stands in for OllamaClient: returns queued answers, records prompts."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    def generate(self, prompt, model=None):
        self.prompts.append(prompt)
        if not self.answers:
            raise AssertionError("FakeClient ran out of answers")
        return self.answers.pop(0)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def fake_client():
    return FakeClient
