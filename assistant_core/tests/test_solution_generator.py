import asyncio

import pytest

from assistant_core.agents.solution_agent import MISSING_FIELDS_MESSAGE, SolutionGenerator
from assistant_core.domain.models import Success
from assistant_core.providers.gemini_client import GeminiClient
from assistant_core.providers.registry import CompletionConfig


class Resp:
    status_code = 200

    def json(self):
        return {"candidates": [{"content": {"parts": [{"text": "Use AI triage"}]}}]}


def make_generator():
    async def no_sleep(_):
        return None

    return SolutionGenerator(GeminiClient(CompletionConfig(api_key="test-key-123456"), sleep=no_sleep), locale="en")


def test_generate_solution(monkeypatch):
    captured = {}

    class Client:
        def __init__(self, *a, **kw):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, url, json=None, **_):
            captured["payload"] = json
            return Resp()

    monkeypatch.setattr("httpx.AsyncClient", Client)
    outcome = asyncio.run(make_generator().generate("Logistics", "High rate of customer churn"))

    assert outcome == Success(text="Use AI triage", attempts=1)
    payload = captured["payload"]
    assert len(payload["contents"]) == 1
    prompt = payload["contents"][0]["parts"][0]["text"]
    assert prompt.startswith("Industry: Logistics. Challenge: High rate of customer churn.")
    assert "senior AI strategist" in payload["systemInstruction"]["parts"][0]["text"]


@pytest.mark.parametrize(
    "industry,challenge",
    [("", "High rate of customer churn"), ("Logistics", ""), ("  ", "churn"), ("Logistics", None)],
)
def test_missing_fields_rejected_without_network(monkeypatch, industry, challenge):
    class Client:
        def __init__(self, *a, **kw):
            raise AssertionError("no HTTP client should be created")

    monkeypatch.setattr("httpx.AsyncClient", Client)
    outcome = asyncio.run(make_generator().generate(industry, challenge))

    assert outcome.kind == "validation"
    assert outcome.message == MISSING_FIELDS_MESSAGE
    assert outcome.attempts == 0


def test_each_call_is_independent():
    class Backend:
        name = "fake"

        def __init__(self):
            self.requests = []

        async def complete(self, req):
            self.requests.append(req)
            return Success(text="idea")

    backend = Backend()
    generator = SolutionGenerator(backend, locale="en")

    async def scenario():
        await generator.generate("Retail", "Slow support")
        await generator.generate("Finance", "Manual admin")

    asyncio.run(scenario())

    assert [len(r.history) for r in backend.requests] == [1, 1]
    assert "Finance" in backend.requests[1].history[0].text
