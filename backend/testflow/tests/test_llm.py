import httpx
import openai
import pytest

from .. import models
from ..core.errors import AIServiceError
from ..services import llm
from ..services.prompts import build_scenario_prompt, normalise_identifier

REQUEST = httpx.Request("POST", "https://api.example.test/v1/chat/completions")


class FailingLLM:
    def __init__(self, error: Exception) -> None:
        self.error = error

    async def ainvoke(self, prompt):
        raise self.error


class ReplyingLLM:
    def __init__(self, content) -> None:
        self.content = content

    async def ainvoke(self, prompt):
        return type("Message", (), {"content": self.content})()


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("DEEPSEEK_API_KEY", "test-key")


async def test_missing_api_key_is_a_configuration_error(monkeypatch) -> None:
    monkeypatch.delenv("DEEPSEEK_API_KEY", raising=False)
    monkeypatch.delenv("AI_API_KEY", raising=False)

    with pytest.raises(AIServiceError) as info:
        await llm.generate_completion("Say hi")

    assert info.value.status_code == 500
    assert info.value.detail["message"] == "AI service configuration error"


@pytest.mark.parametrize(
    "error, status_code",
    [
        (openai.RateLimitError("slow down", response=httpx.Response(429, request=REQUEST), body=None), 429),
        (openai.APIConnectionError(request=REQUEST), 503),
        (openai.APITimeoutError(request=REQUEST), 503),
    ],
)
async def test_provider_errors_are_mapped(monkeypatch, api_key, error, status_code) -> None:
    monkeypatch.setattr(llm, "_create_llm", lambda key: FailingLLM(error))

    with pytest.raises(AIServiceError) as info:
        await llm.generate_completion("Say hi")

    assert info.value.status_code == status_code


async def test_completion_text_is_returned_stripped(monkeypatch, api_key) -> None:
    monkeypatch.setattr(llm, "_create_llm", lambda key: ReplyingLLM([{"type": "text", "text": "  hello  "}]))

    assert await llm.generate_completion("Say hi") == "hello"


async def test_empty_prompt_is_rejected() -> None:
    with pytest.raises(ValueError):
        await llm.generate_completion("   ")


async def test_ai_status_without_key_skips_the_endpoint_check(monkeypatch, client) -> None:
    monkeypatch.delenv("DEEPSEEK_API_KEY", raising=False)
    monkeypatch.delenv("AI_API_KEY", raising=False)

    body = (await client.get("/api/ai/status")).json()

    assert body["api_key_configured"] is False
    assert body["reachable"] is False
    assert body["model"] == llm.AI_MODEL


def test_scenario_prompt_embeds_requirement() -> None:
    requirement = models.Requirement(id=12, title="Export invoices", description="CSV export of invoices")

    prompt = build_scenario_prompt(requirement)

    assert "REQ12" in prompt
    assert "Export invoices" in prompt
    assert "CSV export of invoices" in prompt
    assert normalise_identifier("req-7 b") == "REQ7B"
    with pytest.raises(ValueError):
        normalise_identifier("--")
