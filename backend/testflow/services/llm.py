from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict

import httpx
import openai
from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from ..core.errors import AIServiceError
from ..core.settings import AI_BASE_URL, AI_MODEL, AI_TIMEOUT_SECONDS, get_ai_api_key

logger = logging.getLogger(__name__)

CompletionFn = Callable[[str], Awaitable[str]]


def _create_llm(api_key: str) -> ChatOpenAI:
    return ChatOpenAI(
        model=AI_MODEL,
        base_url=AI_BASE_URL,
        api_key=api_key,
        temperature=0.7,
        max_tokens=2048,
        timeout=AI_TIMEOUT_SECONDS,
        max_retries=0,
    )


def _message_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return ""


async def generate_completion(prompt: str) -> str:
    """Send one prompt to the configured chat model and return its text."""
    if not prompt or not prompt.strip():
        raise ValueError("Prompt must be a non-empty string.")

    api_key = get_ai_api_key()
    if not api_key:
        raise AIServiceError(
            500, "AI service configuration error", "DEEPSEEK_API_KEY is not configured"
        )

    logger.info("Requesting completion from %s (%s prompt characters)", AI_MODEL, len(prompt))
    try:
        message = await _create_llm(api_key).ainvoke([HumanMessage(content=prompt)])
    except openai.RateLimitError as exc:
        raise AIServiceError(
            429, "AI service rate limit exceeded", "Please wait before making another request"
        ) from exc
    except openai.AuthenticationError as exc:
        raise AIServiceError(
            500, "AI service configuration error", "Invalid API key or authentication failed"
        ) from exc
    except openai.APIConnectionError as exc:
        raise AIServiceError(
            503,
            "AI service temporarily unavailable",
            f"Unable to reach {AI_BASE_URL}. Please try again later.",
        ) from exc
    except openai.APIError as exc:
        raise AIServiceError(500, "AI service request failed", str(exc)) from exc

    text = _message_text(message.content).strip()
    if not text:
        raise AIServiceError(500, "AI service returned an empty response", "No content in completion")
    logger.info("Completion received (%s characters)", len(text))
    return text


def get_completion() -> CompletionFn:
    return generate_completion


async def check_ai_endpoint() -> Dict[str, Any]:
    """Check the configured model endpoint without spending tokens."""
    api_key = get_ai_api_key()
    info: Dict[str, Any] = {
        "service": "chat-completions",
        "endpoint": AI_BASE_URL,
        "model": AI_MODEL,
        "api_key_configured": bool(api_key),
        "reachable": False,
        "detail": None,
    }
    if not api_key:
        info["detail"] = "API key is not configured."
        return info

    url = f"{AI_BASE_URL.rstrip('/')}/models/{AI_MODEL}"
    try:
        async with httpx.AsyncClient(timeout=10) as client:
            response = await client.get(url, headers={"Authorization": f"Bearer {api_key}"})
    except httpx.HTTPError as exc:  # pragma: no cover - network dependent
        logger.warning("AI endpoint check failed: %s", exc)
        info["detail"] = f"Unable to reach model endpoint: {exc}"
        return info

    info["reachable"] = response.status_code == 200
    if response.status_code != 200:
        info["detail"] = f"Model endpoint answered {response.status_code}: {response.text[:200]}"
    return info
