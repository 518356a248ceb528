"""LLM completion providers.

Supports OpenAI, Anthropic, and Google Gemini. Each provider takes a
single user prompt and returns the raw text of the model's answer;
parsing is left to the caller.
"""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You extract structured data about anime films from Italian news articles. \
You answer with JSON only, never with prose or markdown."""


class LLMProvider(ABC):
    """Abstract text-completion provider."""

    name: str = "base"

    @abstractmethod
    def complete(self, prompt: str) -> str:
        ...


# ---------------------------------------------------------------------------
# OpenAI
# ---------------------------------------------------------------------------


class OpenAIProvider(LLMProvider):
    name = "openai"

    def __init__(self, api_key: str, model: str = "") -> None:
        import openai

        self.client = openai.OpenAI(api_key=api_key)
        self.model = model or "gpt-4o-mini"

    def complete(self, prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0,
        )
        return response.choices[0].message.content or ""


# ---------------------------------------------------------------------------
# Anthropic
# ---------------------------------------------------------------------------


class AnthropicProvider(LLMProvider):
    name = "anthropic"

    def __init__(self, api_key: str, model: str = "") -> None:
        import anthropic

        self.client = anthropic.Anthropic(api_key=api_key)
        self.model = model or "claude-3-5-haiku-latest"

    def complete(self, prompt: str) -> str:
        response = self.client.messages.create(
            model=self.model,
            max_tokens=2048,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
        )
        return response.content[0].text


# ---------------------------------------------------------------------------
# Google Gemini
# ---------------------------------------------------------------------------


class GoogleProvider(LLMProvider):
    name = "google"

    def __init__(self, api_key: str, model: str = "") -> None:
        from google import genai

        self.client = genai.Client(api_key=api_key)
        self.model = model or "gemini-2.0-flash"

    def complete(self, prompt: str) -> str:
        response = self.client.models.generate_content(
            model=self.model,
            contents=f"{SYSTEM_PROMPT}\n\n{prompt}",
        )
        return response.text or ""


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

_PROVIDERS: dict[str, type[LLMProvider]] = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
    "google": GoogleProvider,
}


def get_provider(provider_name: str, api_key: str, model: str = "") -> LLMProvider:
    """Create an LLM provider by name."""
    cls = _PROVIDERS.get(provider_name)
    if cls is None:
        raise ValueError(
            f"Unknown LLM provider: {provider_name!r}. "
            f"Choose from: {', '.join(_PROVIDERS)}"
        )
    logger.info("Using LLM provider %s (%s)", provider_name, model or "default model")
    return cls(api_key, model=model)
