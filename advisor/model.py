from __future__ import annotations

from typing import Any, Callable, Protocol

from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from advisor.errors import ConfigurationError
from config.settings import Settings


class TextModel(Protocol):
    """Anything that turns a single prompt into a single text completion."""

    async def generate(self, prompt: str) -> str:
        ...


ModelFactory = Callable[[Settings], TextModel]


def extract_text(content: Any) -> str:
    """Return the text of a chat model reply.

    Gemini replies arrive either as a plain string or as a list of content
    parts (strings or ``{"type": "text", "text": ...}`` dicts).
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                parts.append(str(part.get("text", "")))
        if parts:
            return "".join(parts)
    raise ValueError(f"Unexpected model response content: {type(content).__name__}")


class GeminiTextModel:
    """Single-shot Gemini completion through langchain."""

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float = 0.7,
        top_p: float = 0.95,
    ) -> None:
        self.model_name = model
        self._llm = ChatGoogleGenerativeAI(
            model=model,
            google_api_key=api_key,
            temperature=temperature,
            top_p=top_p,
            max_retries=0,
        )

    async def generate(self, prompt: str) -> str:
        reply = await self._llm.ainvoke([HumanMessage(content=prompt)])
        return extract_text(reply.content)


def build_model(settings: Settings) -> TextModel:
    if not settings.gemini_api_key:
        raise ConfigurationError()

    return GeminiTextModel(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        temperature=settings.temperature,
        top_p=settings.top_p,
    )
