"""Prompt relay: validate, enrich, call the model, normalize the reply.

Each stage is a small function so it can be tested without network access;
``relay`` composes them for the HTTP handler.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from advisor.core.prompt import MARKET_CONTEXT_SUFFIX
from advisor.errors import ConfigurationError, InvalidPromptError, ModelInvocationError
from advisor.model import ModelFactory, TextModel, build_model
from chat.models import RelayRequest
from config.settings import Settings


logger = logging.getLogger("advisor.relay")


def ensure_configured(settings: Settings) -> None:
    if not settings.gemini_api_key:
        raise ConfigurationError()


def validate_prompt(payload: Any) -> str:
    if not isinstance(payload, dict):
        raise InvalidPromptError()
    try:
        request = RelayRequest.model_validate(payload)
    except ValidationError as exc:
        raise InvalidPromptError() from exc
    if not request.prompt:
        raise InvalidPromptError()
    return request.prompt


def enrich_prompt(prompt: str) -> str:
    return f"{prompt}{MARKET_CONTEXT_SUFFIX}"


async def generate_text(model: TextModel, prompt: str) -> str:
    try:
        text = await model.generate(prompt)
        if not isinstance(text, str):
            raise TypeError(f"Model returned {type(text).__name__}, expected str")
    except Exception as exc:
        logger.exception("Gemini API error: %s", exc)
        raise ModelInvocationError() from exc
    return text


async def relay(
    payload: Any,
    settings: Settings,
    model_factory: ModelFactory = build_model,
) -> str:
    ensure_configured(settings)
    prompt = validate_prompt(payload)
    enriched = enrich_prompt(prompt)

    try:
        model = model_factory(settings)
    except Exception as exc:
        logger.exception("Could not create model client: %s", exc)
        raise ModelInvocationError() from exc

    logger.info(
        "Relaying prompt: model=%s prompt_len=%s enriched_len=%s",
        settings.gemini_model,
        len(prompt),
        len(enriched),
    )
    text = await generate_text(model, enriched)
    logger.info("Model responded: %s chars", len(text))
    return text
