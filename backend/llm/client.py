"""Completion service client (Mistral via its OpenAI-compatible API)."""

import logging
from dataclasses import dataclass
from typing import Any

from openai import AsyncOpenAI

from config import settings

logger = logging.getLogger(__name__)

_llm_client: AsyncOpenAI | None = None


def _get_llm_client() -> AsyncOpenAI:
    global _llm_client
    if _llm_client is None:
        _llm_client = AsyncOpenAI(
            api_key=settings.llm_api_key,
            base_url=settings.llm_base_url,
            max_retries=0,
        )
    return _llm_client


@dataclass
class Completion:
    text: str
    usage: dict[str, int] | None = None


def _usage_dict(usage: Any) -> dict[str, int] | None:
    if usage is None:
        return None
    return {
        "prompt_tokens": getattr(usage, "prompt_tokens", 0) or 0,
        "completion_tokens": getattr(usage, "completion_tokens", 0) or 0,
        "total_tokens": getattr(usage, "total_tokens", 0) or 0,
    }


async def complete(
    messages: list[dict[str, str]],
    *,
    temperature: float,
    max_tokens: int,
) -> Completion:
    """Run one chat completion and return its text and token usage.

    ``text`` is empty when the model returned no content; callers pick their
    own fallback.
    """
    client = _get_llm_client()
    resp = await client.chat.completions.create(
        model=settings.llm_model,
        messages=messages,
        temperature=temperature,
        max_tokens=max_tokens,
    )
    text = ""
    if resp.choices:
        text = resp.choices[0].message.content or ""
    usage = _usage_dict(resp.usage)
    if usage:
        logger.info(
            "Completion: %d prompt + %d completion tokens",
            usage["prompt_tokens"], usage["completion_tokens"],
        )
    return Completion(text=text, usage=usage)
