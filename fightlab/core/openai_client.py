"""Async OpenAI client for vision chat completions (api_key and timeout from config)."""
from typing import Any

from fightlab.core.config import settings
from openai import AsyncOpenAI

_openai_client: Any = None


def get_openai_client() -> AsyncOpenAI:
    """Return a singleton AsyncOpenAI client configured from settings. SDK retries are disabled: a failed model call fails the job.
    Why available: Single place to build the client so the model client and tests share one configuration point."""
    global _openai_client
    if _openai_client is None:
        _openai_client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.model_timeout_seconds,
            max_retries=0,
        )
    return _openai_client
