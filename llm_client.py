# llm_client.py
# Generative-text collaborator: the port the pipeline talks to, plus the OpenAI implementation.

import asyncio
import json
import logging
import os
from typing import Any, Awaitable, Optional, Protocol, TypeVar

from dotenv import load_dotenv
from openai import AsyncOpenAI

from career_errors import ConfigurationError, GenerativeResponseError

# Load environment variables
load_dotenv()

OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")
OPENAI_TEMPERATURE = float(os.getenv("OPENAI_TEMPERATURE", "0.2"))
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GenerativeTextPort(Protocol):
    async def complete(self, system_prompt: str, user_payload: str, json_mode: bool = True) -> str:
        ...


class OpenAIChatClient:
    """
    GenerativeTextPort backed by the OpenAI chat completions API.

    Construction fails with ConfigurationError when no API key is available.
    The SDK's own retries are disabled.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if client is None and not api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set. Check your .env file.")
        self.model = model or OPENAI_MODEL
        self.temperature = OPENAI_TEMPERATURE if temperature is None else temperature
        self._client = client or AsyncOpenAI(api_key=api_key, max_retries=0)

    async def complete(self, system_prompt: str, user_payload: str, json_mode: bool = True) -> str:
        kwargs: dict = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_payload},
            ],
            "temperature": self.temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self._client.chat.completions.create(**kwargs)
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise GenerativeResponseError("No content received from OpenAI")
        return content


async def call_with_timeout(call: Awaitable[T], timeout: Optional[float] = None) -> T:
    """Await a collaborator call, bounded by `timeout` seconds (default LLM_TIMEOUT_SECONDS)."""
    return await asyncio.wait_for(call, timeout=LLM_TIMEOUT_SECONDS if timeout is None else timeout)


def parse_json_content(raw: str) -> Any:
    """Decode generative output as JSON. Anything that is not a complete JSON document is rejected."""
    try:
        return json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        logger.debug("Rejected generative output: %.500r", raw)
        raise GenerativeResponseError(f"Generative output is not valid JSON: {e}") from e


def require_string_list(data: dict, field: str) -> list:
    """Return data[field] if it is a list of strings, else raise GenerativeResponseError."""
    value = data.get(field)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise GenerativeResponseError(f"Field '{field}' must be a list of strings")
    return value
