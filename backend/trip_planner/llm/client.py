"""Generative model client with schema-constrained JSON output.

Security: Reads API key from settings (environment) only, never hardcoded.
There is no stub fallback: a missing key is a configuration error and a bad
response is a failed call. No retries.
"""

import asyncio
import json
import logging
from typing import Any, Protocol

from openai import APITimeoutError, AsyncOpenAI, OpenAIError

from backend.trip_planner.config import Settings, get_settings
from backend.trip_planner.errors import (
    ConfigurationError,
    EmptyResponseError,
    GenerationError,
    GenerationTimeoutError,
    MalformedResponseError,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a meticulous travel planning assistant. Always answer with a single JSON "
    "document that matches the requested schema exactly. Do not wrap it in markdown."
)


class GenerativeClient(Protocol):
    """Protocol for generative model clients."""

    model_name: str
    provider: str

    async def generate(self, prompt: str, schema: dict[str, Any], *, schema_name: str) -> Any:
        """Run a prompt and return the parsed JSON value.

        Args:
            prompt: Instruction text
            schema: JSON schema describing the exact output shape
            schema_name: Identifier for the schema (letters, digits, _ and -)

        Returns:
            Parsed JSON value

        Raises:
            EmptyResponseError: Model returned no text
            MalformedResponseError: Text is not valid JSON
            GenerationTimeoutError: Call exceeded the configured timeout
            GenerationError: Any other provider failure
        """
        ...


def parse_json_response(text: str | None) -> Any:
    """Parse model output text as JSON, failing loudly on empty or invalid text."""
    if not text or not text.strip():
        raise EmptyResponseError("Empty response from generative model")

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(
            f"Response is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})"
        ) from e


class OpenAIClient:
    """OpenAI-backed client using structured outputs (json_schema response format)."""

    provider = "OpenAI"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_tokens: int = 8192,
        timeout_seconds: float = 60.0,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Model name to use
            temperature: Sampling temperature
            max_tokens: Completion token cap
            timeout_seconds: Upper bound for a single call
        """
        self.client = AsyncOpenAI(api_key=api_key, timeout=timeout_seconds, max_retries=0)
        self.model_name = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_seconds = timeout_seconds

    async def generate(
        self, prompt: str, schema: dict[str, Any], *, schema_name: str = "response"
    ) -> Any:
        """Generate schema-constrained JSON for a prompt."""
        logger.debug(f"[generate] schema={schema_name} prompt_chars={len(prompt)}")

        try:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.model_name,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    response_format={
                        "type": "json_schema",
                        "json_schema": {"name": schema_name, "schema": schema, "strict": False},
                    },
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                ),
                timeout=self.timeout_seconds,
            )
        except (TimeoutError, APITimeoutError) as e:
            raise GenerationTimeoutError(
                f"Generative model did not respond within {self.timeout_seconds}s"
            ) from e
        except OpenAIError as e:
            raise GenerationError(f"Generative model call failed: {e}") from e

        text = response.choices[0].message.content if response.choices else None
        return parse_json_response(text)


def get_llm_client(settings: Settings | None = None) -> GenerativeClient:
    """Factory for the configured generative client.

    Raises:
        ConfigurationError: If no API key is configured
    """
    settings = settings or get_settings()
    api_key = settings.openai_api_key

    if not api_key or not api_key.get_secret_value():
        logger.error("No OpenAI API key configured")
        raise ConfigurationError("API key not configured")

    logger.info(f"Using OpenAI client ({settings.openai_model})")
    return OpenAIClient(
        api_key=api_key.get_secret_value(),
        model=settings.openai_model,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout_seconds=settings.llm_timeout_seconds,
    )
