"""Conversational completion clients for the cooking assistant.

Two providers implement the same ``complete(messages)`` coroutine:

1. OPENAI (default, COMPLETION_PROVIDER="openai"):
   - Bearer-token POST to an OpenAI-compatible chat completions URL
   - System preamble prepended as the first message

2. GEMINI (COMPLETION_PROVIDER="gemini"):
   - google-genai generate_content with the preamble as system_instruction
   - Assistant turns mapped to Gemini's "model" role

Both are stateless: the caller replays the whole conversation every time.
Both cap the reply length with MAX_OUTPUT_TOKENS; neither caps the input.
"""

import asyncio
from typing import Any, Optional, Protocol, Sequence

import aiohttp
import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from eatmate.api.errors import ApiError, NetworkError, extract_error_message
from eatmate.prompts.prompts import SYSTEM_PREAMBLE
from eatmate.utils.config import Config, config
from eatmate.utils.logger import get_logger

logger = get_logger("eatmate.api")

# One {"role": "user" | "assistant", "content": str} entry per logged turn
CompletionMessage = dict[str, str]


class CompletionClient(Protocol):
    async def complete(self, messages: Sequence[CompletionMessage]) -> str:
        ...


class OpenAICompletionClient:
    """Chat completions over HTTPS with a bearer token."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_url: Optional[str] = None,
        max_tokens: Optional[int] = None,
        system_preamble: str = SYSTEM_PREAMBLE,
    ) -> None:
        """Initialize the client.

        Raises:
            ValueError: If no API key is available.
        """
        self.api_key = api_key if api_key is not None else config.OPENAI_API_KEY
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY is required when COMPLETION_PROVIDER=openai")

        self.model = model or config.COMPLETION_MODEL
        self.api_url = api_url or config.COMPLETION_API_URL
        self.max_tokens = max_tokens or config.MAX_OUTPUT_TOKENS
        self.system_preamble = system_preamble

    def build_request(self, messages: Sequence[CompletionMessage]) -> dict[str, Any]:
        """Request body: preamble first, then the log in order."""
        return {
            "model": self.model,
            "messages": [{"role": "system", "content": self.system_preamble}, *messages],
            "max_tokens": self.max_tokens,
        }

    async def complete(self, messages: Sequence[CompletionMessage]) -> str:
        """Send the conversation and return the generated reply text.

        Raises:
            NetworkError: If the request could not complete.
            ApiError: On non-2xx status or an unexpected response shape.
        """
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        body = self.build_request(messages)
        logger.debug(f"Completion request: model={self.model}, turns={len(messages)}")

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(self.api_url, json=body, headers=headers) as response:
                    try:
                        data = await response.json(content_type=None)
                    except ValueError:
                        data = None

                    if response.status < 200 or response.status >= 300:
                        raise ApiError(
                            extract_error_message(data, "Failed to generate response"),
                            status=response.status,
                        )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"Completion request failed: {e}") from e

        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ApiError(f"Unexpected completion response: {e}") from e


class GeminiCompletionClient:
    """Completion via the google-genai SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        system_preamble: str = SYSTEM_PREAMBLE,
    ) -> None:
        self.api_key = api_key if api_key is not None else config.GEMINI_API_KEY
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY is required when COMPLETION_PROVIDER=gemini")

        self.model = model or config.GEMINI_MODEL
        self.max_tokens = max_tokens or config.MAX_OUTPUT_TOKENS
        self.system_preamble = system_preamble
        self._client = genai.Client(api_key=self.api_key)

    @staticmethod
    def to_contents(messages: Sequence[CompletionMessage]) -> list[types.Content]:
        """Map log turns to Gemini contents ("assistant" becomes "model")."""
        return [
            types.Content(
                role="model" if message["role"] == "assistant" else "user",
                parts=[types.Part.from_text(text=message["content"])],
            )
            for message in messages
        ]

    async def complete(self, messages: Sequence[CompletionMessage]) -> str:
        """Send the conversation and return the generated reply text.

        Raises:
            NetworkError: If the SDK request could not complete.
            ApiError: On an SDK API error or an empty reply.
        """
        logger.debug(f"Gemini completion request: model={self.model}, turns={len(messages)}")
        try:
            # Run in thread pool since the client call is synchronous
            response = await asyncio.to_thread(
                self._client.models.generate_content,
                model=self.model,
                contents=self.to_contents(messages),
                config=types.GenerateContentConfig(
                    system_instruction=self.system_preamble,
                    max_output_tokens=self.max_tokens,
                ),
            )
        except genai_errors.APIError as e:
            raise ApiError(e.message or "Failed to generate response", status=e.code) from e
        except (httpx.TransportError, asyncio.TimeoutError) as e:
            # The SDK sends its requests through httpx
            raise NetworkError(f"Completion request failed: {e}") from e

        if not response.text:
            raise ApiError("Empty completion response")
        return response.text


def create_completion_client(settings: Config = config) -> CompletionClient:
    """Build the completion client selected by COMPLETION_PROVIDER.

    Raises:
        ValueError: If the provider is unknown or its API key is missing.
    """
    if settings.COMPLETION_PROVIDER == "gemini":
        logger.info(f"Using Gemini completion provider ({settings.GEMINI_MODEL})")
        return GeminiCompletionClient(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            max_tokens=settings.MAX_OUTPUT_TOKENS,
        )
    if settings.COMPLETION_PROVIDER == "openai":
        logger.info(f"Using OpenAI-compatible completion provider ({settings.COMPLETION_MODEL})")
        return OpenAICompletionClient(
            api_key=settings.OPENAI_API_KEY,
            model=settings.COMPLETION_MODEL,
            api_url=settings.COMPLETION_API_URL,
            max_tokens=settings.MAX_OUTPUT_TOKENS,
        )
    raise ValueError(f"Unknown COMPLETION_PROVIDER: {settings.COMPLETION_PROVIDER}")
