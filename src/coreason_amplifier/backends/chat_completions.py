from typing import Any

import httpx
from loguru import logger

from coreason_amplifier.backend import ReviewBackend
from coreason_amplifier.config import DEFAULT_SYSTEM_PROMPT
from coreason_amplifier.models import SourceFile

NO_RESPONSE_TEXT = "No response received."


class ChatCompletionsBackend(ReviewBackend):
    """Review backend for OpenAI-compatible ``/chat/completions`` endpoints.

    Works against hosted APIs as well as local servers (LM Studio, vLLM,
    llama.cpp) that expose the same request and response shape.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_url: str,
        model: str,
        api_key: str | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        temperature: float = 0.7,
        max_tokens: int = 2048,
        timeout: float = 120.0,
    ):
        """Initializes the ChatCompletionsBackend.

        Args:
            client: Shared httpx.AsyncClient used for all requests.
            api_url: Full URL of the chat completions endpoint.
            model: Model identifier sent with every request.
            api_key: Bearer token. Local servers usually ignore it.
            system_prompt: Fixed review instruction sent as the system message.
            temperature: Sampling temperature.
            max_tokens: Completion token limit.
            timeout: Per-request timeout in seconds.
        """
        self.client = client
        self.api_url = api_url
        self.model = model
        self.api_key = api_key
        self.system_prompt = system_prompt
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    def build_payload(self, source: SourceFile) -> dict[str, Any]:
        """Build the request body for one file. The whole file is sent verbatim."""
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": f"Analyze this {source.extension} file:\n{source.content}"},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    @staticmethod
    def extract_content(data: Any) -> str:
        """Pull ``choices[0].message.content`` out of a response body.

        Any other shape yields the fallback text instead of an error.
        """
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return NO_RESPONSE_TEXT
        if not isinstance(content, str) or not content:
            return NO_RESPONSE_TEXT
        return content

    async def review(self, source: SourceFile) -> str:
        headers = {"Authorization": f"Bearer {self.api_key or 'not-needed'}"}

        logger.debug(f"Requesting review of {source.path} ({len(source.content)} chars)")
        response = await self.client.post(
            self.api_url,
            json=self.build_payload(source),
            headers=headers,
            timeout=self.timeout,
        )

        if not response.is_success:
            raise RuntimeError(f"Server error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ValueError(f"Malformed response body: {e}") from e

        return self.extract_content(data)
