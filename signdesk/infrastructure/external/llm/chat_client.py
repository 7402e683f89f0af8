"""OpenAI-compatible chat completions client (implements ILLMClient).

Requests a JSON object response format and returns the raw message text;
envelope parsing belongs to the application layer.
"""

from __future__ import annotations

import logging

import httpx
import openai

from signdesk.domain.exceptions import LLMResponseFormatError
from signdesk.infrastructure.exceptions import LLMRequestError

logger = logging.getLogger(__name__)


class ChatCompletionClient:
    """Sends one system and one user message to {base_url}/chat/completions."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 120.0,
        max_retries: int = 2,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._owns_http = http_client is None
        self._client = openai.AsyncOpenAI(
            base_url=self._base_url,
            api_key=api_key,
            timeout=timeout,
            max_retries=max_retries,
            http_client=http_client,
        )

    async def aclose(self) -> None:
        # A shared http client belongs to the app lifespan.
        if self._owns_http:
            await self._client.close()

    async def complete_json(self, system_prompt: str, user_prompt: str) -> str:
        url = f"{self._base_url}/chat/completions"
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                response_format={"type": "json_object"},
            )
        except openai.APIStatusError as e:
            raise LLMRequestError(url, e.status_code, str(e.message)[:500]) from e
        except openai.APIError as e:
            raise LLMRequestError(url, None, str(e)) from e

        if not response.choices:
            raise LLMResponseFormatError("completion has no message content")
        content = response.choices[0].message.content
        if not content:
            raise LLMResponseFormatError("completion is empty")
        logger.debug("Chat completion returned %s characters", len(content))
        return content
