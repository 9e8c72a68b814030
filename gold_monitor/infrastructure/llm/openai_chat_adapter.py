"""
Infrastructure adapter: OpenAI-compatible /chat/completions -> ILanguageModel.

Any provider speaking the OpenAI chat-completions wire format works by
pointing base_url at it. The first choice and usage block are returned
verbatim; model output is never rewritten.
"""

import logging
from typing import Any, Optional

import httpx

from gold_monitor.domain.entities.chat import ChatReply
from gold_monitor.domain.errors import UpstreamShapeError
from gold_monitor.domain.ports.llm_port import ILanguageModel
from gold_monitor.infrastructure.http.json_fetcher import request_json

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.3
DEFAULT_TIMEOUT_SECONDS = 60.0


class OpenAIChatAdapter(ILanguageModel):
    """Posts the assembled conversation to an OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._url = base_url.rstrip("/") + "/chat/completions"
        self._model = model
        self._temperature = temperature
        self._timeout = timeout
        self._transport = transport

    async def complete(self, messages: list[Any]) -> ChatReply:
        payload = await request_json(
            "POST",
            self._url,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self._api_key}",
            },
            json_body={
                "model": self._model,
                "messages": messages,
                "temperature": self._temperature,
            },
            timeout=self._timeout,
            transport=self._transport,
        )

        choices = payload.get("choices") if isinstance(payload, dict) else None
        first = choices[0] if isinstance(choices, list) and choices else None
        reply = first.get("message") if isinstance(first, dict) else None
        if not reply:
            raise UpstreamShapeError("LLM payload missing choices")

        usage = payload.get("usage")
        logger.info("Chat completion from %s (usage=%s)", self._model, usage)
        return ChatReply(reply=reply, usage=usage)
