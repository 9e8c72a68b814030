"""
Use-case: relay a caller-owned conversation to the language model.

Outbound message order:
  1. fixed system prompt
  2. price snapshot system message (when the caller sent one)
  3. sanitized chart context system message (when anything survives sanitizing)
  4. the caller's messages, verbatim

The server keeps no conversation state; the browser resends the full history.
"""

import json
import logging
from typing import Any, Optional

from gold_monitor.application.chat.chart_context import sanitize_chart_context
from gold_monitor.application.chat.prompts import (
    CHART_CONTEXT_PREFIX,
    SNAPSHOT_PREFIX,
    SYSTEM_PROMPT,
)
from gold_monitor.domain.entities.chat import ChatMessage, ChatReply
from gold_monitor.domain.errors import BadRequest, ConfigurationError
from gold_monitor.domain.ports.llm_port import ILanguageModel

logger = logging.getLogger(__name__)


def _compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def _ensure_json_compliant(messages: list[Any]) -> None:
    try:
        json.dumps(messages, allow_nan=False, default=str)
    except ValueError as exc:
        raise BadRequest("Request body contains non-finite numbers.") from exc


def build_outbound_messages(
    messages: list[Any],
    price_snapshot: Any = None,
    chart_context: Any = None,
) -> list[Any]:
    outbound: list[Any] = [ChatMessage("system", SYSTEM_PROMPT).to_dict()]
    if price_snapshot is not None:
        outbound.append(
            ChatMessage("system", SNAPSHOT_PREFIX + _compact_json(price_snapshot)).to_dict()
        )
    context = sanitize_chart_context(chart_context)
    if context is not None:
        outbound.append(
            ChatMessage("system", CHART_CONTEXT_PREFIX + _compact_json(context.to_dict())).to_dict()
        )
    outbound.extend(messages)
    return outbound


class RelayChatUseCase:
    def __init__(self, llm: Optional[ILanguageModel]) -> None:
        """
        Args:
            llm: ILanguageModel implementation, or None when no provider key
                 is configured. Every execute() then fails fast.
        """
        self._llm = llm

    async def execute(
        self,
        messages: Any,
        price_snapshot: Any = None,
        chart_context: Any = None,
    ) -> ChatReply:
        """Build the outbound conversation and return the model's first choice.

        Raises:
            ConfigurationError: no language model configured; nothing is sent.
            BadRequest:         *messages* is not a list, or
                                holds NaN or Infinity.
            UpstreamError:      propagated from the ILanguageModel.
        """
        if self._llm is None:
            raise ConfigurationError("LLM API key is not configured on the server.")
        if not isinstance(messages, list):
            raise BadRequest("Request body must include a messages array.")

        outbound = build_outbound_messages(messages, price_snapshot, chart_context)
        _ensure_json_compliant(outbound)
        logger.debug("Relaying %d messages (%d from caller)", len(outbound), len(messages))
        return await self._llm.complete(outbound)
