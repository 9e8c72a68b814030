"""
Port (interface) for language model providers.
Infrastructure adapters (e.g. OpenAIChatAdapter) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Any

from gold_monitor.domain.entities.chat import ChatReply


class ILanguageModel(ABC):
    @abstractmethod
    async def complete(self, messages: list[Any]) -> ChatReply:
        """Send the full message list and return the first choice verbatim.

        Raises:
            UpstreamHttpError:  the provider rejected the request.
            UpstreamShapeError: the response carries no completion choice.
        """
        ...
