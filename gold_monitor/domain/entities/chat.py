"""
Domain entities for the chat relay.
Zero external dependencies: pure Python dataclasses only.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ContextCandle:
    time: str
    open: float
    high: float
    low: float
    close: float


@dataclass(frozen=True)
class ChartContext:
    """Sanitized chart context embedded in the outbound chat request.

    meta only holds the keys that survived whitelisting plus candlesProvided.
    """

    meta: dict[str, Any]
    candles: list[ContextCandle] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"meta": dict(self.meta), "candles": [asdict(c) for c in self.candles]}


@dataclass(frozen=True)
class ChatReply:
    reply: dict[str, Any]
    usage: Optional[dict[str, Any]]
