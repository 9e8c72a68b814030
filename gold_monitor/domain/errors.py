"""
Domain error taxonomy.

Route handlers translate these into fixed external error shapes:
UpstreamError -> 502, BadRequest / UnsupportedInterval -> 400,
ConfigurationError -> 500.
"""

from typing import Optional


class GoldMonitorError(Exception):
    """Base class for every error raised by this package."""


class UpstreamError(GoldMonitorError):
    """An outbound call to the exchange or the language-model provider failed."""


class UpstreamTimeout(UpstreamError):
    pass


class UpstreamHttpError(UpstreamError):
    def __init__(self, status: int, body: str = "", url: Optional[str] = None) -> None:
        self.status = status
        self.body = body
        self.url = url
        super().__init__(f"Upstream responded with HTTP {status}" + (f" for {url}" if url else ""))


class UpstreamParseError(UpstreamError):
    """The upstream body was not valid JSON."""


class UpstreamShapeError(UpstreamError):
    """Well-formed JSON that lacks the fields the contract requires."""


class UpstreamConnectionError(UpstreamError):
    """DNS, connect, or TLS failure before any response arrived."""


class UnsupportedInterval(GoldMonitorError):
    def __init__(self, interval: str) -> None:
        self.interval = interval
        super().__init__(f"Unsupported interval: {interval!r}")


class BadRequest(GoldMonitorError):
    pass


class ConfigurationError(GoldMonitorError):
    pass
