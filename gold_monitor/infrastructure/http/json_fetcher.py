"""
Infrastructure: single-shot JSON over HTTP via httpx.

Every call opens its own AsyncClient, so nothing is shared between requests.
The whole exchange (connect, send, receive) is bounded by *timeout*; on expiry
the in-flight request task is cancelled, not merely abandoned. No retries.
"""

import asyncio
import logging
from typing import Any, Mapping, Optional

import httpx

from gold_monitor.domain.errors import (
    UpstreamConnectionError,
    UpstreamHttpError,
    UpstreamParseError,
    UpstreamTimeout,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


async def request_json(
    method: str,
    url: str,
    *,
    params: Optional[Mapping[str, str]] = None,
    headers: Optional[Mapping[str, str]] = None,
    json_body: Any = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Any:
    """Send one request and return the decoded JSON body.

    Raises:
        UpstreamTimeout:         no complete response within *timeout* seconds.
        UpstreamConnectionError: the request never reached a response.
        UpstreamHttpError:       non-2xx status; carries status and raw body.
        UpstreamParseError:      the body cannot be decoded or is not valid JSON.
    """
    async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
        try:
            response = await asyncio.wait_for(
                client.request(method, url, params=params, headers=headers, json=json_body),
                timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise UpstreamTimeout(f"{method} {url} timed out after {timeout}s") from exc
        except httpx.DecodingError as exc:
            raise UpstreamParseError(f"{method} {url} returned an undecodable body: {exc}") from exc
        except httpx.RequestError as exc:
            raise UpstreamConnectionError(f"{method} {url} failed: {exc}") from exc

    if not response.is_success:
        raise UpstreamHttpError(response.status_code, response.text, url=url)
    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamParseError(f"{method} {url} returned a non-JSON body") from exc


async def fetch_json(
    url: str,
    *,
    params: Optional[Mapping[str, str]] = None,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Any:
    """GET *url* and return parsed JSON. See request_json() for the failure modes."""
    return await request_json(
        "GET", url, params=params, headers=headers, timeout=timeout, transport=transport
    )
