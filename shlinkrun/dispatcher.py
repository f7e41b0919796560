"""Create short URLs on a Shlink instance.

One call is one ``POST {host}/rest/v3/short-urls`` authenticated with the
instance's ``X-Api-Key``.  There are two outcomes: the short URL, or a
:class:`~shlinkrun.exceptions.ShlinkError`.  Nothing is retried.
"""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence
from logging import getLogger

import httpx

from .exceptions import BackendError, MalformedResponse, TransportError
from .safety import check_host
from .settings import DEFAULT_TIMEOUT, BackendInstance

logger = getLogger(__name__)


@dataclass
class ShortenRequest:
    long_url: str
    custom_slug: Optional[str] = None
    title: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for the Shlink API.

        Unset fields are left out rather than sent as ``null``; a title is
        only sent together with a custom slug.
        """
        payload: Dict[str, Any] = {"longUrl": self.long_url, "tags": list(self.tags)}
        if self.custom_slug is not None:
            payload["customSlug"] = self.custom_slug
            if self.title is not None:
                payload["title"] = self.title
        return payload


@dataclass
class ShortenResult:
    short_url: str

    @classmethod
    def from_body(cls, body: str) -> "ShortenResult":
        try:
            data = json.loads(body)
        except ValueError as e:
            raise MalformedResponse(body, f"Response is not valid JSON: {e}") from e
        short_url = data.get("shortUrl") if isinstance(data, dict) else None
        if not isinstance(short_url, str) or not short_url:
            raise MalformedResponse(body)
        return cls(short_url=short_url)


def _headers(instance: BackendInstance) -> Dict[str, str]:
    return {"X-Api-Key": instance.api_key, "Accept": "application/json"}


def _handle_response(instance: BackendInstance, response: httpx.Response) -> str:
    body = response.text
    if not response.is_success:
        logger.warning(f"Shlink at {instance.domain} returned {response.status_code}")
        raise BackendError(response.status_code, body)
    result = ShortenResult.from_body(body)
    logger.info(f"Created {result.short_url} on {instance.domain}")
    return result.short_url


def create_short_url(
    instance: BackendInstance,
    request: ShortenRequest,
    *,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
    transport: Optional[httpx.BaseTransport] = None,
) -> str:
    """Create a short URL on *instance* and return it.

    Args:
        instance: The Shlink server and its API key.
        request: What to shorten.
        timeout: Request timeout in seconds; ``None`` waits indefinitely.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).

    Raises:
        BackendError: Non-success HTTP status; carries the raw body.
        MalformedResponse: Success status without a usable ``shortUrl``.
        TransportError: No response was received.
        SecurityError: The host is denied by the active security context.
    """
    check_host(instance.endpoint)
    logger.info(f"Shortening {request.long_url} with {instance.domain}")
    try:
        with httpx.Client(transport=transport, timeout=timeout) as client:
            response = client.post(
                instance.endpoint,
                json=request.to_payload(),
                headers=_headers(instance),
            )
    except httpx.TransportError as e:
        logger.warning(f"Could not reach {instance.domain}: {e}")
        raise TransportError(instance.host, str(e) or type(e).__name__) from e
    return _handle_response(instance, response)


async def acreate_short_url(
    instance: BackendInstance,
    request: ShortenRequest,
    *,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Async variant of :func:`create_short_url`.

    Cancelling the awaiting task aborts the in-flight POST and the
    ``asyncio.CancelledError`` propagates unchanged.  The code that started
    the request reports it as :class:`~shlinkrun.exceptions.Cancelled`.
    """
    check_host(instance.endpoint)
    logger.info(f"Shortening {request.long_url} with {instance.domain}")
    try:
        async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
            response = await client.post(
                instance.endpoint,
                json=request.to_payload(),
                headers=_headers(instance),
            )
    except asyncio.CancelledError:
        logger.info(f"Request to {instance.domain} cancelled")
        raise
    except httpx.TransportError as e:
        logger.warning(f"Could not reach {instance.domain}: {e}")
        raise TransportError(instance.host, str(e) or type(e).__name__) from e
    return _handle_response(instance, response)


def shorten(
    long_url: str,
    host: str,
    api_key: str,
    tags: Sequence[str] = (),
    shortcode: Optional[str] = None,
    title: Optional[str] = None,
    *,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
    transport: Optional[httpx.BaseTransport] = None,
) -> str:
    """Shorten *long_url* on *host*; see :func:`create_short_url`."""
    request = ShortenRequest(long_url=long_url, custom_slug=shortcode, title=title, tags=list(tags))
    return create_short_url(BackendInstance(host, api_key), request, timeout=timeout, transport=transport)


__all__ = [
    "ShortenRequest",
    "ShortenResult",
    "create_short_url",
    "acreate_short_url",
    "shorten",
]
