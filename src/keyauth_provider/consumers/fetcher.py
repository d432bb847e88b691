"""Consumer profile lookup.

A consumer identifies itself as "host" or "host:port". Its public profile
lives at http://host:port/about and is a JSON object:

    {"name": "...", "about": "...", "key": "/key", "avatar": "/avatar"}

key and avatar are paths on the consumer host; the fetcher rewrites them to
absolute URLs so the login page can link them directly.

Every failure (bad id, network error, timeout, error status, oversized or
non-JSON body, wrong shape) degrades to an empty profile. Callers check
ConsumerProfile.is_empty instead of catching exceptions.
"""

from __future__ import annotations

__all__ = [
    "ConsumerInfoFetcher",
    "ConsumerProfile",
    "absolutize",
    "parse_consumer_id",
]

import json

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from keyauth_provider.constants import (
    CONSUMER_ABOUT_PATH,
    DEFAULT_CONSUMER_PORT,
    DEFAULT_CONSUMER_TIMEOUT_SECONDS,
    MAX_CONSUMER_PROFILE_BYTES,
)
from keyauth_provider.exceptions import ConsumerFetchError
from keyauth_provider.telemetry.system.system_logger import get_system_logger

logger = get_system_logger()


class ConsumerProfile(BaseModel):
    """Public profile of a consumer site.

    Attributes:
        name: Canonical consumer identifier, used as the TokenStore key.
        about: Free-text description shown on the login page.
        key: Absolute URL of the consumer's public key.
        avatar: Absolute URL of the consumer's avatar.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = ""
    about: str = ""
    key: str = ""
    avatar: str = ""

    @property
    def is_empty(self) -> bool:
        """True when the profile could not be fetched (no name)."""
        return not self.name


def parse_consumer_id(consumer_id: str) -> tuple[str, int]:
    """Split "host[:port]" into host and port.

    IPv6 hosts must be bracketed ("[::1]:8080"); the brackets are stripped
    from the returned host.

    Raises:
        ConsumerFetchError: If the host is empty or the port is not 1-65535.
    """
    text = consumer_id.strip()
    if text.startswith("["):
        host, bracket, rest = text[1:].partition("]")
        if not bracket or not host or (rest and not rest.startswith(":")):
            raise ConsumerFetchError(f"Invalid consumer id: {consumer_id!r}")
        sep, port_text = rest[:1], rest[1:]
    else:
        host, sep, port_text = text.partition(":")
    if not host or "/" in host:
        raise ConsumerFetchError(f"Invalid consumer id: {consumer_id!r}")
    if not sep:
        return host, DEFAULT_CONSUMER_PORT
    try:
        port = int(port_text)
    except ValueError:
        raise ConsumerFetchError(f"Invalid consumer port: {consumer_id!r}") from None
    if not 1 <= port <= 65535:
        raise ConsumerFetchError(f"Consumer port out of range: {consumer_id!r}")
    return host, port


def absolutize(consumer_id: str, path: str) -> str:
    """Turn a consumer-relative path into http://{consumer_id}{path}.

    The consumer id is used as given, port segment included, so links keep
    working for consumers on non-default ports.
    """
    if not path:
        return ""
    if path.startswith(("http://", "https://")):
        return path
    if not path.startswith("/"):
        path = "/" + path
    return f"http://{consumer_id.strip()}{path}"


class ConsumerInfoFetcher:
    """Fetches ConsumerProfile documents over HTTP.

    Stateless and safe to call concurrently. Each fetch uses its own
    short-lived client with a bounded timeout so a hung consumer cannot stall
    a login.

    Usage:
        fetcher = ConsumerInfoFetcher(timeout_seconds=5.0)
        profile = await fetcher.fetch("shop.example:8000")
        if profile.is_empty:
            ...
    """

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_CONSUMER_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize fetcher.

        Args:
            timeout_seconds: Connect/read timeout for the /about request.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self._timeout = timeout_seconds
        self._transport = transport

    async def fetch(self, consumer_id: str | None) -> ConsumerProfile:
        """Fetch the profile of consumer_id.

        Returns:
            The profile, or an empty ConsumerProfile on any failure.
        """
        if not consumer_id:
            return ConsumerProfile()
        try:
            return await self._fetch(consumer_id)
        except ConsumerFetchError as e:
            logger.warning(
                {
                    "event": "consumer_fetch_failed",
                    "message": str(e),
                    "component": "consumer_fetcher",
                    "details": {"consumer_id": consumer_id},
                }
            )
            return ConsumerProfile()

    async def _fetch(self, consumer_id: str) -> ConsumerProfile:
        host, port = parse_consumer_id(consumer_id)
        if ":" in host:
            host = f"[{host}]"
        url = f"http://{host}:{port}{CONSUMER_ABOUT_PATH}"

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                async with client.stream("GET", url, headers={"Accept": "application/json"}) as response:
                    if response.status_code != 200:
                        raise ConsumerFetchError(f"{url} returned status {response.status_code}")
                    body = await _read_capped(response, url)
        except httpx.TimeoutException as e:
            raise ConsumerFetchError(f"Timed out fetching {url}") from e
        except httpx.HTTPError as e:
            raise ConsumerFetchError(f"Could not fetch {url}: {e}") from e

        try:
            data = json.loads(body)
        except (ValueError, RecursionError) as e:
            # ValueError covers JSONDecodeError and UnicodeDecodeError
            raise ConsumerFetchError(f"{url} returned invalid JSON") from e
        if not isinstance(data, dict):
            raise ConsumerFetchError(f"{url} returned {type(data).__name__}, expected object")

        try:
            profile = ConsumerProfile.model_validate(data)
        except ValidationError as e:
            raise ConsumerFetchError(f"{url} returned a malformed profile: {e.error_count()} errors") from e

        return profile.model_copy(
            update={
                "key": absolutize(consumer_id, profile.key),
                "avatar": absolutize(consumer_id, profile.avatar),
            }
        )


async def _read_capped(response: httpx.Response, url: str) -> bytes:
    """Read a streamed body, aborting once it exceeds MAX_CONSUMER_PROFILE_BYTES."""
    body = bytearray()
    async for chunk in response.aiter_bytes():
        body.extend(chunk)
        if len(body) > MAX_CONSUMER_PROFILE_BYTES:
            raise ConsumerFetchError(f"{url} returned an oversized profile")
    return bytes(body)
