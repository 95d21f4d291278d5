"""HTTP transport used by the upstream collaborators."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from weatherbar._constants import HTTP_TIMEOUT, USER_AGENT
from weatherbar.exceptions import WeatherBarPayloadError, WeatherBarTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the collaborator modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_bytes(self, url: str) -> bytes:
        ...

    async def get_json(self, url: str) -> Any:
        ...


class HttpTransport:
    """aiohttp-backed GET transport with a bounded per-request timeout."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        timeout: float = HTTP_TIMEOUT,
    ) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._headers = {"user-agent": USER_AGENT, "accept-encoding": "gzip, deflate"}

    async def get_bytes(self, url: str) -> bytes:
        """GET *url* and return the body of a 200 response."""
        _logger.debug("GET %s", url)
        try:
            async with self._http.get(url, headers=self._headers, timeout=self._timeout) as resp:
                body = await resp.read()
                if resp.status != 200:
                    raise WeatherBarTransportError(
                        f"HTTP {resp.status} from {url}: {body[:200]!r}",
                        status_code=resp.status,
                        url=url,
                    )
        except WeatherBarTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise WeatherBarTransportError(
                f"Request to {url} failed: {exc!r}",
                url=url,
            ) from exc
        return body

    async def get_json(self, url: str) -> Any:
        """GET *url* and decode the body as JSON."""
        body = await self.get_bytes(url)
        try:
            return json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise WeatherBarPayloadError(
                f"Invalid JSON from {url}: {body[:200]!r}",
                source=url,
            ) from exc
