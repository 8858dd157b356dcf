# PATH: explorers/transport.py
"""
explorers/transport.py - HTTP GET for explorer endpoints.

Provides:
- One pooled httpx.AsyncClient shared by all adapters of an aggregator
- A hard per-request deadline (asyncio.wait_for on top of httpx timeouts)
- Mapping of every transport failure to TransportError
"""

import asyncio
from typing import Any, Optional

import httpx

from core.constants import ERROR_PREVIEW_CHARS, REQUEST_HEADERS, ErrorCode
from core.exceptions import TransportError


def decode_body(response: httpx.Response) -> Any:
    """
    Decode a response body.

    JSON bodies are parsed; anything else is returned as text, since some
    explorers answer with a bare text/plain value. Empty bodies give None.
    """
    if not response.content or not response.text.strip():
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpTransport:
    """
    GET-and-decode over a lazily created httpx.AsyncClient.

    Safe to share between concurrent requests; the client holds no
    per-request state.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        max_connections: int = 20,
    ):
        self._client = client
        self._owns_client = client is None
        self.max_connections = max_connections

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers=REQUEST_HEADERS,
                limits=httpx.Limits(max_connections=self.max_connections),
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def get_json(self, url: str, timeout_seconds: float) -> Any:
        """
        GET url and return the decoded body.

        Args:
            url: Full request URL
            timeout_seconds: Deadline for the whole request

        Returns:
            Parsed JSON, raw text for non-JSON bodies, or None when empty

        Raises:
            TransportError: Network failure, timeout or non-2xx status
        """
        client = await self._get_client()

        try:
            response = await asyncio.wait_for(
                client.get(
                    url,
                    headers=REQUEST_HEADERS,
                    timeout=httpx.Timeout(timeout_seconds),
                ),
                timeout=timeout_seconds,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise TransportError(
                f"Timeout after {timeout_seconds}s",
                code=ErrorCode.TRANSPORT_TIMEOUT,
                details={"url": url, "timeout_seconds": timeout_seconds},
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(
                f"Request failed: {str(e)[:ERROR_PREVIEW_CHARS]}",
                code=ErrorCode.TRANSPORT_NETWORK,
                details={"url": url, "error_type": type(e).__name__},
            ) from e

        if not response.is_success:
            raise TransportError(
                f"HTTP {response.status_code}",
                code=ErrorCode.TRANSPORT_HTTP_STATUS,
                details={
                    "url": url,
                    "status_code": response.status_code,
                    "body": response.text[:ERROR_PREVIEW_CHARS],
                },
            )

        return decode_body(response)
