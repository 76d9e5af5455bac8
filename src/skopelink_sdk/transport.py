"""HTTP transport used by the batcher to deliver event batches."""

import logging
from typing import Optional, Protocol

import httpx

from .config import DEFAULT_TIMEOUT_SECONDS

logger = logging.getLogger("skopelink_sdk.transport")


class TransportResponse:
    """Outcome of one POST: success flag plus status details."""

    __slots__ = ("ok", "status_code", "status_text")

    def __init__(self, ok: bool, status_code: int, status_text: str = ""):
        self.ok = ok
        self.status_code = status_code
        self.status_text = status_text

    def __repr__(self):
        return (
            f"TransportResponse(ok={self.ok}, status_code={self.status_code}, "
            f"status_text={self.status_text!r})"
        )


class Transport(Protocol):
    """Anything that can POST a JSON body and report the outcome.

    Implementations raise on network failure and return a non-ok
    ``TransportResponse`` when the server rejects the request.
    """

    async def post(
        self, url: str, headers: dict[str, str], body: str
    ) -> TransportResponse: ...

    async def aclose(self) -> None: ...


class HttpTransport:
    """Default transport backed by ``httpx.AsyncClient``.

    Request timeouts are enforced here; the batcher has none of its own.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def post(
        self, url: str, headers: dict[str, str], body: str
    ) -> TransportResponse:
        """POST ``body`` to ``url``. Network errors propagate."""
        response = await self._client.post(url, content=body, headers=headers)
        if response.status_code < 400:
            return TransportResponse(True, response.status_code)

        logger.debug(
            "SkopeLink endpoint rejected batch (HTTP %d): %s",
            response.status_code,
            response.text[:200],
        )
        return TransportResponse(
            False, response.status_code, response.reason_phrase
        )

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()
