"""Main entry point for the SkopeLink SDK."""

from typing import Optional

from .batcher import EventBatcher
from .config import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_TIMEOUT_SECONDS,
    SDKConfig,
)
from .transport import HttpTransport, Transport


class SkopeLinkClient:
    """Client for sending analytics events to a SkopeLink collector.

    Usage:
        async with SkopeLinkClient(
            api_key="sk_live_abc123",
            endpoint="https://collect.example.com",
            user_id="user123",
        ) as client:
            client.track("user_signup", {"plan": "premium"})
            await client.flush()
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str,
        user_id: Optional[str] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[Transport] = None,
    ):
        self._owns_transport = transport is None
        self._transport = transport or HttpTransport(timeout=timeout)
        self._batcher = EventBatcher(transport=self._transport)
        self._batcher.initialize(
            api_key=api_key,
            endpoint=endpoint,
            user_id=user_id,
            batch_size=batch_size,
            retry_attempts=retry_attempts,
        )

    @property
    def config(self) -> SDKConfig:
        return self._batcher.config

    @property
    def batcher(self) -> EventBatcher:
        return self._batcher

    def track(self, event_name: str, event_data: Optional[dict] = None) -> None:
        """Queue an event. Non-blocking; may start a background flush."""
        self._batcher.track(event_name, event_data)

    async def flush(self) -> None:
        """Send all queued events now. Failures are logged and requeued."""
        await self._batcher.flush()

    async def shutdown(self) -> None:
        """Flush pending events and clean up. Call on app exit."""
        await self._batcher.aclose()
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self) -> "SkopeLinkClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()
