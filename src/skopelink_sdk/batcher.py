"""In-memory event batching with single-flight flushes.

Events accumulate in a FIFO queue and are POSTed in one batch when the
queue reaches ``batch_size`` or when the caller awaits ``flush()``. At most
one flush is in flight per batcher. A batch that fails to send is put back
at the front of the queue and goes out with the next flush.
"""

import asyncio
import logging
import warnings
from typing import Any, Mapping, Optional, Union

import httpx
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from .config import SDKConfig, load_config
from .exceptions import NotInitializedWarning, TransmissionError
from .schema import EventBatch, TrackedEvent
from .transport import HttpTransport, Transport

logger = logging.getLogger("skopelink_sdk.batcher")


class EventBatcher:
    """Queues tracked events and delivers them in batches.

    Intended for use from a single asyncio event loop. ``track()`` never
    blocks; when it fills a batch it starts the flush and leaves delivery
    to a background task.

    Usage:
        batcher = EventBatcher()
        batcher.initialize(api_key="sk_live_abc", endpoint="https://collect.example.com")
        batcher.track("user_signup", {"plan": "premium"})

        # Before exiting:
        await batcher.aclose()
    """

    def __init__(self, transport: Optional[Transport] = None):
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpTransport()
        self._config: Optional[SDKConfig] = None
        self._queue: list[TrackedEvent] = []
        self._flushing = False
        self._tasks: set[asyncio.Task] = set()

        self._batches_sent = 0
        self._events_sent = 0
        self._failed_attempts = 0
        self._dropped_events = 0

    @property
    def config(self) -> Optional[SDKConfig]:
        return self._config

    @property
    def is_flushing(self) -> bool:
        return self._flushing

    @property
    def queued_events(self) -> list[TrackedEvent]:
        """Return a copy of the events waiting to be sent."""
        return list(self._queue)

    def initialize(
        self,
        config: Union[SDKConfig, Mapping[str, Any], None] = None,
        **options: Any,
    ) -> None:
        """Validate and store the configuration.

        Replaces any previous configuration. Events already queued stay
        queued.

        Raises:
            ConfigurationError: ``api_key`` or ``endpoint`` is missing.
        """
        self._config = load_config(config, **options)

    def track(self, event_name: str, event_data: Optional[dict] = None) -> None:
        """Queue an event, starting a flush if the batch is full.

        Before ``initialize()`` the event is dropped, a
        ``NotInitializedWarning`` is emitted (shown once per call site
        under the default warning filters) and a warning is logged for
        every dropped event. Events whose data cannot be encoded as JSON
        are dropped with a logged warning.
        """
        if self._config is None:
            self._dropped_events += 1
            logger.warning(
                "SkopeLink SDK not initialized, dropping event %r", event_name
            )
            warnings.warn(
                "SDK not initialized. Call initialize() before tracking events.",
                NotInitializedWarning,
                stacklevel=2,
            )
            return

        try:
            event = TrackedEvent(
                event_name=event_name,
                event_data=dict(event_data or {}),
                user_id=self._config.user_id,
            )
            # Encode now so one bad event cannot poison a whole batch later
            event.model_dump_json(by_alias=True)
        except (ValidationError, PydanticSerializationError) as exc:
            self._dropped_events += 1
            logger.warning(
                "Event %r is not JSON serializable, dropping it: %s",
                event_name,
                exc,
            )
            return

        self._queue.append(event)

        if len(self._queue) >= self._config.batch_size:
            self._schedule_flush()

    async def flush(self) -> None:
        """Send every queued event as one batch.

        Returns immediately if the queue is empty or another flush is in
        flight. Delivery failures are logged and the batch is requeued;
        they are never raised to the caller.
        """
        batch = self._take_batch()
        if batch is None:
            return
        await self._deliver(batch)

    async def join(self) -> None:
        """Wait for flushes started by ``track()`` to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Finish pending flushes, send what is left, release the transport."""
        await self.join()
        await self.flush()
        if self._owns_transport:
            await self._transport.aclose()

    def stats(self) -> dict[str, Any]:
        """Return queue and delivery counters for this batcher."""
        return {
            "queued": len(self._queue),
            "flushing": self._flushing,
            "batches_sent": self._batches_sent,
            "events_sent": self._events_sent,
            "failed_attempts": self._failed_attempts,
            "dropped_events": self._dropped_events,
        }

    def _schedule_flush(self) -> None:
        """Begin a flush now and deliver it on a background task."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(
                "No running event loop; %d events wait for an explicit flush()",
                len(self._queue),
            )
            return

        batch = self._take_batch()
        if batch is None:
            return
        task = loop.create_task(self._deliver(batch))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _take_batch(self) -> Optional[list[TrackedEvent]]:
        """Claim the flush guard and drain the queue.

        Must not await: the guard has to be set before the caller reaches
        its first suspension point.
        """
        if self._flushing or not self._queue:
            return None
        self._flushing = True
        batch, self._queue = self._queue, []
        return batch

    async def _deliver(self, batch: list[TrackedEvent]) -> None:
        """POST a claimed batch; requeue it in front on any failure."""
        config = self._config
        try:
            response = await self._transport.post(
                config.endpoint,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {config.api_key}",
                },
                body=EventBatch(events=batch).to_json(),
            )
            if not response.ok:
                raise TransmissionError(response.status_code, response.status_text)
        except asyncio.CancelledError:
            self._requeue(batch)
            raise
        except (TransmissionError, httpx.HTTPError) as exc:
            self._failed_attempts += 1
            logger.error("Error sending %d events, requeuing: %s", len(batch), exc)
            self._requeue(batch)
        except Exception as exc:
            self._failed_attempts += 1
            logger.error(
                "Unexpected error sending %d events, requeuing: %s",
                len(batch),
                exc,
                exc_info=True,
            )
            self._requeue(batch)
        else:
            self._batches_sent += 1
            self._events_sent += len(batch)
            logger.debug("Sent batch of %d events", len(batch))
        finally:
            self._flushing = False

    def _requeue(self, batch: list[TrackedEvent]) -> None:
        # Older events go first, then whatever arrived during the attempt.
        self._queue = batch + self._queue
