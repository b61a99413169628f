"""Turns accepted webhook deliveries into Alertmanager silences."""

import asyncio
import logging
from enum import Enum

from noise_nullifier.channels.base import BaseChannel
from noise_nullifier.errors import EnvelopeError, IncidentDataError, NoLabelsError, NullifierError
from noise_nullifier.labels import parse_labels
from noise_nullifier.models.event import Event, EventKind, RawDelivery
from noise_nullifier.silence import build_silence
from noise_nullifier.sources.base import BaseSource

logger = logging.getLogger(__name__)


class DispatchOutcome(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    IGNORED = "ignored"


class EventDispatcher:
    """Processes webhook deliveries in the background, one task per delivery.

    Deliveries are handled at most once; failures are logged and never
    retried. At most ``max_concurrent`` deliveries are processed at a time,
    the rest wait for a free slot.
    """

    def __init__(self, source: BaseSource, channel: BaseChannel, max_concurrent: int = 16):
        self._source = source
        self._channel = channel
        self._slots = asyncio.Semaphore(max_concurrent)
        self._tasks: set[asyncio.Task] = set()

        logger.info(
            f"Dispatcher initialized: source={source.name}, channel={channel.name}, "
            f"max_concurrent={max_concurrent}"
        )

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, delivery: RawDelivery) -> asyncio.Task:
        """Schedule a delivery for processing and return immediately."""
        task = asyncio.create_task(self._run(delivery))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, delivery: RawDelivery) -> DispatchOutcome:
        async with self._slots:
            return await self.process(delivery)

    async def drain(self) -> None:
        """Wait for every submitted delivery to finish."""
        if self._tasks:
            logger.info(f"Waiting for {len(self._tasks)} in-flight event(s)")
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def process(self, delivery: RawDelivery) -> DispatchOutcome:
        """Run one delivery through the whole pipeline."""
        try:
            self._source.verify(delivery)
            logger.info("Received signed webhook")

            envelope = self._source.parse(delivery.body)
            logger.debug(f"Webhook content: {envelope.model_dump_json(indent=2)}")

            return await self.dispatch(envelope.event)
        except NullifierError as e:
            logger.error(f"Webhook processing failed: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error while processing webhook: {e}")
        return DispatchOutcome.FAILED

    async def dispatch(self, event: Event) -> DispatchOutcome:
        kind = event.kind

        if kind is EventKind.INCIDENT_ACKNOWLEDGED:
            if not event.data.id:
                raise EnvelopeError(f"Event {event.id} has no incident id")
            return await self.handle_acknowledged(event.data.id)

        if kind is EventKind.PING:
            logger.info("Received a PagerDuty ping event")
            return DispatchOutcome.IGNORED

        logger.info(f"Unhandled event type: {event.event_type}")
        return DispatchOutcome.IGNORED

    async def handle_acknowledged(self, incident_id: str) -> DispatchOutcome:
        """Silence the alerts behind an acknowledged incident."""
        details = await self._source.fetch_incident(incident_id)

        labels = parse_labels(details.firing)
        if not labels:
            raise NoLabelsError(incident_id)
        logger.debug(f"Labels for incident {incident_id}: {labels}")

        try:
            url = self._channel.target_url(details.client_url)
        except ValueError as e:
            raise IncidentDataError(incident_id, f"unusable client_url ({e})") from e
        logger.debug(f"Silence target for incident {incident_id}: {url}")

        silence = build_silence(labels)
        if not await self._channel.send_safe(silence, url):
            return DispatchOutcome.FAILED

        logger.info(f"Silenced incident {incident_id} until {silence.ends_at.isoformat()}")
        return DispatchOutcome.SENT
