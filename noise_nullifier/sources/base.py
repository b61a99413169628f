"""Base class for incident event sources."""

from abc import ABC, abstractmethod

from noise_nullifier.models.event import IncidentDetails, RawDelivery, WebhookEnvelope


class BaseSource(ABC):
    """Abstract base class for incident webhook sources."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name identifier."""
        ...

    @abstractmethod
    def verify(self, delivery: RawDelivery) -> None:
        """Raise SignatureError unless the delivery is authentic."""
        ...

    @abstractmethod
    def parse(self, body: bytes) -> WebhookEnvelope:
        """Decode a verified webhook body into an event envelope."""
        ...

    @abstractmethod
    async def fetch_incident(self, incident_id: str) -> IncidentDetails:
        """Fetch the firing narrative and client URL of an incident."""
        ...
