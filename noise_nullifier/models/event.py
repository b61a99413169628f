"""PagerDuty webhook v3 event envelope.

Only the fields the bridge needs are modelled; everything else in the
payload is ignored.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EventKind(str, Enum):
    """Event types the bridge reacts to."""

    INCIDENT_ACKNOWLEDGED = "incident.acknowledged"
    PING = "pagey.ping"
    UNHANDLED = "unhandled"

    @classmethod
    def classify(cls, event_type: str) -> "EventKind":
        if event_type == cls.INCIDENT_ACKNOWLEDGED.value:
            return cls.INCIDENT_ACKNOWLEDGED
        if event_type == cls.PING.value:
            return cls.PING
        return cls.UNHANDLED


class EventData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(default="", description="Resource id, the incident id for incident events")
    type: str = Field(default="", description="Resource type, e.g. incident")
    title: str = Field(default="", description="Incident title")


class Event(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(description="Webhook event id")
    event_type: str = Field(description="e.g. incident.acknowledged")
    resource_type: str = Field(default="", description="e.g. incident")
    occurred_at: str = Field(default="")
    data: EventData = Field(default_factory=EventData)

    @property
    def kind(self) -> EventKind:
        return EventKind.classify(self.event_type)


class WebhookEnvelope(BaseModel):
    """Top level ``{"event": {...}}`` body of a v3 webhook."""

    model_config = ConfigDict(extra="ignore")

    event: Event


class RawDelivery(BaseModel):
    """An accepted webhook request, copied out of the HTTP layer."""

    model_config = ConfigDict(frozen=True)

    body: bytes
    headers: dict[str, str] = Field(default_factory=dict)


class IncidentDetails(BaseModel):
    """The parts of an incident's first alert used to build a silence."""

    model_config = ConfigDict(frozen=True)

    incident_id: str
    firing: str
    client_url: str
