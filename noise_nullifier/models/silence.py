"""Alertmanager silence models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class Matcher(BaseModel):
    """A single label matcher of a silence."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    value: str
    is_regex: bool = Field(default=False, alias="isRegex")


class Silence(BaseModel):
    """Silence payload accepted by Alertmanager's v2 API."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    matchers: list[Matcher] = Field(default_factory=list)
    starts_at: datetime = Field(alias="startsAt")
    ends_at: datetime = Field(alias="endsAt")
    created_by: str = Field(alias="createdBy")
    comment: str

    @field_serializer("starts_at", "ends_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        # RFC 3339
        return value.isoformat()

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)
