"""PagerDuty webhook v3 source and incident lookup."""

import hashlib
import hmac
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from noise_nullifier.errors import EnvelopeError, IncidentDataError, SignatureError
from noise_nullifier.models.event import IncidentDetails, RawDelivery, WebhookEnvelope
from noise_nullifier.sources.base import BaseSource

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-pagerduty-signature"
SIGNATURE_VERSION = "v1="


def compute_signature(body: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), body, digestmod=hashlib.sha256).hexdigest()
    return f"{SIGNATURE_VERSION}{digest}"


def verify_signature(body: bytes, header: str | None, secret: str) -> None:
    """Check a raw body against an ``X-PagerDuty-Signature`` header value.

    The header may carry several comma-separated signatures (PagerDuty sends
    more than one while a secret is being rotated); one match is enough.
    """
    if not header:
        raise SignatureError("missing X-PagerDuty-Signature header")

    expected = compute_signature(body, secret)
    for candidate in header.split(","):
        if hmac.compare_digest(candidate.strip(), expected):
            return

    raise SignatureError("no valid webhook signature found")


class PagerDutySource(BaseSource):
    """Verifies PagerDuty webhooks and reads incident alerts over the REST API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        secret: str,
        api_key: str,
        api_url: str = "https://api.pagerduty.com",
    ):
        self._client = client
        self._secret = secret
        self._api_key = api_key
        self._api_url = api_url.rstrip("/")

    @property
    def name(self) -> str:
        return "pagerduty"

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.pagerduty+json;version=2",
            "Authorization": f"Token token={self._api_key}",
        }

    def verify(self, delivery: RawDelivery) -> None:
        headers = {k.lower(): v for k, v in delivery.headers.items()}
        verify_signature(delivery.body, headers.get(SIGNATURE_HEADER), self._secret)

    def parse(self, body: bytes) -> WebhookEnvelope:
        try:
            return WebhookEnvelope.model_validate_json(body)
        except ValidationError as e:
            raise EnvelopeError(f"Invalid webhook payload: {e}") from e

    async def list_incident_alerts(self, incident_id: str) -> list[dict[str, Any]]:
        url = f"{self._api_url}/incidents/{incident_id}/alerts"
        try:
            response = await self._client.get(url, headers=self._headers())
            response.raise_for_status()
            return response.json().get("alerts") or []
        except (httpx.HTTPError, ValueError) as e:
            raise IncidentDataError(incident_id, f"failed to list alerts ({e})") from e

    async def fetch_incident(self, incident_id: str) -> IncidentDetails:
        alerts = await self.list_incident_alerts(incident_id)
        if not alerts:
            raise IncidentDataError(incident_id, "no alerts associated")

        return extract_incident_details(incident_id, alerts[0].get("body"))


def extract_incident_details(incident_id: str, body: Any) -> IncidentDetails:
    """Pull ``details.firing`` and ``cef_details.client_url`` out of an alert body."""
    if not body or not isinstance(body, dict):
        raise IncidentDataError(incident_id, "alert body is empty")

    details = body.get("details")
    if not isinstance(details, dict):
        raise IncidentDataError(incident_id, "failed to parse details")

    logger.debug(f"Details for incident {incident_id}: {details}")

    firing = details.get("firing")
    if not isinstance(firing, str) or not firing:
        raise IncidentDataError(incident_id, "failed to find firing details")

    cef_details = body.get("cef_details")
    if not isinstance(cef_details, dict):
        raise IncidentDataError(incident_id, "failed to parse cef_details")

    client_url = cef_details.get("client_url")
    if not isinstance(client_url, str) or not client_url:
        raise IncidentDataError(incident_id, "failed to find client_url")

    return IncidentDetails(incident_id=incident_id, firing=firing, client_url=client_url)
