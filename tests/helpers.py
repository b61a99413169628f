"""Payload builders and fake backends shared by the tests."""

import json
from typing import Any

import httpx

from noise_nullifier.models.event import RawDelivery
from noise_nullifier.sources.pagerduty import compute_signature

SECRET = "test-signing-secret"
API_KEY = "test-api-key"
PD_API = "https://pd.test"

SCENARIO_A = """\
- Labels:
  - alertname=HighCPU
  - instance=node1
- Annotations:
  - summary=CPU high
"""

SCENARIO_B = """\
- Labels:
  - alertname=HighCPU
  - instance=node1
- Annotations:
  - summary=CPU high on node1
- Labels:
  - alertname=HighCPU
  - instance=node2
- Annotations:
  - summary=CPU high on node2
"""


def make_alert_body(
    firing: str = SCENARIO_A,
    client_url: str | None = "http://alertmanager.test:9093/#/alerts?receiver=pd",
) -> dict[str, Any]:
    body: dict[str, Any] = {"details": {"firing": firing}, "cef_details": {}}
    if client_url is not None:
        body["cef_details"]["client_url"] = client_url
    return body


def make_envelope(event_type: str = "incident.acknowledged", incident_id: str = "PINC123") -> bytes:
    return json.dumps({
        "event": {
            "id": "01EVENT",
            "event_type": event_type,
            "resource_type": "incident",
            "occurred_at": "2026-10-19T10:00:00Z",
            "data": {"id": incident_id, "type": "incident", "title": "CPU high"},
        }
    }).encode("utf-8")


def signed_delivery(body: bytes, secret: str = SECRET) -> RawDelivery:
    return RawDelivery(
        body=body,
        headers={"X-PagerDuty-Signature": compute_signature(body, secret)},
    )


class FakeBackends:
    """MockTransport handler standing in for PagerDuty and Alertmanager."""

    def __init__(self, alerts: list[dict[str, Any]] | None = None, silence_status: int = 200):
        self.alerts = alerts if alerts is not None else [{"body": make_alert_body()}]
        self.silence_status = silence_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "pd.test":
            return httpx.Response(200, json={"alerts": self.alerts})
        if request.method == "POST" and request.url.path == "/api/v2/silences":
            if self.silence_status == 200:
                return httpx.Response(200, json={"silenceID": "abc-123"})
            return httpx.Response(self.silence_status, text="bad matchers")
        return httpx.Response(404)

    @property
    def silence_posts(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]

    def silence_payloads(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.silence_posts]


