"""Alertmanager v2 silences channel."""

import json
import logging
from urllib.parse import urlsplit

import httpx

from noise_nullifier.channels.base import BaseChannel
from noise_nullifier.errors import SilenceSubmitError
from noise_nullifier.models.silence import Silence

logger = logging.getLogger(__name__)

SILENCES_PATH = "/api/v2/silences"


def extract_base_url(client_url: str) -> str:
    """Reduce a URL to ``scheme://host[:port]``, dropping path and query."""
    parts = urlsplit(client_url)
    host = parts.netloc.rpartition("@")[2]
    if not parts.scheme or not host:
        raise ValueError(f"URL has no scheme or host: {client_url!r}")
    return f"{parts.scheme}://{host}"


class AlertmanagerChannel(BaseChannel):
    """Posts silences to the Alertmanager an alert was generated by."""

    def __init__(self, client: httpx.AsyncClient, silences_path: str = SILENCES_PATH):
        self._client = client
        self._silences_path = "/" + silences_path.lstrip("/")

    @property
    def name(self) -> str:
        return "alertmanager"

    def target_url(self, client_url: str) -> str:
        return extract_base_url(client_url) + self._silences_path

    async def send(self, silence: Silence, url: str) -> None:
        payload = silence.to_wire()
        logger.info(f"Sending silence with {len(silence.matchers)} matcher(s) to {url}")
        logger.debug(f"Silence request body: {json.dumps(payload)}")

        try:
            response = await self._client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise SilenceSubmitError(f"Alertmanager request to {url} failed: {e}") from e

        if not response.is_success:
            raise SilenceSubmitError(
                f"Alertmanager returned status {response.status_code}: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        logger.info("Silence successfully sent to Alertmanager")
