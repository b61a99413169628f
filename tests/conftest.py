"""Shared fixtures for NoiseNullifier tests."""

from typing import Callable

import httpx
import pytest

from helpers import API_KEY, PD_API, SECRET, FakeBackends
from noise_nullifier.channels.alertmanager import AlertmanagerChannel
from noise_nullifier.dispatcher import EventDispatcher
from noise_nullifier.sources.pagerduty import PagerDutySource


@pytest.fixture
def backends() -> FakeBackends:
    return FakeBackends()


@pytest.fixture
def make_dispatcher() -> Callable[..., EventDispatcher]:
    def _make(fake: Callable, max_concurrent: int = 16) -> EventDispatcher:
        client = httpx.AsyncClient(transport=httpx.MockTransport(fake))
        source = PagerDutySource(client, secret=SECRET, api_key=API_KEY, api_url=PD_API)
        return EventDispatcher(source, AlertmanagerChannel(client), max_concurrent=max_concurrent)

    return _make
