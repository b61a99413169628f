"""NoiseNullifier - FastAPI bridge from PagerDuty webhooks to Alertmanager silences."""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, ValidationError

from noise_nullifier.channels.alertmanager import AlertmanagerChannel
from noise_nullifier.config import Settings, get_settings
from noise_nullifier.dispatcher import EventDispatcher
from noise_nullifier.models.event import RawDelivery
from noise_nullifier.sources.pagerduty import PagerDutySource

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


class AppContext(BaseModel):
    """Everything a request handler needs, built once at startup."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    settings: Settings
    client: httpx.AsyncClient
    dispatcher: EventDispatcher


def build_context(settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> AppContext:
    client = httpx.AsyncClient(timeout=settings.http_timeout, transport=transport)
    source = PagerDutySource(
        client,
        secret=settings.pd_secret,
        api_key=settings.pd_apikey,
        api_url=settings.pagerduty_api_url,
    )
    channel = AlertmanagerChannel(client, silences_path=settings.alertmanager_silence_path)
    dispatcher = EventDispatcher(source, channel, max_concurrent=settings.max_concurrent_events)
    return AppContext(settings=settings, client=client, dispatcher=dispatcher)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Configure logging level
    logging.getLogger().setLevel(settings.log_level.upper())

    context = build_context(settings)
    app.state.context = context
    logger.info("NoiseNullifier started")

    yield

    # Cleanup on shutdown
    await context.dispatcher.drain()
    await context.client.aclose()
    logger.info("NoiseNullifier stopped")


app = FastAPI(
    title="NoiseNullifier",
    description="Bridge converting PagerDuty incident acknowledgements into Alertmanager silences",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/webhook")
async def pagerduty_webhook(request: Request) -> JSONResponse:
    """Accept a PagerDuty webhook and process it in the background."""
    logger.info("Received webhook")

    body = await request.body()
    delivery = RawDelivery(body=body, headers=dict(request.headers))

    context: AppContext = request.app.state.context
    context.dispatcher.submit(delivery)

    return JSONResponse(status_code=status.HTTP_202_ACCEPTED, content={"status": "accepted"})


def run() -> None:
    """Run the application using uvicorn."""
    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error(f"Required environment variables are not set: {e}")
        sys.exit(1)

    logger.info(f"Listening on {settings.host}:{settings.port} for incoming webhooks")
    uvicorn.run(
        "noise_nullifier.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    run()
