from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from fitness_tracker.config import Settings, settings as default_settings
from fitness_tracker.core.logging_config import configure_logging
from fitness_tracker.services.http_client import close_http_client, create_http_client
from fitness_tracker.services.workout_client import WorkoutApiClient
from fitness_tracker.services.workout_store import WorkoutStore


@asynccontextmanager
async def open_store(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[WorkoutStore]:
    """Build HTTP client -> API client -> store once at startup; close the HTTP client on exit."""
    cfg = settings or default_settings
    configure_logging(cfg.log_level, cfg.debug)
    if transport is not None:
        http = httpx.AsyncClient(transport=transport, timeout=cfg.request_timeout_seconds)
    else:
        http = create_http_client(timeout=cfg.request_timeout_seconds)
    try:
        api = WorkoutApiClient(http, base_url=cfg.api_base_url, minimal_create_body=cfg.minimal_create_body)
        yield WorkoutStore(
            api,
            default_user=cfg.default_user,
            discard_stale_responses=cfg.discard_stale_responses,
        )
    finally:
        await close_http_client(http)
