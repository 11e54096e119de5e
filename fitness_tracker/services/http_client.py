"""
Long-lived httpx.AsyncClient for the workouts API.
Created once at startup (see main.open_store) and handed to WorkoutApiClient.
"""
from __future__ import annotations

import httpx


def create_http_client(timeout: float | None = 30.0) -> httpx.AsyncClient:
    """Create the client. timeout=None disables the httpx timeout."""
    return httpx.AsyncClient(
        timeout=timeout,
        headers={"Accept": "application/json"},
    )


async def close_http_client(client: httpx.AsyncClient | None) -> None:
    """Close the client. Safe to call with None or an already closed client."""
    if client is not None and not client.is_closed:
        await client.aclose()
