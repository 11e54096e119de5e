"""
Workouts API client: CRUD on /workouts and the calories summary.
Queries (list, summary) treat 404, empty and unreadable bodies as "no data";
writes (create, update, delete) raise on every failure.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from fitness_tracker.config import settings
from fitness_tracker.core.errors import InvalidEndpoint, MalformedRecord, RequestRejected, TransportFailure
from fitness_tracker.schemas.summary import CaloriesSummary
from fitness_tracker.schemas.workout import (
    Workout,
    WorkoutFilter,
    decode_workout,
    decode_workouts,
    encode_create_body,
    encode_workout,
    isoformat,
    to_datetime,
)

logger = logging.getLogger(__name__)


def _is_success(response: httpx.Response) -> bool:
    return 200 <= response.status_code < 300


def _log_response_error(method: str, url: str, response: httpx.Response) -> None:
    """Log HTTP error with a truncated body."""
    body = (response.text or "")[:500]
    logger.warning(
        "Workouts API %s %s -> %s body=%s",
        method,
        url,
        response.status_code,
        body,
    )


def _rejected(method: str, url: str, response: httpx.Response) -> RequestRejected:
    _log_response_error(method, url, response)
    return RequestRejected(response.status_code, (response.text or "")[:500])


class WorkoutApiClient:
    """One request per operation against {base_url}/workouts. Create once and share."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str | None = None,
        minimal_create_body: bool | None = None,
    ):
        self._http = http
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._minimal_create_body = (
            settings.minimal_create_body if minimal_create_body is None else minimal_create_body
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def collection_url(self) -> str:
        return f"{self._base_url}/workouts"

    def _workout_url(self, workout_id: str) -> str:
        if not workout_id or not workout_id.strip():
            raise InvalidEndpoint("workout id is empty")
        return f"{self.collection_url}/{quote(workout_id, safe='')}"

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._http.request(method, url, **kwargs)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise InvalidEndpoint(f"{url} ({e})") from e
        except httpx.RequestError as e:
            logger.warning("Workouts API %s %s failed: %r", method, url, e)
            raise TransportFailure(e) from e

    @staticmethod
    def _decode_record(response: httpx.Response) -> Workout:
        if not response.content:
            raise MalformedRecord("empty response body")
        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedRecord(f"invalid JSON ({e})") from e
        return decode_workout(payload)

    async def _write(self, method: str, url: str, body: dict[str, Any]) -> Workout:
        r = await self._send(method, url, json=body)
        if not _is_success(r):
            raise _rejected(method, url, r)
        return self._decode_record(r)

    async def create(self, workout: Workout, minimal: bool | None = None) -> Workout:
        """POST /workouts. Returns the server copy (real id, audit fields)."""
        use_minimal = self._minimal_create_body if minimal is None else minimal
        body = encode_create_body(workout, minimal=use_minimal)
        created = await self._write("POST", self.collection_url, body)
        logger.debug("Created workout %s (%s)", created.id, created.type)
        return created

    async def list(self, query: WorkoutFilter | None = None) -> list[Workout]:
        """GET /workouts with optional type/startDate/endDate. No data in any form gives []."""
        params = (query or WorkoutFilter()).query_params()
        url = self.collection_url
        r = await self._send("GET", url, params=params)
        if r.status_code == 404:
            logger.info("Workouts API GET %s -> 404, no workouts", url)
            return []
        if not _is_success(r):
            raise _rejected("GET", url, r)
        if not r.content or r.content.strip() == b"[]":
            return []
        try:
            return decode_workouts(r.json())
        except (ValueError, MalformedRecord) as e:
            logger.warning("Workouts API GET %s: unreadable list body, treating as empty: %s", url, e)
            return []

    async def get_by_id(self, workout_id: str) -> Workout:
        """GET /workouts/{id}."""
        url = self._workout_url(workout_id)
        r = await self._send("GET", url)
        if not _is_success(r):
            raise _rejected("GET", url, r)
        return self._decode_record(r)

    async def update(self, workout_id: str, workout: Workout) -> Workout:
        """PUT /workouts/{id} with the full record."""
        return await self._write("PUT", self._workout_url(workout_id), encode_workout(workout))

    async def delete(self, workout_id: str) -> bool:
        """DELETE /workouts/{id}. Response body is ignored."""
        url = self._workout_url(workout_id)
        r = await self._send("DELETE", url)
        if not _is_success(r):
            raise _rejected("DELETE", url, r)
        return True

    async def calorie_summary(
        self,
        start_date: datetime | date | str,
        end_date: datetime | date | str,
    ) -> CaloriesSummary:
        """GET /workouts/calories. 404 or an unreadable body gives zero totals for the range."""
        start, end = to_datetime(start_date), to_datetime(end_date)
        url = f"{self.collection_url}/calories"
        params = {"startDate": isoformat(start), "endDate": isoformat(end)}
        r = await self._send("GET", url, params=params)
        if r.status_code == 404:
            logger.info("Workouts API GET %s -> 404, zero summary", url)
            return CaloriesSummary.empty(start, end)
        if not _is_success(r):
            raise _rejected("GET", url, r)
        if not r.content:
            return CaloriesSummary.empty(start, end)
        try:
            return CaloriesSummary.model_validate(r.json()).with_range(start, end)
        except (ValueError, ValidationError) as e:
            logger.warning("Workouts API GET %s: unreadable summary, using zero totals: %s", url, e)
            return CaloriesSummary.empty(start, end)
