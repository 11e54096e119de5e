"""
Workout store: the in-memory list of workouts and the last calories summary,
kept in sync with the workouts API.

Commands are coroutines run on one event loop; state is only mutated after the
API call returns, on that loop, so no locks are needed. Every change is published
to subscribers as an immutable StoreState snapshot.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import date, datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

from fitness_tracker.config import settings
from fitness_tracker.core.errors import MalformedRecord, RequestRejected, WorkoutApiError
from fitness_tracker.schemas.summary import CaloriesSummary
from fitness_tracker.schemas.workout import Workout, WorkoutDraft, WorkoutFilter
from fitness_tracker.services.stats import TimeRange
from fitness_tracker.services.workout_client import WorkoutApiClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreState(BaseModel):
    """What the UI renders."""

    model_config = ConfigDict(frozen=True)

    workouts: tuple[Workout, ...] = ()
    is_loading: bool = False
    error_message: str | None = None
    calories_summary: CaloriesSummary | None = None


Listener = Callable[[StoreState], None]


class WorkoutStore:
    def __init__(
        self,
        api: WorkoutApiClient,
        default_user: str | None = None,
        discard_stale_responses: bool | None = None,
    ):
        self._api = api
        self._default_user = default_user or settings.default_user
        self._discard_stale = (
            settings.discard_stale_responses if discard_stale_responses is None else discard_stale_responses
        )
        self._state = StoreState()
        self._listeners: list[Listener] = []
        self._in_flight = 0
        self._fetch_generation = 0
        self._loop: asyncio.AbstractEventLoop | None = None

    def snapshot(self) -> StoreState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dismiss_error(self) -> None:
        self._set(error_message=None)

    def _set(self, **changes: Any) -> None:
        new = self._state.model_copy(update=changes)
        if new == self._state:
            return
        self._state = new
        for listener in list(self._listeners):
            try:
                listener(new)
            except Exception:
                logger.exception("Store listener %r failed", listener)

    def _bind_loop(self) -> None:
        loop = asyncio.get_running_loop()
        if self._loop is None:
            self._loop = loop
        elif self._loop is not loop:
            raise RuntimeError("WorkoutStore used from a different event loop than the one that owns its state")

    def _begin(self) -> None:
        self._bind_loop()
        self._in_flight += 1
        self._set(is_loading=True, error_message=None)

    def _finish(self, **changes: Any) -> None:
        self._in_flight -= 1
        self._set(is_loading=self._in_flight > 0, **changes)

    async def _run(
        self,
        call: Callable[[], Awaitable[T]],
        apply: Callable[[T], dict[str, Any]],
        is_stale: Callable[[], bool] | None = None,
    ) -> T | None:
        """Loading -> call -> apply(result) or publish the error. apply reads state at completion time."""
        self._begin()
        try:
            result = await call()
        except WorkoutApiError as e:
            if is_stale is not None and is_stale():
                logger.debug("Dropping error from superseded request: %s", e)
                self._finish()
                return None
            self._finish(error_message=str(e))
            return None
        except BaseException:
            self._finish()
            raise
        if is_stale is not None and is_stale():
            logger.debug("Dropping superseded response")
            self._finish()
            return None
        self._finish(**apply(result))
        return result

    async def _list_lenient(self, query: WorkoutFilter | None) -> list[Workout]:
        try:
            return await self._api.list(query)
        except MalformedRecord as e:
            logger.info("Workout list unreadable, showing no workouts: %s", e)
            return []
        except RequestRejected as e:
            if e.status_code == 404:
                return []
            raise

    async def fetch(self, query: WorkoutFilter | None = None) -> list[Workout] | None:
        """Replace the list with the server's result for query. None when it failed or was superseded."""
        self._bind_loop()
        self._fetch_generation += 1
        generation = self._fetch_generation

        def is_stale() -> bool:
            return generation != self._fetch_generation

        return await self._run(
            lambda: self._list_lenient(query),
            lambda workouts: {"workouts": tuple(workouts)},
            is_stale if self._discard_stale else None,
        )

    async def create(self, draft: WorkoutDraft) -> Workout | None:
        """Create on the server and put the confirmed record first in the list."""
        placeholder = draft.to_placeholder(self._default_user)
        return await self._run(
            lambda: self._api.create(placeholder),
            lambda created: {"workouts": (created, *self._state.workouts)},
        )

    async def update(self, workout: Workout) -> Workout | None:
        """Send the full record; the returned copy replaces the entry with the same id in place."""

        def apply(updated: Workout) -> dict[str, Any]:
            items = list(self._state.workouts)
            for i, w in enumerate(items):
                if w.id == updated.id:
                    items[i] = updated
                    return {"workouts": tuple(items)}
            return {}

        return await self._run(lambda: self._api.update(workout.id, workout), apply)

    async def delete(self, workout_id: str) -> bool:
        """Delete on the server, then drop every entry with that id."""
        result = await self._run(
            lambda: self._api.delete(workout_id),
            lambda _: {"workouts": tuple(w for w in self._state.workouts if w.id != workout_id)},
        )
        return result is True

    async def fetch_summary(
        self,
        start_date: datetime | date | str,
        end_date: datetime | date | str,
    ) -> CaloriesSummary | None:
        """Replace the summary; on failure the previous summary stays."""
        return await self._run(
            lambda: self._api.calorie_summary(start_date, end_date),
            lambda summary: {"calories_summary": summary},
        )

    async def refresh_statistics(self, time_range: TimeRange, now: datetime | None = None) -> StoreState:
        """Load workouts and the calories summary for a preset range, concurrently."""
        start, end = time_range.bounds(now)
        await asyncio.gather(
            self.fetch(WorkoutFilter(start_date=start, end_date=end)),
            self.fetch_summary(start, end),
        )
        return self._state
