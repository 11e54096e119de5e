"""Pytest configuration and shared fixtures: in-memory workouts server and API client factories."""

import itertools
from datetime import datetime, timezone
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import Body, FastAPI, HTTPException, Response

from fitness_tracker.services.workout_client import WorkoutApiClient
from fitness_tracker.services.workout_store import WorkoutStore

BASE_URL = "http://testserver/api"


def _parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def make_doc(workout_id: str, type: str = "Running", date: str = "2025-03-07T07:44:00.000Z", **extra: Any) -> dict:
    """Workout JSON the way the server stores it."""
    doc = {
        "_id": workout_id,
        "user": "User",
        "type": type,
        "duration": 30,
        "caloriesBurned": 200,
        "date": date,
        "notes": None,
        "createdAt": "2025-03-07T07:44:01.000Z",
        "updatedAt": "2025-03-07T07:44:01.000Z",
        "__v": 0,
    }
    doc.update(extra)
    return doc


def build_fake_server(db: dict[str, dict]) -> FastAPI:
    """Workouts API backed by db (id -> stored JSON)."""
    app = FastAPI()
    ids = itertools.count(1)

    @app.get("/api/workouts/calories")
    async def calories(startDate: str, endDate: str):
        start, end = _parse(startDate), _parse(endDate)
        items = [w for w in db.values() if start <= _parse(w["date"]) <= end]
        return {
            "totalCalories": sum(w["caloriesBurned"] for w in items),
            "workoutCount": len(items),
            "startDate": startDate,
            "endDate": endDate,
        }

    @app.get("/api/workouts")
    async def list_workouts(type: str | None = None, startDate: str | None = None, endDate: str | None = None):
        items = list(db.values())
        if type is not None:
            items = [w for w in items if w["type"] == type]
        if startDate is not None:
            items = [w for w in items if _parse(w["date"]) >= _parse(startDate)]
        if endDate is not None:
            items = [w for w in items if _parse(w["date"]) <= _parse(endDate)]
        return sorted(items, key=lambda w: w["date"], reverse=True)

    @app.post("/api/workouts", status_code=201)
    async def create_workout(payload: dict[str, Any] = Body(...)):
        now = _now_iso()
        doc = {
            "_id": f"{next(ids):024x}",
            "user": payload["user"],
            "type": payload["type"],
            "duration": payload["duration"],
            "caloriesBurned": payload["caloriesBurned"],
            "date": payload.get("date") or now,
            "notes": payload.get("notes"),
            "createdAt": now,
            "updatedAt": now,
            "__v": 0,
        }
        db[doc["_id"]] = doc
        return doc

    @app.get("/api/workouts/{workout_id}")
    async def get_workout(workout_id: str):
        if workout_id not in db:
            raise HTTPException(status_code=404, detail="Workout not found")
        return db[workout_id]

    @app.put("/api/workouts/{workout_id}")
    async def update_workout(workout_id: str, payload: dict[str, Any] = Body(...)):
        if workout_id not in db:
            raise HTTPException(status_code=404, detail="Workout not found")
        doc = db[workout_id]
        for key in ("user", "type", "duration", "caloriesBurned", "date", "notes"):
            if key in payload:
                doc[key] = payload[key]
        doc["updatedAt"] = _now_iso()
        doc["__v"] = doc.get("__v", 0) + 1
        return doc

    @app.delete("/api/workouts/{workout_id}", status_code=204)
    async def delete_workout(workout_id: str):
        if workout_id not in db:
            raise HTTPException(status_code=404, detail="Workout not found")
        del db[workout_id]
        return Response(status_code=204)

    return app


@pytest.fixture
def server_db() -> dict[str, dict]:
    return {}


@pytest_asyncio.fixture
async def server_api(server_db):
    """WorkoutApiClient talking to the in-memory server."""
    app = build_fake_server(server_db)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app)) as http:
        yield WorkoutApiClient(http, base_url=BASE_URL, minimal_create_body=True)


@pytest_asyncio.fixture
async def store(server_api) -> WorkoutStore:
    return WorkoutStore(server_api, default_user="User", discard_stale_responses=True)


@pytest_asyncio.fixture
async def make_api():
    """Factory: WorkoutApiClient over httpx.MockTransport(handler). Returns (client, sent requests)."""
    clients: list[httpx.AsyncClient] = []

    def factory(handler, **kwargs) -> tuple[WorkoutApiClient, list[httpx.Request]]:
        sent: list[httpx.Request] = []

        def recording(request: httpx.Request) -> httpx.Response:
            sent.append(request)
            return handler(request)

        http = httpx.AsyncClient(transport=httpx.MockTransport(recording))
        clients.append(http)
        return WorkoutApiClient(http, base_url=BASE_URL, **kwargs), sent

    yield factory
    for http in clients:
        await http.aclose()
