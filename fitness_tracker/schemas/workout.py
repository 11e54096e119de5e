"""Pydantic schemas for workouts as exchanged with the API, plus the JSON codec."""

import uuid
from datetime import date as date_type, datetime, time, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator

from fitness_tracker.core.errors import MalformedRecord

DURATION_MIN, DURATION_MAX = 1, 300  # minutes
CALORIES_MIN, CALORIES_MAX = 1, 2000

# Keys assigned by the server; never sent on create
SERVER_KEYS = ("_id", "createdAt", "updatedAt", "__v")
MINIMAL_CREATE_KEYS = ("user", "type", "duration", "caloriesBurned", "notes")


class WorkoutType(str, Enum):
    """Workout types offered when logging or filtering."""

    RUNNING = "Running"
    CYCLING = "Cycling"
    SWIMMING = "Swimming"
    WEIGHTLIFTING = "Weightlifting"
    YOGA = "Yoga"
    HIIT = "HIIT"
    OTHER = "Other"


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_datetime(value: datetime | date_type | str) -> datetime:
    """Coerce a date bound (datetime, calendar date or ISO string) to an aware UTC datetime."""
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date_type):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str):
        return as_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
    raise TypeError(f"Unsupported date value: {value!r}")


def to_wire_precision(value: datetime) -> datetime:
    """UTC, truncated to the milliseconds the wire format carries."""
    value = as_utc(value)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def isoformat(value: datetime) -> str:
    """ISO-8601 in UTC with milliseconds and Z suffix, e.g. 2025-03-07T07:44:00.000Z."""
    return as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _type_value(value: Any) -> Any:
    return value.value if isinstance(value, WorkoutType) else value


class Workout(BaseModel):
    """Single workout as stored by the server (wire keys _id, caloriesBurned, __v)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    user: str
    type: str
    duration: int
    calories_burned: int = Field(alias="caloriesBurned")
    date: datetime
    notes: str | None = None
    created_at: datetime | None = Field(None, alias="createdAt")
    updated_at: datetime | None = Field(None, alias="updatedAt")
    version: int | None = Field(None, alias="__v")  # server concurrency counter, mirrored only

    @field_validator("type", mode="before")
    @classmethod
    def _enum_to_str(cls, v: Any) -> Any:
        return _type_value(v)

    @field_validator("date", "created_at", "updated_at")
    @classmethod
    def _to_utc(cls, v: datetime | None) -> datetime | None:
        return to_wire_precision(v) if v is not None else None

    @field_validator("notes")
    @classmethod
    def _empty_notes(cls, v: str | None) -> str | None:
        return v or None

    @field_serializer("date", "created_at", "updated_at")
    def _serialize_dt(self, v: datetime | None) -> str | None:
        return isoformat(v) if v is not None else None


class WorkoutDraft(BaseModel):
    """Values entered when logging a new workout. Defaults match the entry form."""

    type: str = WorkoutType.RUNNING.value
    duration: int = Field(30, ge=DURATION_MIN, le=DURATION_MAX)
    calories_burned: int = Field(200, ge=CALORIES_MIN, le=CALORIES_MAX)
    notes: str | None = None
    user: str | None = None
    date: datetime | None = None  # sent on create only with minimal_create_body=False; the minimal body lets the server stamp it

    @field_validator("type", mode="before")
    @classmethod
    def _enum_to_str(cls, v: Any) -> Any:
        return _type_value(v)

    def to_placeholder(self, default_user: str, now: datetime | None = None) -> Workout:
        """Local record with a temporary id; the server copy replaces it after create."""
        return Workout(
            id=str(uuid.uuid4()),
            user=self.user or default_user,
            type=self.type,
            duration=self.duration,
            calories_burned=self.calories_burned,
            date=self.date or now or datetime.now(timezone.utc),
            notes=self.notes,
        )


class WorkoutFilter(BaseModel):
    """List query: workout type and date range, each optional. WorkoutFilter() means all workouts."""

    type: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _blank_type(cls, v: Any) -> Any:
        v = _type_value(v)
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _coerce_date(cls, v: Any) -> Any:
        return to_datetime(v) if v is not None else None

    def query_params(self) -> dict[str, str]:
        """Only present filters become query parameters."""
        params: dict[str, str] = {}
        if self.type is not None:
            params["type"] = self.type
        if self.start_date is not None:
            params["startDate"] = isoformat(self.start_date)
        if self.end_date is not None:
            params["endDate"] = isoformat(self.end_date)
        return params


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    loc = ".".join(str(p) for p in first["loc"]) or "record"
    more = f" (+{exc.error_count() - 1} more)" if exc.error_count() > 1 else ""
    return f"{loc}: {first['msg']}{more}"


def decode_workout(payload: Any) -> Workout:
    """Build a Workout from a decoded JSON object. Raises MalformedRecord."""
    if not isinstance(payload, dict):
        raise MalformedRecord(f"expected a JSON object, got {type(payload).__name__}")
    try:
        return Workout.model_validate(payload)
    except ValidationError as e:
        raise MalformedRecord(_describe(e)) from e


def decode_workouts(payload: Any) -> list[Workout]:
    """Decode a JSON array of workouts. Empty payload gives []; one bad element fails the whole list."""
    if payload is None or (isinstance(payload, (list, str, bytes)) and len(payload) == 0):
        return []
    if not isinstance(payload, list):
        raise MalformedRecord(f"expected a JSON array, got {type(payload).__name__}")
    out: list[Workout] = []
    for i, item in enumerate(payload):
        try:
            out.append(decode_workout(item))
        except MalformedRecord as e:
            raise MalformedRecord(f"item {i}: {e.detail}") from e
    return out


def encode_workout(workout: Workout) -> dict[str, Any]:
    """Full wire representation. notes is null when absent or empty; unset audit fields are omitted."""
    data = workout.model_dump(by_alias=True)
    data["notes"] = workout.notes or None
    for key in ("createdAt", "updatedAt", "__v"):
        if data.get(key) is None:
            data.pop(key, None)
    return data


def encode_create_body(workout: Workout, minimal: bool = True) -> dict[str, Any]:
    """POST body: the five user-entered fields, or the full record minus server-assigned keys."""
    data = encode_workout(workout)
    if minimal:
        return {key: data.get(key) for key in MINIMAL_CREATE_KEYS}
    for key in SERVER_KEYS:
        data.pop(key, None)
    return data
