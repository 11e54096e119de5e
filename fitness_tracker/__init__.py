from fitness_tracker.core.errors import (
    InvalidEndpoint,
    MalformedRecord,
    RequestRejected,
    TransportFailure,
    WorkoutApiError,
)
from fitness_tracker.main import open_store
from fitness_tracker.schemas import CaloriesSummary, Workout, WorkoutDraft, WorkoutFilter, WorkoutType
from fitness_tracker.services.stats import TimeRange
from fitness_tracker.services.workout_client import WorkoutApiClient
from fitness_tracker.services.workout_store import StoreState, WorkoutStore

__all__ = [
    "CaloriesSummary",
    "InvalidEndpoint",
    "MalformedRecord",
    "RequestRejected",
    "StoreState",
    "TimeRange",
    "TransportFailure",
    "Workout",
    "WorkoutApiClient",
    "WorkoutApiError",
    "WorkoutDraft",
    "WorkoutFilter",
    "WorkoutStore",
    "WorkoutType",
    "open_store",
]
