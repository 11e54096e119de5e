from fitness_tracker.schemas.summary import CaloriesSummary
from fitness_tracker.schemas.workout import (
    Workout,
    WorkoutDraft,
    WorkoutFilter,
    WorkoutType,
    decode_workout,
    decode_workouts,
    encode_create_body,
    encode_workout,
)

__all__ = [
    "CaloriesSummary",
    "Workout",
    "WorkoutDraft",
    "WorkoutFilter",
    "WorkoutType",
    "decode_workout",
    "decode_workouts",
    "encode_create_body",
    "encode_workout",
]
