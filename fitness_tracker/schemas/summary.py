"""Calories summary returned by GET /workouts/calories."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from fitness_tracker.schemas.workout import isoformat, to_wire_precision


class CaloriesSummary(BaseModel):
    """Totals for a date range. start_date/end_date echo the requested range."""

    model_config = ConfigDict(populate_by_name=True)

    total_calories: int = Field(ge=0, alias="totalCalories")
    workout_count: int = Field(ge=0, alias="workoutCount")
    start_date: datetime | None = Field(None, alias="startDate")
    end_date: datetime | None = Field(None, alias="endDate")

    @field_validator("start_date", "end_date")
    @classmethod
    def _to_utc(cls, v: datetime | None) -> datetime | None:
        return to_wire_precision(v) if v is not None else None

    @field_serializer("start_date", "end_date")
    def _serialize_dt(self, v: datetime | None) -> str | None:
        return isoformat(v) if v is not None else None

    @classmethod
    def empty(cls, start_date: datetime, end_date: datetime) -> "CaloriesSummary":
        """Zero totals for the requested range."""
        return cls(total_calories=0, workout_count=0, start_date=start_date, end_date=end_date)

    def with_range(self, start_date: datetime, end_date: datetime) -> "CaloriesSummary":
        """Fill in the range when the server did not echo it."""
        return self.model_copy(
            update={
                "start_date": self.start_date or to_wire_precision(start_date),
                "end_date": self.end_date or to_wire_precision(end_date),
            }
        )
