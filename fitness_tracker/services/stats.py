"""Aggregations for the statistics screen: workouts per type, calories per day, minutes per type."""

from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Iterable

from pydantic import BaseModel

from fitness_tracker.schemas.workout import Workout, as_utc


class TimeRange(str, Enum):
    """Range picker presets; each ends now."""

    WEEK = "Week"
    MONTH = "Month"
    THREE_MONTHS = "3 Months"
    YEAR = "Year"

    @property
    def days(self) -> int:
        return _RANGE_DAYS[self]

    def bounds(self, now: datetime | None = None) -> tuple[datetime, datetime]:
        """(start, end) with end = now (UTC)."""
        end = as_utc(now) if now is not None else datetime.now(timezone.utc)
        return end - timedelta(days=self.days), end


_RANGE_DAYS = {
    TimeRange.WEEK: 7,
    TimeRange.MONTH: 30,
    TimeRange.THREE_MONTHS: 90,
    TimeRange.YEAR: 365,
}


class TypeCount(BaseModel):
    type: str
    count: int


class DayCalories(BaseModel):
    day: date
    calories: int


class TypeDuration(BaseModel):
    type: str
    minutes: int


def workouts_by_type(workouts: Iterable[Workout]) -> list[TypeCount]:
    """Number of workouts per type, most frequent first."""
    counts: dict[str, int] = defaultdict(int)
    for w in workouts:
        counts[w.type] += 1
    rows = [TypeCount(type=t, count=c) for t, c in counts.items()]
    return sorted(rows, key=lambda r: (-r.count, r.type))


def calories_by_day(workouts: Iterable[Workout]) -> list[DayCalories]:
    """Calories burned per UTC calendar day, oldest first."""
    totals: dict[date, int] = defaultdict(int)
    for w in workouts:
        totals[as_utc(w.date).date()] += w.calories_burned
    return [DayCalories(day=d, calories=totals[d]) for d in sorted(totals)]


def duration_by_type(workouts: Iterable[Workout]) -> list[TypeDuration]:
    """Total minutes per type, longest first."""
    minutes: dict[str, int] = defaultdict(int)
    for w in workouts:
        minutes[w.type] += w.duration
    rows = [TypeDuration(type=t, minutes=m) for t, m in minutes.items()]
    return sorted(rows, key=lambda r: (-r.minutes, r.type))
