from __future__ import annotations
import calendar
import datetime
from typing import Dict, Iterable, List, NamedTuple, Optional

from models import Workout


class CalendarDay(NamedTuple):
    day: int
    date: str
    workout_count: int


class CalendarIndex:
    """Group workouts by calendar day for month views."""

    @staticmethod
    def day_key(date: str) -> str:
        """Return the part of ``date`` before the time separator."""
        return date.split("T", 1)[0]

    @classmethod
    def by_date(cls, workouts: Iterable[Workout]) -> Dict[str, List[Workout]]:
        index: Dict[str, List[Workout]] = {}
        for workout in workouts:
            index.setdefault(cls.day_key(workout.date), []).append(workout)
        return index

    @staticmethod
    def workouts_on(day: str, index: Dict[str, List[Workout]]) -> List[Workout]:
        return list(index.get(day, []))

    @staticmethod
    def month_grid(
        year: int, month: int, index: Dict[str, List[Workout]]
    ) -> List[List[Optional[CalendarDay]]]:
        """Return Monday-first weeks; days outside ``month`` are ``None``."""
        weeks: List[List[Optional[CalendarDay]]] = []
        for week in calendar.Calendar(firstweekday=0).monthdayscalendar(year, month):
            row: List[Optional[CalendarDay]] = []
            for day in week:
                if day == 0:
                    row.append(None)
                    continue
                key = datetime.date(year, month, day).isoformat()
                row.append(CalendarDay(day, key, len(index.get(key, []))))
            weeks.append(row)
        return weeks
