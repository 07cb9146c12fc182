from __future__ import annotations
import logging
from typing import Dict, List, Optional

from algorithms import CalendarIndex, PRTracker, ProgressSeries
from db import RoutineRepository, SettingsRepository, WorkoutRepository
from models import Workout

logger = logging.getLogger(__name__)


class StatisticsService:
    """Compute workout statistics for analysis.

    Every call reads a fresh snapshot from the repositories and recomputes
    from the full history; nothing is cached between calls.
    """

    def __init__(
        self,
        workout_repo: WorkoutRepository,
        routine_repo: RoutineRepository | None = None,
        settings_repo: SettingsRepository | None = None,
    ) -> None:
        self.workouts = workout_repo
        self.routines = routine_repo
        self.settings = settings_repo

    def _history(self) -> List[Workout]:
        return self.workouts.fetch_all_workouts()

    def _setting(self, key: str, default: int) -> int:
        if self.settings is None:
            return default
        return self.settings.get_int(key, default)

    def recent_personal_records(self, limit: Optional[int] = None) -> List[Dict]:
        """Return the latest PR per exercise, newest first."""
        if limit is None:
            limit = self._setting("recent_pr_limit", PRTracker.RECENT_LIMIT)
        history = self._history()
        prs = PRTracker.recent_prs(history, limit)
        logger.debug("%d recent PRs from %d workouts", len(prs), len(history))
        return [pr.model_dump() for pr in prs]

    def best_set(self, exercise: str) -> Optional[Dict[str, float]]:
        best = PRTracker.best_set(exercise, self._history())
        return best.model_dump() if best is not None else None

    def best_set_text(self, exercise: str) -> Optional[str]:
        return PRTracker.best_set_text(exercise, self._history())

    def exercise_progress(self, exercise: str) -> List[Dict[str, float]]:
        return [p.model_dump() for p in ProgressSeries.series_for(exercise, self._history())]

    def progress_groups(self, min_points: Optional[int] = None) -> Dict[str, list]:
        """Return chartable series grouped by routine, plus ungrouped ones.

        Exercises whose series is shorter than ``min_points`` are left out,
        and so are groups left without any exercise.
        """
        if min_points is None:
            min_points = self._setting("min_chart_points", ProgressSeries.MIN_POINTS)
        history = self._history()
        routines = self.routines.fetch_all_routines() if self.routines else []
        groups, ungrouped = ProgressSeries.group_by_routine(routines, history)

        def charts(names: List[str]) -> List[Dict]:
            out = []
            for name in names:
                series = ProgressSeries.series_for(name, history)
                if ProgressSeries.is_chartable(series, min_points):
                    out.append(
                        {"exercise": name, "points": [p.model_dump() for p in series]}
                    )
            return out

        result_groups = []
        for group in groups:
            items = charts(group.exercises)
            if items:
                result_groups.append({"routine": group.name, "charts": items})
        return {"groups": result_groups, "ungrouped": charts(ungrouped)}

    def workouts_by_date(self) -> Dict[str, List[Dict]]:
        index = CalendarIndex.by_date(self._history())
        return {
            day: [w.model_dump() for w in items] for day, items in index.items()
        }

    def calendar_month(self, year: int, month: int) -> List[List[Optional[Dict]]]:
        """Return Monday-first weeks with the number of workouts per day."""
        if not 1 <= month <= 12:
            raise ValueError("month must be between 1 and 12")
        index = CalendarIndex.by_date(self._history())
        return [
            [cell._asdict() if cell is not None else None for cell in week]
            for week in CalendarIndex.month_grid(year, month, index)
        ]

    def day_detail(self, day: str) -> List[Dict]:
        index = CalendarIndex.by_date(self._history())
        return [w.model_dump() for w in CalendarIndex.workouts_on(day, index)]

    def last_workout(self) -> Optional[Dict]:
        """Return the most recently stored workout with its duration in minutes."""
        history = self._history()
        if not history:
            return None
        latest = history[0]
        data = latest.model_dump()
        data["duration_minutes"] = round(latest.duration / 60)
        return data
