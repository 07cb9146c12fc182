from __future__ import annotations
from typing import Iterable, List, Optional, Sequence, Tuple

from models import Exercise, ExerciseGroup, Routine, SeriesPoint, SetData, Workout


class ProgressSeries:
    """Build per-exercise chart series from workout history."""

    MIN_POINTS: int = 2

    @staticmethod
    def top_set(sets: Sequence[SetData]) -> Optional[SetData]:
        """Return the heaviest set, breaking weight ties by reps."""
        if not sets:
            return None
        return sorted(sets, key=lambda s: (-s.weight, -s.reps))[0]

    @staticmethod
    def _find(workout: Workout, exercise_name: str) -> Optional[Exercise]:
        for exercise in workout.exercises:
            if exercise.name == exercise_name:
                return exercise
        return None

    @classmethod
    def series_for(
        cls, exercise_name: str, workouts: Iterable[Workout]
    ) -> List[SeriesPoint]:
        """Return one top-set point per workout containing ``exercise_name``."""
        matching = [w for w in workouts if cls._find(w, exercise_name) is not None]
        matching.sort(key=lambda w: w.timestamp)
        points: List[SeriesPoint] = []
        for workout in matching:
            top = cls.top_set(cls._find(workout, exercise_name).sets)
            if top is None:
                continue
            points.append(
                SeriesPoint(
                    date=workout.date,
                    workout_id=workout.id,
                    weight=top.weight,
                    reps=top.reps,
                    volume_load=top.weight * top.reps,
                )
            )
        return points

    @classmethod
    def is_chartable(
        cls, series: Sequence[SeriesPoint], min_points: int | None = None
    ) -> bool:
        if min_points is None:
            min_points = cls.MIN_POINTS
        return len(series) >= min_points

    @staticmethod
    def exercise_names(workouts: Iterable[Workout]) -> List[str]:
        """Return unique exercise names with history in first-seen order."""
        names: dict[str, None] = {}
        for workout in workouts:
            for exercise in workout.exercises:
                names.setdefault(exercise.name, None)
        return list(names)

    @classmethod
    def group_by_routine(
        cls, routines: Iterable[Routine], workouts: Iterable[Workout]
    ) -> Tuple[List[ExerciseGroup], List[str]]:
        """Split exercises with history into routine groups and the rest.

        Each group keeps the routine's own exercise order. Names with history
        that no routine lists are returned as the second element.
        """
        history = cls.exercise_names(workouts)
        known = set(history)
        groups: List[ExerciseGroup] = []
        in_routines: set[str] = set()
        for routine in routines:
            names = routine.exercise_names()
            in_routines.update(names)
            groups.append(
                ExerciseGroup(
                    name=routine.name,
                    exercises=[n for n in names if n in known],
                )
            )
        ungrouped = [n for n in history if n not in in_routines]
        return groups, ungrouped
