from __future__ import annotations
from typing import Iterable, List, Optional

from models import BestSet, RecentPR, Workout, format_weight


class PRTracker:
    """Detect personal records by replaying workout history."""

    RECENT_LIMIT: int = 5

    @staticmethod
    def chronological(workouts: Iterable[Workout]) -> List[Workout]:
        """Return a new list of ``workouts`` sorted oldest first."""
        return sorted(workouts, key=lambda w: w.timestamp)

    @staticmethod
    def describe(weight: float, reps: int) -> str:
        return f"{format_weight(weight)}kg x {reps}"

    @classmethod
    def replay(cls, workouts: Iterable[Workout]) -> List[RecentPR]:
        """Return every PR event in chronological order.

        The first qualifying set of an exercise only sets the baseline.
        Sets without a positive weight are ignored.
        """
        best: dict[str, list] = {}
        events: List[RecentPR] = []
        for workout in cls.chronological(workouts):
            for exercise in workout.exercises:
                name = exercise.name
                for s in exercise.sets:
                    if s.weight <= 0:
                        continue
                    current = best.get(name)
                    if current is None:
                        best[name] = [s.weight, s.reps]
                        continue
                    max_weight, max_reps = current
                    if s.weight > max_weight:
                        kind = "weight"
                        best[name] = [s.weight, s.reps]
                    elif s.weight == max_weight and s.reps > max_reps:
                        kind = "reps"
                        current[1] = max(max_reps, s.reps)
                    else:
                        continue
                    events.append(
                        RecentPR(
                            exercise_name=name,
                            weight=s.weight,
                            reps=s.reps,
                            date=workout.date,
                            workout_id=workout.id,
                            previous_best=cls.describe(max_weight, max_reps),
                            type=kind,
                        )
                    )
        return events

    @classmethod
    def recent_prs(
        cls, workouts: Iterable[Workout], limit: int | None = None
    ) -> List[RecentPR]:
        """Return the newest PR per exercise, newest first, at most ``limit``."""
        if limit is None:
            limit = cls.RECENT_LIMIT
        seen: set[str] = set()
        unique: List[RecentPR] = []
        for pr in reversed(cls.replay(workouts)):
            if pr.exercise_name in seen:
                continue
            seen.add(pr.exercise_name)
            unique.append(pr)
        return unique[: max(limit, 0)]

    @staticmethod
    def best_set(exercise_name: str, workouts: Iterable[Workout]) -> Optional[BestSet]:
        """Return the heaviest set of ``exercise_name`` (most reps on ties)."""
        best_weight = 0.0
        best_reps = 0
        found = False
        for workout in workouts:
            for exercise in workout.exercises:
                if exercise.name != exercise_name:
                    continue
                for s in exercise.sets:
                    if s.weight > best_weight:
                        best_weight = s.weight
                        best_reps = s.reps
                        found = True
                    elif found and s.weight == best_weight and s.reps > best_reps:
                        best_reps = s.reps
        if not found:
            return None
        return BestSet(weight=best_weight, reps=best_reps)

    @classmethod
    def best_set_text(cls, exercise_name: str, workouts: Iterable[Workout]) -> Optional[str]:
        best = cls.best_set(exercise_name, workouts)
        return best.describe() if best is not None else None
