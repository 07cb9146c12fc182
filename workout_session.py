from __future__ import annotations
import datetime
import logging
import time
from typing import Callable, List, Optional

from algorithms import PRTracker
from constants import all_exercise_names
from db import CustomExerciseRepository, DraftRepository, WorkoutRepository
from models import Exercise, Routine, SetData, Workout

logger = logging.getLogger(__name__)


class WorkoutSession:
    """Log a single workout from start to commit or discard.

    A session is started fresh, from a routine, from a saved draft or on an
    existing workout. The draft is only written by :meth:`checkpoint` and is
    cleared by :meth:`commit` and :meth:`discard`.
    """

    DEFAULT_NAME = "Nuevo Entrenamiento"

    def __init__(
        self,
        workout_repo: WorkoutRepository,
        draft_repo: DraftRepository,
        custom_repo: CustomExerciseRepository,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.workouts = workout_repo
        self.drafts = draft_repo
        self.custom_exercises = custom_repo
        self._clock = clock
        self._workout: Optional[Workout] = None
        self._editing = False
        self._started_at = 0.0
        self._base_duration = 0

    def _begin(self, workout: Workout, editing: bool) -> "WorkoutSession":
        if self._workout is not None:
            raise ValueError("session already started")
        self._workout = workout
        self._editing = editing
        self._started_at = self._clock()
        self._base_duration = workout.duration
        logger.info("session started for workout %s (editing=%s)", workout.id, editing)
        return self

    @staticmethod
    def _now() -> str:
        return datetime.datetime.now(datetime.timezone.utc).isoformat()

    def start_free(self, name: str | None = None, date: str | None = None) -> "WorkoutSession":
        workout = Workout(name=name or self.DEFAULT_NAME, date=date or self._now())
        return self._begin(workout, editing=False)

    def start_from_routine(self, routine: Routine, date: str | None = None) -> "WorkoutSession":
        exercises = [
            Exercise(name=n, sets=[SetData(weight=0, reps=0)], notes="")
            for n in routine.exercise_names()
        ]
        workout = Workout(name=routine.name, date=date or self._now(), exercises=exercises)
        return self._begin(workout, editing=False)

    def resume(self, draft: Workout) -> "WorkoutSession":
        """Continue ``draft``; drafts of stored workouts resume as edits."""
        stored = {w.id for w in self.workouts.fetch_all_workouts()}
        return self._begin(draft, editing=draft.id in stored)

    def edit(self, workout_id: str) -> "WorkoutSession":
        return self._begin(self.workouts.fetch_detail(workout_id), editing=True)

    @property
    def workout(self) -> Workout:
        if self._workout is None:
            raise ValueError("session is not active")
        return self._workout

    @property
    def editing(self) -> bool:
        return self._editing

    def elapsed(self) -> int:
        if self._editing:
            return self._base_duration
        return self._base_duration + int(round(self._clock() - self._started_at))

    def checkpoint(self) -> Workout:
        """Save the current state as the resumable draft."""
        draft = self.workout.model_copy(update={"duration": self.elapsed()})
        self.drafts.save(draft)
        return draft

    def commit(self, duration: int | None = None) -> Workout:
        """Store the workout, register new exercise names and close the session."""
        current = self.workout
        final = current.model_copy(
            update={
                "exercises": [e for e in current.exercises if e.name.strip()],
                "duration": self.elapsed() if duration is None else duration,
            }
        )
        final = Workout.model_validate(final.model_dump())
        known = all_exercise_names(self.custom_exercises.fetch_names())
        added = self.custom_exercises.add_many(
            [e.name for e in final.exercises if e.name not in known]
        )
        if added:
            logger.info("registered custom exercises: %s", ", ".join(added))
        if self._editing:
            self.workouts.replace(final)
        else:
            self.workouts.create(final)
        self.drafts.clear()
        self._workout = None
        logger.info("workout %s committed", final.id)
        return final

    def discard(self) -> None:
        self.drafts.clear()
        self._workout = None
        logger.info("session discarded")

    def _exercise_index(self, exercise_id: str) -> int:
        for idx, ex in enumerate(self.workout.exercises):
            if ex.id == exercise_id:
                return idx
        raise ValueError(f"exercise {exercise_id} not found")

    def _put_exercise(self, idx: int, exercise: Exercise | None) -> None:
        exercises = list(self.workout.exercises)
        if exercise is None:
            del exercises[idx]
        else:
            exercises[idx] = exercise
        self._workout = self.workout.model_copy(update={"exercises": exercises})

    def rename(self, name: str) -> None:
        self._workout = self.workout.model_copy(update={"name": name})

    def set_day(self, day: str) -> None:
        """Move a new workout to ``day`` (``YYYY-MM-DD``), keeping its time."""
        if self._editing:
            raise ValueError("the date of a saved workout cannot change")
        datetime.date.fromisoformat(day)
        _, sep, rest = self.workout.date.partition("T")
        date = f"{day}{sep}{rest}" if sep else day
        self._workout = Workout.model_validate(
            {**self.workout.model_dump(), "date": date}
        )

    def add_exercise(self, name: str) -> str:
        exercise = Exercise(name=name, sets=[SetData(weight=0, reps=0)])
        self._workout = self.workout.model_copy(
            update={"exercises": [*self.workout.exercises, exercise]}
        )
        return exercise.id

    def rename_exercise(self, exercise_id: str, name: str) -> None:
        idx = self._exercise_index(exercise_id)
        self._put_exercise(idx, self.workout.exercises[idx].model_copy(update={"name": name}))

    def set_notes(self, exercise_id: str, notes: str | None) -> None:
        idx = self._exercise_index(exercise_id)
        self._put_exercise(idx, self.workout.exercises[idx].model_copy(update={"notes": notes}))

    def remove_exercise(self, exercise_id: str) -> None:
        self._put_exercise(self._exercise_index(exercise_id), None)

    def move_exercise(self, exercise_id: str, new_index: int) -> None:
        """Move an exercise to ``new_index``, shifting the ones in between."""
        exercises = list(self.workout.exercises)
        if not 0 <= new_index < len(exercises):
            raise ValueError(f"position {new_index} out of range")
        moved = exercises.pop(self._exercise_index(exercise_id))
        exercises.insert(new_index, moved)
        self._workout = self.workout.model_copy(update={"exercises": exercises})

    def add_set(
        self,
        exercise_id: str,
        weight: float | None = None,
        reps: int | None = None,
        rir: float | None = None,
        rpe: float | None = None,
    ) -> str:
        """Append a set; missing weight or reps repeat the previous set."""
        idx = self._exercise_index(exercise_id)
        exercise = self.workout.exercises[idx]
        last = exercise.sets[-1] if exercise.sets else SetData(weight=0, reps=0)
        new = SetData(
            weight=last.weight if weight is None else weight,
            reps=last.reps if reps is None else reps,
            rir=rir,
            rpe=rpe,
        )
        self._put_exercise(idx, exercise.model_copy(update={"sets": [*exercise.sets, new]}))
        return new.id

    def update_set(self, exercise_id: str, set_id: str, **fields) -> None:
        allowed = {"weight", "reps", "rir", "rpe"}
        unknown = set(fields) - allowed
        if unknown:
            raise ValueError(f"unknown set fields: {', '.join(sorted(unknown))}")
        idx = self._exercise_index(exercise_id)
        exercise = self.workout.exercises[idx]
        sets: List[SetData] = []
        found = False
        for s in exercise.sets:
            if s.id == set_id:
                s = SetData.model_validate({**s.model_dump(), **fields})
                found = True
            sets.append(s)
        if not found:
            raise ValueError(f"set {set_id} not found")
        self._put_exercise(idx, exercise.model_copy(update={"sets": sets}))

    def remove_set(self, exercise_id: str, set_id: str) -> None:
        idx = self._exercise_index(exercise_id)
        exercise = self.workout.exercises[idx]
        if len(exercise.sets) <= 1:
            raise ValueError("an exercise keeps at least one set")
        sets = [s for s in exercise.sets if s.id != set_id]
        if len(sets) == len(exercise.sets):
            raise ValueError(f"set {set_id} not found")
        self._put_exercise(idx, exercise.model_copy(update={"sets": sets}))

    def previous_best(self, exercise_name: str) -> Optional[str]:
        """Return the stored all-time best for ``exercise_name`` as text."""
        return PRTracker.best_set_text(exercise_name, self.workouts.fetch_all_workouts())
