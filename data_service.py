import csv
import datetime
import io
import json
import logging
from typing import Any, Iterable, List

from pydantic import ValidationError

from constants import DATASETS
from db import (
    BodyMetricRepository,
    CardioRepository,
    CustomExerciseRepository,
    RoutineRepository,
    WorkoutRepository,
)
from models import BodyMetric, CardioSession, Routine, Workout

logger = logging.getLogger(__name__)

DATASET_ALIASES = {
    "bodyMetrics": "body_metrics",
    "cardioSessions": "cardio_sessions",
    "customExercises": "custom_exercises",
}

WORKOUT_COLUMNS = [
    "workout_id",
    "workout_date",
    "workout_name",
    "exercise_name",
    "set_id",
    "weight",
    "reps",
    "rir",
    "rpe",
    "notes",
]


def _blank(value) -> str:
    return "" if value is None else value


def workouts_to_csv(workouts: Iterable[Workout]) -> str:
    """Return one CSV row per logged set."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(WORKOUT_COLUMNS)
    for w in workouts:
        for ex in w.exercises:
            for s in ex.sets:
                writer.writerow(
                    [
                        w.id,
                        w.date,
                        w.name,
                        ex.name,
                        s.id,
                        s.weight,
                        s.reps,
                        _blank(s.rir),
                        _blank(s.rpe),
                        _blank(ex.notes),
                    ]
                )
    return output.getvalue()


def body_metrics_to_csv(metrics: Iterable[BodyMetric]) -> str:
    metrics = list(metrics)
    extra: dict[str, None] = {}
    for m in metrics:
        for key in m.measurements or {}:
            extra.setdefault(key, None)
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["date", "weight", "body_fat_percent", *extra])
    for m in metrics:
        measurements = m.measurements or {}
        writer.writerow(
            [m.date, m.weight, _blank(m.body_fat)]
            + [_blank(measurements.get(key)) for key in extra]
        )
    return output.getvalue()


def backup_filename(day: datetime.date | None = None) -> str:
    day = day or datetime.date.today()
    return f"gymtrack_backup_{day.isoformat()}.json"


class DataService:
    """Export and import every dataset as a single JSON document."""

    def __init__(
        self,
        workout_repo: WorkoutRepository,
        routine_repo: RoutineRepository,
        body_metric_repo: BodyMetricRepository,
        cardio_repo: CardioRepository,
        custom_repo: CustomExerciseRepository,
    ) -> None:
        self.workouts = workout_repo
        self.routines = routine_repo
        self.body_metrics = body_metric_repo
        self.cardio = cardio_repo
        self.custom_exercises = custom_repo

    def export_data(self) -> dict:
        return {
            "workouts": [w.model_dump(mode="json") for w in self.workouts.fetch_records()],
            "routines": [r.model_dump(mode="json") for r in self.routines.fetch_records()],
            "body_metrics": [m.model_dump(mode="json") for m in self.body_metrics.fetch_records()],
            "cardio_sessions": [c.model_dump(mode="json") for c in self.cardio.fetch_records()],
            "custom_exercises": self.custom_exercises.fetch_names(),
        }

    def export_json(self) -> str:
        return json.dumps(self.export_data(), indent=2, ensure_ascii=False)

    def import_json(self, text: str) -> List[str]:
        """Overwrite the datasets present in ``text`` and return their names."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"invalid backup file: {e}")
        return self.import_data(data)

    def import_data(self, data: Any) -> List[str]:
        """Overwrite the datasets present in ``data`` and return their names.

        Backups written by the mobile app use camelCase dataset keys; both
        spellings are accepted. Nothing is written unless every present
        dataset validates.
        """
        if not isinstance(data, dict):
            raise ValueError("backup must be a JSON object")
        data = dict(data)
        for camel, snake in DATASET_ALIASES.items():
            if camel in data and snake not in data:
                data[snake] = data.pop(camel)
        models = {
            "workouts": (Workout, self.workouts),
            "routines": (Routine, self.routines),
            "body_metrics": (BodyMetric, self.body_metrics),
            "cardio_sessions": (CardioSession, self.cardio),
        }
        parsed: dict[str, list] = {}
        try:
            for name, (model, _repo) in models.items():
                if name in data:
                    parsed[name] = [model.model_validate(item) for item in data[name]]
        except (ValidationError, TypeError) as e:
            raise ValueError(f"invalid {name} entry: {e}")
        names = data.get("custom_exercises")
        if names is not None and not (
            isinstance(names, list) and all(isinstance(n, str) for n in names)
        ):
            raise ValueError("custom_exercises must be a list of names")

        for name, records in parsed.items():
            models[name][1].save_records(records)
        if names is not None:
            self.custom_exercises.store_dataset(self.custom_exercises.dataset, list(dict.fromkeys(names)))
        imported = [n for n in DATASETS if n in data]
        logger.info("imported datasets: %s", ", ".join(imported) or "none")
        return imported
