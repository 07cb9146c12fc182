import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Body, FastAPI, HTTPException, Response

from config import APP_VERSION, configure_logging
from constants import all_exercise_names
from data_service import DataService, backup_filename, body_metrics_to_csv, workouts_to_csv
from db import (
    BodyMetricRepository,
    CardioRepository,
    CustomExerciseRepository,
    DraftRepository,
    RoutineRepository,
    SettingsRepository,
    WorkoutRepository,
)
from models import BodyMetric, CardioSession, Routine, Workout
from routine_generator import RoutineGenerator
from stats_service import StatisticsService
from workout_session import WorkoutSession

logger = logging.getLogger(__name__)


class GymAPI:
    """Provides REST endpoints for workout logging."""

    def __init__(
        self,
        db_path: str = "gymtrack.db",
        yaml_path: str = "settings.yaml",
        generator: RoutineGenerator | None = None,
    ) -> None:
        self.db_path = db_path
        self.settings = SettingsRepository(db_path, yaml_path)
        self.workouts = WorkoutRepository(db_path)
        self.routines = RoutineRepository(db_path)
        self.body_metrics = BodyMetricRepository(db_path)
        self.cardio = CardioRepository(db_path)
        self.custom_exercises = CustomExerciseRepository(db_path)
        self.drafts = DraftRepository(db_path)
        self.statistics = StatisticsService(self.workouts, self.routines, self.settings)
        self.data = DataService(
            self.workouts,
            self.routines,
            self.body_metrics,
            self.cardio,
            self.custom_exercises,
        )
        self.generator = generator or RoutineGenerator(
            api_key=self.settings.get_text("gemini_api_key", "") or None,
            model=self.settings.get_text("gemini_model", "gemini-2.5-flash"),
            timeout=self.settings.get_float("generation_timeout", 60.0),
        )
        self.app = FastAPI(
            title="GymTrack API",
            description="REST API for workout logging and progress analytics",
            version=APP_VERSION,
        )
        self._setup_routes()

    def session(self) -> WorkoutSession:
        return WorkoutSession(self.workouts, self.drafts, self.custom_exercises)

    def _register_exercises(self, routines: List[Routine]) -> List[str]:
        """Add exercise names used by ``routines`` that the catalog lacks."""
        known = set(all_exercise_names(self.custom_exercises.fetch_names()))
        names = [e.name.strip() for r in routines for e in r.exercises]
        return self.custom_exercises.add_many([n for n in names if n and n not in known])

    def _setup_routes(self) -> None:
        workouts_router = APIRouter(prefix="/workouts", tags=["Workouts"])
        routines_router = APIRouter(prefix="/routines", tags=["Routines"])
        stats_router = APIRouter(prefix="/stats", tags=["Statistics"])
        calendar_router = APIRouter(prefix="/calendar", tags=["Calendar"])
        draft_router = APIRouter(prefix="/draft", tags=["Draft"])

        @self.app.get(
            "/health",
            summary="Health check",
            description="Verify API and database connectivity.",
        )
        def health():
            """Return API and database connection status."""
            try:
                self.workouts.dataset_names()
                return {"status": "ok"}
            except Exception as e:  # pragma: no cover - connectivity failure
                raise HTTPException(status_code=500, detail=str(e))

        @workouts_router.get("")
        def list_workouts():
            return [w.model_dump() for w in self.workouts.fetch_all_workouts()]

        @workouts_router.post("")
        def create_workout(workout: Workout):
            try:
                return {"id": self.workouts.create(workout)}
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @workouts_router.get("/{workout_id}")
        def get_workout(workout_id: str):
            try:
                return self.workouts.fetch_detail(workout_id).model_dump()
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @workouts_router.put("/{workout_id}")
        def update_workout(workout_id: str, workout: Workout):
            if workout.id != workout_id:
                raise HTTPException(status_code=400, detail="id mismatch")
            try:
                self.workouts.fetch_detail(workout_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            try:
                self.workouts.replace(workout)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"status": "updated"}

        @workouts_router.delete("/{workout_id}")
        def delete_workout(workout_id: str):
            try:
                self.workouts.delete(workout_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return {"status": "deleted"}

        @routines_router.get("")
        def list_routines():
            return [r.model_dump() for r in self.routines.fetch_all_routines()]

        @routines_router.post("")
        def create_routine(routine: Routine):
            try:
                routine_id = self.routines.add(routine)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            self._register_exercises([routine])
            return {"id": routine_id}

        @routines_router.post("/generate")
        def generate_routines(goal: str, level: str, days_per_week: int = 3):
            result = self.generator.generate(goal, level, days_per_week)
            if not result.ok:
                raise HTTPException(status_code=502, detail=result.reason)
            ids = self.routines.add_many(result.routines)
            self._register_exercises(result.routines)
            return {"name": result.name, "ids": ids}

        @routines_router.put("/{routine_id}")
        def update_routine(routine_id: str, routine: Routine):
            if routine.id != routine_id:
                raise HTTPException(status_code=400, detail="id mismatch")
            try:
                self.routines.replace(routine)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            self._register_exercises([routine])
            return {"status": "updated"}

        @routines_router.delete("/{routine_id}")
        def delete_routine(routine_id: str):
            try:
                self.routines.delete(routine_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return {"status": "deleted"}

        @stats_router.get("/recent_prs")
        def recent_prs(limit: Optional[int] = None):
            return self.statistics.recent_personal_records(limit)

        @stats_router.get("/best_set")
        def best_set(exercise: str):
            return {
                "exercise": exercise,
                "best": self.statistics.best_set(exercise),
                "text": self.statistics.best_set_text(exercise),
            }

        @stats_router.get("/progress")
        def progress_groups(min_points: Optional[int] = None):
            return self.statistics.progress_groups(min_points)

        @stats_router.get("/progress/{exercise}")
        def exercise_progress(exercise: str):
            return self.statistics.exercise_progress(exercise)

        @stats_router.get("/last_workout")
        def last_workout():
            return self.statistics.last_workout()

        @calendar_router.get("")
        def calendar_month(year: int, month: int):
            try:
                return self.statistics.calendar_month(year, month)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @calendar_router.get("/days")
        def workouts_by_date():
            return self.statistics.workouts_by_date()

        @calendar_router.get("/{day}")
        def day_detail(day: str):
            return self.statistics.day_detail(day)

        @draft_router.get("")
        def get_draft():
            draft = self.drafts.load()
            if draft is None:
                raise HTTPException(status_code=404, detail="no draft")
            return draft.model_dump()

        @draft_router.put("")
        def save_draft(workout: Workout):
            self.drafts.save(workout)
            return {"status": "saved"}

        @draft_router.post("/commit")
        def commit_draft():
            draft = self.drafts.load()
            if draft is None:
                raise HTTPException(status_code=404, detail="no draft")
            try:
                saved = self.session().resume(draft).commit(duration=draft.duration)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"id": saved.id}

        @draft_router.delete("")
        def discard_draft():
            self.drafts.clear()
            return {"status": "discarded"}

        @self.app.get("/exercises", tags=["Exercises"])
        def list_exercises():
            return all_exercise_names(self.custom_exercises.fetch_names())

        @self.app.post("/exercises", tags=["Exercises"])
        def add_exercise(name: str):
            added = self.custom_exercises.add_many([name])
            return {"added": added}

        @self.app.get("/body_metrics", tags=["Body"])
        def list_body_metrics():
            return [m.model_dump() for m in self.body_metrics.fetch_records()]

        @self.app.post("/body_metrics", tags=["Body"])
        def add_body_metric(metric: BodyMetric):
            return {"id": self.body_metrics.add(metric)}

        @self.app.delete("/body_metrics/{metric_id}", tags=["Body"])
        def delete_body_metric(metric_id: str):
            try:
                self.body_metrics.delete(metric_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return {"status": "deleted"}

        @self.app.get("/cardio", tags=["Cardio"])
        def list_cardio():
            return [c.model_dump() for c in self.cardio.fetch_records()]

        @self.app.post("/cardio", tags=["Cardio"])
        def add_cardio(session: CardioSession):
            return {"id": self.cardio.add(session)}

        @self.app.delete("/cardio/{session_id}", tags=["Cardio"])
        def delete_cardio(session_id: str):
            try:
                self.cardio.delete(session_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return {"status": "deleted"}

        @self.app.get("/export/workouts.csv", tags=["Data"])
        def export_workouts_csv():
            return Response(
                workouts_to_csv(self.workouts.fetch_all_workouts()),
                media_type="text/csv",
            )

        @self.app.get("/export/body_metrics.csv", tags=["Data"])
        def export_body_metrics_csv():
            return Response(
                body_metrics_to_csv(self.body_metrics.fetch_records()),
                media_type="text/csv",
            )

        @self.app.get("/export/json", tags=["Data"])
        def export_json():
            return Response(
                self.data.export_json(),
                media_type="application/json",
                headers={
                    "Content-Disposition": f'attachment; filename="{backup_filename()}"'
                },
            )

        @self.app.post("/import/json", tags=["Data"])
        def import_json(payload: Any = Body(...)):
            try:
                return {"imported": self.data.import_data(payload)}
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @self.app.get("/settings", tags=["Settings"])
        def get_settings():
            data = self.settings.all_settings()
            data.pop("gemini_api_key", None)
            return data

        @self.app.put("/settings", tags=["Settings"])
        def update_setting(key: str, value: str = Body(...)):
            try:
                self.settings.set_text(key, value)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"status": "updated"}

        self.app.include_router(workouts_router)
        self.app.include_router(routines_router)
        self.app.include_router(stats_router)
        self.app.include_router(calendar_router)
        self.app.include_router(draft_router)


if __name__ == "__main__":
    import uvicorn

    configure_logging()
    uvicorn.run(GymAPI().app)
