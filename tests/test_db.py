import os
import sys
import sqlite3
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import (
    CustomExerciseRepository,
    DraftRepository,
    RoutineRepository,
    SettingsRepository,
    WorkoutRepository,
)
from models import Exercise, Routine, RoutineExercise, SetData, Workout


class RepositoryTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_repos.db"
        self.yaml_path = "test_repos.yaml"
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)
        self.workouts = WorkoutRepository(self.db_path)

    def tearDown(self) -> None:
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)

    def _workout(self, wid: str, date: str) -> Workout:
        return Workout(
            id=wid,
            name="Push",
            date=date,
            exercises=[Exercise(name="Bench", sets=[SetData(weight=60, reps=8)])],
            duration=1800,
        )

    def test_workouts_newest_first(self) -> None:
        self.workouts.create(self._workout("a", "2024-01-01T10:00:00"))
        self.workouts.create(self._workout("b", "2024-01-02T10:00:00"))
        self.assertEqual([w.id for w in self.workouts.fetch_all_workouts()], ["b", "a"])
        again = WorkoutRepository(self.db_path)
        self.assertEqual(again.fetch_detail("a").exercises[0].sets[0].weight, 60)

    def test_duplicate_id_rejected(self) -> None:
        self.workouts.create(self._workout("a", "2024-01-01T10:00:00"))
        with self.assertRaises(ValueError):
            self.workouts.create(self._workout("a", "2024-01-01T10:00:00"))

    def test_replace_and_delete(self) -> None:
        self.workouts.create(self._workout("a", "2024-01-01T10:00:00"))
        edited = self.workouts.fetch_detail("a").model_copy(update={"name": "Legs"})
        self.workouts.replace(edited)
        self.assertEqual(self.workouts.fetch_detail("a").name, "Legs")
        with self.assertRaises(ValueError):
            self.workouts.replace(self._workout("a", "2024-02-01T10:00:00"))
        self.workouts.delete("a")
        self.assertEqual(self.workouts.fetch_all_workouts(), [])
        with self.assertRaises(ValueError):
            self.workouts.delete("a")
        with self.assertRaises(ValueError):
            self.workouts.fetch_detail("a")

    def test_routines(self) -> None:
        repo = RoutineRepository(self.db_path)
        push = Routine(id="r1", name="Push", exercises=[RoutineExercise(name="Bench")])
        repo.add(push)
        repo.add_many([Routine(name="Pull"), Routine(name="Legs")])
        self.assertEqual([r.name for r in repo.fetch_all_routines()], ["Push", "Pull", "Legs"])
        repo.delete("r1")
        self.assertEqual(len(repo.fetch_all_routines()), 2)

    def test_custom_exercises_deduplicated(self) -> None:
        repo = CustomExerciseRepository(self.db_path)
        self.assertEqual(repo.add_many(["Hip Thrust", " ", "Hip Thrust"]), ["Hip Thrust"])
        self.assertEqual(repo.add_many(["Hip Thrust", "Nordic Curl"]), ["Nordic Curl"])
        self.assertEqual(repo.fetch_names(), ["Hip Thrust", "Nordic Curl"])

    def test_draft_roundtrip_and_clear(self) -> None:
        drafts = DraftRepository(self.db_path)
        self.assertIsNone(drafts.load())
        draft = self._workout("d", "2024-01-01T10:00:00")
        drafts.save(draft)
        self.assertEqual(drafts.load(), draft)
        drafts.clear()
        self.assertIsNone(drafts.load())

    def test_unreadable_draft_is_dropped(self) -> None:
        drafts = DraftRepository(self.db_path)
        drafts.store_dataset("active_draft", {"date": "not a date"})
        self.assertIsNone(drafts.load())
        self.assertNotIn("active_draft", drafts.dataset_names())

    def test_schema_migration_keeps_rows(self) -> None:
        conn = sqlite3.connect(self.db_path)
        conn.execute("DROP TABLE datasets;")
        conn.execute("CREATE TABLE datasets (name TEXT PRIMARY KEY, payload TEXT NOT NULL, extra TEXT);")
        conn.execute("INSERT INTO datasets (name, payload) VALUES ('custom_exercises', '[\"X\"]');")
        conn.commit()
        conn.close()
        repo = CustomExerciseRepository(self.db_path)
        self.assertEqual(repo.fetch_names(), ["X"])

    def test_settings_defaults_and_yaml_sync(self) -> None:
        settings = SettingsRepository(self.db_path, self.yaml_path)
        self.assertEqual(settings.get_int("recent_pr_limit", 0), 5)
        settings.set_int("recent_pr_limit", 3)
        self.assertTrue(os.path.exists(self.yaml_path))
        again = SettingsRepository(self.db_path, self.yaml_path)
        self.assertEqual(again.get_int("recent_pr_limit", 0), 3)
        with self.assertRaises(ValueError):
            settings.set_text("min_chart_points", "zero")


if __name__ == "__main__":
    unittest.main()
