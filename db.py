import sqlite3
import json
import logging
from contextlib import contextmanager
from typing import Any, List, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from config import YamlConfig
from models import BodyMetric, CardioSession, Routine, Workout
from settings_schema import SettingsSchema, validate_settings

logger = logging.getLogger(__name__)


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "datasets": (
            """CREATE TABLE datasets (
                    name TEXT PRIMARY KEY,
                    payload TEXT NOT NULL
                );""",
            ["name", "payload"],
        ),
        "settings": (
            """CREATE TABLE settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );""",
            ["key", "value"],
        ),
    }

    def __init__(self, db_path: str = "gymtrack.db") -> None:
        self._db_path = db_path
        self._ensure_schema()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)

    def _ensure_table(
        self, conn: sqlite3.Connection, table: str, sql: str, columns: List[str]
    ) -> None:
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?;", (table,)
        )
        if cur.fetchone() is None:
            conn.execute(sql)
            return

        cur = conn.execute(f"PRAGMA table_info({table});")
        existing_cols = [row[1] for row in cur.fetchall()]
        if existing_cols == columns:
            return

        conn.execute(f"ALTER TABLE {table} RENAME TO {table}_old;")
        conn.execute(sql)
        common = [c for c in existing_cols if c in columns]
        if common:
            cols = ", ".join(common)
            conn.execute(f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;")
        conn.execute(f"DROP TABLE {table}_old;")


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> int:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.lastrowid

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()


class DatasetRepository(BaseRepository):
    """Key-value access to JSON datasets stored by logical name."""

    def dataset_names(self) -> List[str]:
        rows = self.fetch_all("SELECT name FROM datasets ORDER BY name;")
        return [r[0] for r in rows]

    def load_dataset(self, name: str, default: Any = None) -> Any:
        rows = self.fetch_all("SELECT payload FROM datasets WHERE name = ?;", (name,))
        if not rows:
            return default
        return json.loads(rows[0][0])

    def store_dataset(self, name: str, value: Any) -> None:
        self.execute(
            "INSERT INTO datasets (name, payload) VALUES (?, ?) "
            "ON CONFLICT(name) DO UPDATE SET payload=excluded.payload;",
            (name, json.dumps(value)),
        )
        logger.debug("stored dataset %s", name)

    def drop_dataset(self, name: str) -> None:
        self.execute("DELETE FROM datasets WHERE name = ?;", (name,))


class RecordRepository(DatasetRepository):
    """Ordered list of pydantic records kept in a single dataset."""

    dataset: str = ""
    model: Type[BaseModel] = BaseModel
    newest_first: bool = False

    def fetch_records(self) -> list:
        return [self.model.model_validate(r) for r in self.load_dataset(self.dataset, [])]

    def save_records(self, records: list) -> None:
        self.store_dataset(self.dataset, [r.model_dump(mode="json") for r in records])

    def add(self, record: BaseModel) -> str:
        records = self.fetch_records()
        if any(r.id == record.id for r in records):
            raise ValueError(f"{self.dataset} entry {record.id} already exists")
        if self.newest_first:
            records.insert(0, record)
        else:
            records.append(record)
        self.save_records(records)
        return record.id

    def fetch_detail(self, record_id: str):
        for r in self.fetch_records():
            if r.id == record_id:
                return r
        raise ValueError(f"{self.dataset} entry {record_id} not found")

    def replace(self, record: BaseModel) -> None:
        records = self.fetch_records()
        for idx, r in enumerate(records):
            if r.id == record.id:
                records[idx] = record
                self.save_records(records)
                return
        raise ValueError(f"{self.dataset} entry {record.id} not found")

    def delete(self, record_id: str) -> None:
        records = self.fetch_records()
        kept = [r for r in records if r.id != record_id]
        if len(kept) == len(records):
            raise ValueError(f"{self.dataset} entry {record_id} not found")
        self.save_records(kept)

    def delete_all(self) -> None:
        self.save_records([])


class WorkoutRepository(RecordRepository):
    """Repository for finished workouts, stored newest first."""

    dataset = "workouts"
    model = Workout
    newest_first = True

    def create(self, workout: Workout) -> str:
        return self.add(workout)

    def fetch_all_workouts(self) -> List[Workout]:
        return self.fetch_records()

    def replace(self, workout: Workout) -> None:
        current = self.fetch_detail(workout.id)
        if current.date != workout.date:
            raise ValueError("workout date cannot be changed")
        super().replace(workout)


class RoutineRepository(RecordRepository):
    """Repository for routine templates."""

    dataset = "routines"
    model = Routine

    def fetch_all_routines(self) -> List[Routine]:
        return self.fetch_records()

    def add_many(self, routines: List[Routine]) -> List[str]:
        records = self.fetch_records()
        records.extend(routines)
        self.save_records(records)
        return [r.id for r in routines]


class BodyMetricRepository(RecordRepository):
    dataset = "body_metrics"
    model = BodyMetric
    newest_first = True


class CardioRepository(RecordRepository):
    dataset = "cardio_sessions"
    model = CardioSession
    newest_first = True


class CustomExerciseRepository(DatasetRepository):
    """Exercise names entered by the user that are not in the built-in list."""

    dataset = "custom_exercises"

    def fetch_names(self) -> List[str]:
        return list(self.load_dataset(self.dataset, []))

    def add_many(self, names: List[str]) -> List[str]:
        """Store new non-blank names and return the ones actually added."""
        current = self.fetch_names()
        known = set(current)
        added: List[str] = []
        for name in names:
            if not name.strip() or name in known:
                continue
            known.add(name)
            added.append(name)
        if added:
            self.store_dataset(self.dataset, current + added)
        return added


class DraftRepository(DatasetRepository):
    """Holds at most one unfinished workout that can be resumed."""

    dataset = "active_draft"

    def save(self, workout: Workout) -> None:
        self.store_dataset(self.dataset, workout.model_dump(mode="json"))

    def load(self) -> Optional[Workout]:
        data = self.load_dataset(self.dataset)
        if data is None:
            return None
        try:
            return Workout.model_validate(data)
        except ValidationError as e:
            logger.warning("discarding unreadable workout draft: %s", e)
            self.clear()
            return None

    def clear(self) -> None:
        self.drop_dataset(self.dataset)


class SettingsRepository(BaseRepository):
    """Repository for general application settings synchronized with YAML."""

    def __init__(
        self, db_path: str = "gymtrack.db", yaml_path: str = "settings.yaml"
    ) -> None:
        super().__init__(db_path)
        self._yaml = YamlConfig(yaml_path)
        self._init_settings()
        self._sync_from_yaml()
        self._sync_to_yaml()

    def _init_settings(self) -> None:
        with self._connection() as conn:
            for key, value in SettingsSchema().model_dump().items():
                conn.execute(
                    "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?);",
                    (key, str(value)),
                )

    def _raw_all_settings(self) -> dict:
        rows = self.fetch_all("SELECT key, value FROM settings ORDER BY key;")
        types = {
            name: field.annotation
            for name, field in SettingsSchema.model_fields.items()
        }
        result: dict[str, Any] = {}
        for k, v in rows:
            if types.get(k) is int:
                result[k] = int(float(v))
            elif types.get(k) is float:
                result[k] = float(v)
            else:
                result[k] = v
        return result

    def _sync_from_yaml(self) -> None:
        data = self._yaml.load()
        if not data:
            return
        validate_settings(data)
        with self._connection() as conn:
            for key, value in data.items():
                conn.execute(
                    "INSERT INTO settings (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
                    (key, str(value)),
                )

    def _sync_to_yaml(self) -> None:
        self._yaml.save(self._raw_all_settings())

    def all_settings(self) -> dict:
        self._sync_from_yaml()
        return self._raw_all_settings()

    def get_text(self, key: str, default: str) -> str:
        self._sync_from_yaml()
        rows = self.fetch_all("SELECT value FROM settings WHERE key = ?;", (key,))
        return rows[0][0] if rows else default

    def get_float(self, key: str, default: float) -> float:
        try:
            return float(self.get_text(key, str(default)))
        except ValueError:
            return default

    def get_int(self, key: str, default: int) -> int:
        try:
            return int(float(self.get_text(key, str(default))))
        except ValueError:
            return default

    def set_text(self, key: str, value: str) -> None:
        validate_settings({key: value})
        self.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
            (key, value),
        )
        self._sync_to_yaml()

    def set_int(self, key: str, value: int) -> None:
        self.set_text(key, str(value))
