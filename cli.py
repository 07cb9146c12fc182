import argparse
import datetime
import logging
import os
import shutil

from algorithms import CalendarIndex, PRTracker
from config import configure_logging
from data_service import DataService, backup_filename, body_metrics_to_csv, workouts_to_csv
from db import (
    BodyMetricRepository,
    CardioRepository,
    CustomExerciseRepository,
    RoutineRepository,
    WorkoutRepository,
)
from localization import translator
from models import Exercise, Routine, RoutineExercise, SetData, Workout
from rest_api import GymAPI

logger = logging.getLogger(__name__)


def export_data(db_path: str, fmt: str, output_dir: str = ".") -> list[str]:
    """Write exports to ``output_dir`` and return the created paths."""
    workouts = WorkoutRepository(db_path)
    body_metrics = BodyMetricRepository(db_path)
    os.makedirs(output_dir, exist_ok=True)
    if fmt == "csv":
        files = {
            "gymtrack_workouts.csv": workouts_to_csv(workouts.fetch_all_workouts()),
            "gymtrack_body_metrics.csv": body_metrics_to_csv(body_metrics.fetch_records()),
        }
    else:
        data = DataService(
            workouts,
            RoutineRepository(db_path),
            body_metrics,
            CardioRepository(db_path),
            CustomExerciseRepository(db_path),
        )
        files = {backup_filename(): data.export_json()}
    paths = []
    for name, text in files.items():
        out_path = os.path.join(output_dir, name)
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(text)
        paths.append(out_path)
    logger.info("exported %s", ", ".join(paths))
    return paths


def import_data(json_path: str, db_path: str, yaml_path: str = "settings.yaml") -> list[str]:
    api = GymAPI(db_path=db_path, yaml_path=yaml_path)
    with open(json_path, "r", encoding="utf-8") as f:
        return api.data.import_json(f.read())


def backup_db(db_path: str, backup_path: str) -> None:
    shutil.copy(db_path, backup_path)


def restore_db(backup_path: str, db_path: str) -> None:
    shutil.copy(backup_path, db_path)


def demo_data(db_path: str, yaml_path: str) -> None:
    """Populate the database with demo workouts if empty."""
    api = GymAPI(db_path=db_path, yaml_path=yaml_path)
    if api.workouts.fetch_all_workouts():
        print("Database already contains workouts")
        return
    today = datetime.date.today()
    bench = "Press de Banca con Barra"
    squat = "Sentadillas"
    plan = [
        (21, [(60.0, 10), (60.0, 8)], [(80.0, 8)]),
        (14, [(65.0, 8), (65.0, 8)], [(85.0, 6)]),
        (7, [(65.0, 10), (70.0, 5)], [(85.0, 8)]),
        (0, [(72.5, 5)], [(90.0, 5)]),
    ]
    for days_ago, bench_sets, squat_sets in plan:
        day = today - datetime.timedelta(days=days_ago)
        api.workouts.create(
            Workout(
                name="Demo session",
                date=f"{day.isoformat()}T18:00:00",
                duration=3600,
                exercises=[
                    Exercise(name=bench, sets=[SetData(weight=w, reps=r) for w, r in bench_sets]),
                    Exercise(name=squat, sets=[SetData(weight=w, reps=r) for w, r in squat_sets]),
                ],
            )
        )
    api.routines.add(
        Routine(
            name="Fuerza Básica",
            exercises=[RoutineExercise(name=bench), RoutineExercise(name=squat)],
        )
    )
    print("Demo data inserted")


def print_recent_prs(db_path: str, yaml_path: str, limit: int | None = None) -> None:
    api = GymAPI(db_path=db_path, yaml_path=yaml_path)
    translator.set_language(api.settings.get_text("language", "es"))
    prs = api.statistics.recent_personal_records(limit)
    if not prs:
        print("No personal records yet")
        return
    for pr in prs:
        when = translator.format_time_ago(pr["date"])
        current = PRTracker.describe(pr["weight"], pr["reps"])
        print(f"{pr['exercise_name']}: {current} ({pr['type']}) vs {pr['previous_best']} - {when}")


def print_calendar(db_path: str, yaml_path: str, year: int, month: int) -> None:
    api = GymAPI(db_path=db_path, yaml_path=yaml_path)
    index = CalendarIndex.by_date(api.workouts.fetch_all_workouts())
    print(f"{year}-{month:02d}")
    print(" Mo  Tu  We  Th  Fr  Sa  Su")
    for week in CalendarIndex.month_grid(year, month, index):
        cells = []
        for cell in week:
            if cell is None:
                cells.append("    ")
            else:
                mark = "*" * min(cell.workout_count, 2)
                cells.append(f"{cell.day:>2}{mark:<2}")
        print("".join(cells).rstrip())


def main() -> None:
    parser = argparse.ArgumentParser(description="Utility commands")
    parser.add_argument("--log-level", default=None)
    sub = parser.add_subparsers(dest="cmd", required=True)

    exp = sub.add_parser("export")
    exp.add_argument("--db", default="gymtrack.db")
    exp.add_argument("--fmt", choices=["csv", "json"], default="json")
    exp.add_argument("--out", default=".")

    imp = sub.add_parser("import")
    imp.add_argument("--json", required=True)
    imp.add_argument("--db", default="gymtrack.db")
    imp.add_argument("--yaml", default="settings.yaml")

    bkp = sub.add_parser("backup")
    bkp.add_argument("--db", default="gymtrack.db")
    bkp.add_argument("--out", default="backup.db")

    rst = sub.add_parser("restore")
    rst.add_argument("--in", dest="src", default="backup.db")
    rst.add_argument("--db", default="gymtrack.db")

    demo = sub.add_parser("demo")
    demo.add_argument("--db", default="gymtrack.db")
    demo.add_argument("--yaml", default="settings.yaml")

    prs = sub.add_parser("prs")
    prs.add_argument("--db", default="gymtrack.db")
    prs.add_argument("--yaml", default="settings.yaml")
    prs.add_argument("--limit", type=int, default=None)

    cal = sub.add_parser("calendar")
    cal.add_argument("--db", default="gymtrack.db")
    cal.add_argument("--yaml", default="settings.yaml")
    cal.add_argument("--year", type=int, default=datetime.date.today().year)
    cal.add_argument("--month", type=int, default=datetime.date.today().month)

    args = parser.parse_args()
    configure_logging(args.log_level)

    if args.cmd == "export":
        for path in export_data(args.db, args.fmt, args.out):
            print(path)
    elif args.cmd == "import":
        imported = import_data(args.json, args.db, args.yaml)
        print(f"Imported: {', '.join(imported) or 'nothing'}")
    elif args.cmd == "backup":
        backup_db(args.db, args.out)
    elif args.cmd == "restore":
        restore_db(args.src, args.db)
    elif args.cmd == "demo":
        demo_data(args.db, args.yaml)
    elif args.cmd == "prs":
        print_recent_prs(args.db, args.yaml, args.limit)
    elif args.cmd == "calendar":
        print_calendar(args.db, args.yaml, args.year, args.month)


if __name__ == "__main__":
    main()
