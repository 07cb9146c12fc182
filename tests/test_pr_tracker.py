import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from algorithms import PRTracker
from models import Exercise, SetData, Workout


def workout(wid: str, date: str, *exercises: tuple) -> Workout:
    return Workout(
        id=wid,
        name=wid,
        date=date,
        exercises=[
            Exercise(name=name, sets=[SetData(weight=w, reps=r) for w, r in sets])
            for name, sets in exercises
        ],
    )


class RecentPRTestCase(unittest.TestCase):
    def test_empty_history(self) -> None:
        self.assertEqual(PRTracker.recent_prs([]), [])

    def test_single_set_is_baseline(self) -> None:
        history = [workout("w1", "2024-01-01T10:00:00", ("Squat", [(100, 5)]))]
        self.assertEqual(PRTracker.recent_prs(history), [])

    def test_weight_pr(self) -> None:
        history = [
            workout("w1", "2024-01-01T10:00:00", ("Bench", [(60, 10)])),
            workout("w2", "2024-01-08T10:00:00", ("Bench", [(70, 8)])),
        ]
        prs = PRTracker.recent_prs(history)
        self.assertEqual(len(prs), 1)
        self.assertEqual(prs[0].type, "weight")
        self.assertEqual(prs[0].previous_best, "60kg x 10")
        self.assertEqual(prs[0].workout_id, "w2")
        self.assertEqual(prs[0].date, "2024-01-08T10:00:00")
        self.assertEqual((prs[0].weight, prs[0].reps), (70, 8))

    def test_reps_pr_at_same_weight(self) -> None:
        history = [
            workout("w1", "2024-01-01T10:00:00", ("Bench", [(70, 8)])),
            workout("w2", "2024-01-08T10:00:00", ("Bench", [(70, 10)])),
        ]
        prs = PRTracker.recent_prs(history)
        self.assertEqual(len(prs), 1)
        self.assertEqual(prs[0].type, "reps")
        self.assertEqual(prs[0].previous_best, "70kg x 8")

    def test_lighter_set_with_more_reps_is_not_pr(self) -> None:
        history = [
            workout("w1", "2024-01-01T10:00:00", ("Bench", [(70, 10)])),
            workout("w2", "2024-01-08T10:00:00", ("Bench", [(65, 12)])),
        ]
        self.assertEqual(PRTracker.recent_prs(history), [])

    def test_tie_is_not_pr(self) -> None:
        history = [
            workout("w1", "2024-01-01T10:00:00", ("Bench", [(70, 8)])),
            workout("w2", "2024-01-08T10:00:00", ("Bench", [(70, 8)])),
        ]
        self.assertEqual(PRTracker.recent_prs(history), [])

    def test_keeps_latest_pr_per_exercise(self) -> None:
        history = [
            workout("w1", "2024-01-01T10:00:00", ("Row", [(50, 10)])),
            workout("w2", "2024-01-02T10:00:00", ("Row", [(55, 10)])),
            workout("w3", "2024-01-03T10:00:00", ("Row", [(60, 10)])),
            workout("w4", "2024-01-04T10:00:00", ("Row", [(65, 10)])),
        ]
        prs = PRTracker.recent_prs(history)
        self.assertEqual(len(prs), 1)
        self.assertEqual(prs[0].workout_id, "w4")
        self.assertEqual(prs[0].previous_best, "60kg x 10")

    def test_feed_is_bounded_and_newest_first(self) -> None:
        history = []
        for i in range(8):
            name = f"Exercise {i}"
            history.append(workout(f"a{i}", f"2024-01-{i + 1:02d}T08:00:00", (name, [(40, 5)])))
            history.append(workout(f"b{i}", f"2024-02-{i + 1:02d}T08:00:00", (name, [(45, 5)])))
        prs = PRTracker.recent_prs(history)
        self.assertEqual(len(prs), 5)
        self.assertEqual([p.workout_id for p in prs], ["b7", "b6", "b5", "b4", "b3"])

    def test_custom_limit(self) -> None:
        history = [
            workout("w1", "2024-01-01T10:00:00", ("A", [(10, 5)]), ("B", [(10, 5)])),
            workout("w2", "2024-01-02T10:00:00", ("A", [(20, 5)]), ("B", [(20, 5)])),
        ]
        self.assertEqual(len(PRTracker.recent_prs(history, 1)), 1)
        self.assertEqual(PRTracker.recent_prs(history, 0), [])

    def test_replay_uses_date_not_list_order(self) -> None:
        newest_first = [
            workout("w2", "2024-01-08T10:00:00", ("Bench", [(60, 10)])),
            workout("w1", "2024-01-01T10:00:00", ("Bench", [(70, 8)])),
        ]
        self.assertEqual(PRTracker.recent_prs(newest_first), [])

    def test_non_positive_weight_is_skipped(self) -> None:
        history = [
            workout("w1", "2024-01-01T10:00:00", ("Pull-up", [(0, 12)])),
            workout("w2", "2024-01-02T10:00:00", ("Pull-up", [(5, 8)])),
            workout("w3", "2024-01-03T10:00:00", ("Pull-up", [(0, 20)])),
        ]
        self.assertEqual(PRTracker.recent_prs(history), [])

    def test_duplicate_exercise_in_one_workout(self) -> None:
        history = [
            workout(
                "w1",
                "2024-01-01T10:00:00",
                ("Curl", [(10, 12)]),
                ("Curl", [(12, 10)]),
            )
        ]
        prs = PRTracker.recent_prs(history)
        self.assertEqual(len(prs), 1)
        self.assertEqual(prs[0].previous_best, "10kg x 12")

    def test_single_workout_progression(self) -> None:
        history = [
            workout(
                "w1",
                "2024-05-01T09:30:00.000Z",
                ("Bench", [(15, 14), (17.5, 12), (25, 4)]),
            )
        ]
        prs = PRTracker.recent_prs(history)
        self.assertEqual(len(prs), 1)
        self.assertEqual(prs[0].exercise_name, "Bench")
        self.assertEqual((prs[0].weight, prs[0].reps, prs[0].type), (25, 4, "weight"))
        self.assertEqual(prs[0].previous_best, "17.5kg x 12")

    def test_idempotent_and_input_untouched(self) -> None:
        history = [
            workout("w2", "2024-01-08T10:00:00", ("Bench", [(70, 8)])),
            workout("w1", "2024-01-01T10:00:00", ("Bench", [(60, 10)])),
        ]
        before = [w.id for w in history]
        first = PRTracker.recent_prs(history)
        second = PRTracker.recent_prs(history)
        self.assertEqual(first, second)
        self.assertEqual([w.id for w in history], before)

    def test_exact_name_matching(self) -> None:
        history = [
            workout("w1", "2024-01-01T10:00:00", ("Bench", [(60, 10)])),
            workout("w2", "2024-01-02T10:00:00", ("bench", [(70, 10)])),
        ]
        self.assertEqual(PRTracker.recent_prs(history), [])


class BestSetTestCase(unittest.TestCase):
    def test_best_set(self) -> None:
        history = [
            workout("w1", "2024-01-01T10:00:00", ("Bench", [(60, 10), (70, 5)])),
            workout("w2", "2024-01-02T10:00:00", ("Bench", [(70, 6), (65, 12)])),
        ]
        best = PRTracker.best_set("Bench", history)
        self.assertEqual((best.weight, best.reps), (70, 6))
        self.assertEqual(PRTracker.best_set_text("Bench", history), "70kg x 6")

    def test_unknown_exercise(self) -> None:
        history = [workout("w1", "2024-01-01T10:00:00", ("Bench", [(60, 10)]))]
        self.assertIsNone(PRTracker.best_set("Squat", history))
        self.assertIsNone(PRTracker.best_set_text("Squat", []))

    def test_only_zero_weight(self) -> None:
        history = [workout("w1", "2024-01-01T10:00:00", ("Plank", [(0, 1), (0, 3)]))]
        self.assertIsNone(PRTracker.best_set("Plank", history))

    def test_fractional_weight_text(self) -> None:
        history = [workout("w1", "2024-01-01T10:00:00", ("Press", [(42.5, 8)]))]
        self.assertEqual(PRTracker.best_set_text("Press", history), "42.5kg x 8")


if __name__ == "__main__":
    unittest.main()
