import datetime
import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from localization import Translator

NOW = datetime.datetime(2024, 6, 10, 12, 0, tzinfo=datetime.timezone.utc)


class TimeAgoTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.t = Translator()

    def ago(self, **delta) -> str:
        then = (NOW - datetime.timedelta(**delta)).isoformat()
        return self.t.format_time_ago(then, now=NOW)

    def test_spanish(self) -> None:
        self.assertEqual(self.ago(seconds=30), "Justo ahora")
        self.assertEqual(self.ago(minutes=5), "Hace 5 min")
        self.assertEqual(self.ago(minutes=90), "Hace 1 hora")
        self.assertEqual(self.ago(hours=5), "Hace 5 horas")
        self.assertEqual(self.ago(hours=30), "Ayer")
        self.assertEqual(self.ago(days=3), "Hace 3 días")
        self.assertEqual(self.ago(days=10), "2024-05-31")

    def test_english(self) -> None:
        self.t.set_language("en")
        self.assertEqual(self.ago(minutes=5), "5 min ago")
        self.assertEqual(self.ago(hours=30), "Yesterday")

    def test_zulu_and_naive_dates(self) -> None:
        self.assertEqual(self.t.format_time_ago("2024-06-10T11:00:00Z", now=NOW), "Hace 1 hora")
        naive_now = NOW.replace(tzinfo=None)
        self.assertEqual(self.t.format_time_ago("2024-06-10T11:58:00", now=naive_now), "Hace 2 min")


if __name__ == "__main__":
    unittest.main()
