import requests
from typing import Optional

class GymTrackClient:
    """Simple REST client for the workout API."""

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _get(self, path: str, **params):
        resp = requests.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def create_workout(self, workout: dict) -> str:
        resp = requests.post(f"{self.base_url}/workouts", json=workout, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()["id"]

    def list_workouts(self) -> list:
        return self._get("/workouts")

    def recent_prs(self, limit: Optional[int] = None) -> list:
        params = {"limit": limit} if limit is not None else {}
        return self._get("/stats/recent_prs", **params)

    def best_set(self, exercise: str) -> Optional[str]:
        return self._get("/stats/best_set", exercise=exercise)["text"]

    def progress(self, exercise: str) -> list:
        return self._get(f"/stats/progress/{requests.utils.quote(exercise, safe='')}")

    def calendar_day(self, day: str) -> list:
        return self._get(f"/calendar/{day}")
