import unittest
import sys
import os
from unittest.mock import patch
from fastapi.testclient import TestClient
sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from client import GymTrackClient
from rest_api import GymAPI

class ClientTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = 'test_client.db'
        self.yaml_path = 'test_client.yaml'
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)
        self.api = GymAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        self.test_client = TestClient(self.api.app)
        self.client = GymTrackClient(base_url='http://testserver/')
        # route requests through the in-process app instead of the network
        get = lambda url, params=None, timeout=None: self.test_client.get(url, params=params)
        post = lambda url, json=None, timeout=None: self.test_client.post(url, json=json)
        patcher_get = patch('client.requests.get', side_effect=get)
        patcher_post = patch('client.requests.post', side_effect=post)
        patcher_get.start()
        patcher_post.start()
        self.addCleanup(patcher_get.stop)
        self.addCleanup(patcher_post.stop)

    def tearDown(self) -> None:
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)

    def _workout(self, wid: str, date: str, weight: float) -> dict:
        return {
            'id': wid,
            'date': date,
            'exercises': [{'name': 'Press Militar con Barra', 'sets': [{'weight': weight, 'reps': 5}]}],
        }

    def test_create_and_query(self) -> None:
        self.assertEqual(self.client.create_workout(self._workout('a', '2024-02-01T09:00:00', 40)), 'a')
        self.client.create_workout(self._workout('b', '2024-02-08T09:00:00', 42.5))
        self.assertEqual([w['id'] for w in self.client.list_workouts()], ['b', 'a'])
        prs = self.client.recent_prs()
        self.assertEqual(prs[0]['previous_best'], '40kg x 5')
        self.assertEqual(self.client.recent_prs(limit=0), [])
        self.assertEqual(self.client.best_set('Press Militar con Barra'), '42.5kg x 5')
        self.assertIsNone(self.client.best_set('Plancha'))
        self.assertEqual(len(self.client.progress('Press Militar con Barra')), 2)
        self.assertEqual([w['id'] for w in self.client.calendar_day('2024-02-08')], ['b'])

if __name__ == '__main__':
    unittest.main()
