import sys
import unittest
from datetime import date
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from fastapi.testclient import TestClient

from application.comments import CommentService
from application.watchlist import WatchlistService
from infrastructure.persistence.postgres.comment_store import InMemoryCommentStore
from infrastructure.persistence.postgres.watch_record_store import InMemoryWatchRecordStore
from server.main import app


class TestWatchlistApi(unittest.TestCase):
    def setUp(self) -> None:
        from server.api.rest import dependencies as deps

        self.service = WatchlistService(store=InMemoryWatchRecordStore())
        app.dependency_overrides[deps.get_watchlist_service] = lambda: self.service
        self.comments = CommentService(store=InMemoryCommentStore())
        app.dependency_overrides[deps.get_comment_service] = lambda: self.comments
        app.dependency_overrides[deps.get_reference_day] = lambda: date(2024, 1, 15)
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides = {}

    def _add(self, movie_id: int, title: str):
        return self.client.post(
            "/api/v1/watchlist",
            json={"user_id": "u1", "movie_id": movie_id, "title": title, "release_date": "2021-09-15"},
        )

    def test_add_list_delete(self):
        resp = self._add(10, "Dune")
        self.assertEqual(resp.status_code, 201, resp.text)
        body = resp.json()
        self.assertEqual(body["movie_id"], 10)
        self.assertEqual(body["status"], "to_watch")
        self.assertIsNone(body["date"])
        self.assertEqual(body["release_date"], "2021-09-15")

        dup = self._add(10, "Dune")
        self.assertEqual(dup.status_code, 409, dup.text)
        self.assertEqual(dup.json()["detail"], "movie already in watchlist")

        missing = self.client.post("/api/v1/watchlist", json={"user_id": "u1", "movie_id": 11})
        self.assertEqual(missing.status_code, 400, missing.text)

        items = self.client.get("/api/v1/watchlist", params={"user_id": "u1"}).json()
        self.assertEqual([i["movie_id"] for i in items], [10])

        resp = self.client.delete("/api/v1/watchlist/10", params={"user_id": "u1"})
        self.assertEqual(resp.status_code, 204, resp.text)
        resp = self.client.delete("/api/v1/watchlist/10", params={"user_id": "u1"})
        self.assertEqual(resp.status_code, 204, resp.text)
        self.assertEqual(self.client.get("/api/v1/watchlist", params={"user_id": "u1"}).json(), [])

    def test_schedule_mark_rate_unmark(self):
        self._add(10, "Dune")

        resp = self.client.post("/api/v1/watchlist/10/schedule", json={"user_id": "u1", "date": "2024-01-20"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["action"], "scheduled")
        self.assertEqual(resp.json()["movie"]["status"], "upcoming")
        self.assertEqual(resp.json()["movie"]["date"], "2024-01-20")

        resp = self.client.put("/api/v1/watchlist/10/rating", json={"user_id": "u1", "rating": 3})
        self.assertEqual(resp.status_code, 404, resp.text)
        self.assertEqual(resp.json()["detail"], "movie not found in watchlist or not marked as watched")

        resp = self.client.post("/api/v1/watchlist/10/watched", json={"user_id": "u1", "date": "2024-01-10"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["action"], "marked_watched")
        self.assertEqual(resp.json()["movie"]["status"], "watched")

        resp = self.client.put("/api/v1/watchlist/10/rating", json={"user_id": "u1", "rating": 6})
        self.assertEqual(resp.status_code, 400, resp.text)
        resp = self.client.put("/api/v1/watchlist/10/rating", json={"user_id": "u1", "rating": 3})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["rating"], 3)
        resp = self.client.put("/api/v1/watchlist/10/rating", json={"user_id": "u1", "rating": 4.0})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["rating"], 4)
        resp = self.client.put("/api/v1/watchlist/10/rating", json={"user_id": "u1", "rating": 3.0})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["rating"], 3)
        resp = self.client.put("/api/v1/watchlist/10/rating", json={"user_id": "u1", "rating": 3.5})
        self.assertEqual(resp.status_code, 400, resp.text)

        resp = self.client.post("/api/v1/watchlist/10/unwatch", json={"user_id": "u1"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["status"], "to_watch")
        self.assertEqual(resp.json()["rating"], 3)
        self.assertIsNone(resp.json()["date"])

    def test_date_errors(self):
        self._add(10, "Dune")
        resp = self.client.post("/api/v1/watchlist/10/schedule", json={"user_id": "u1"})
        self.assertEqual(resp.status_code, 400, resp.text)
        self.assertEqual(resp.json()["detail"], "date is required")

        resp = self.client.post("/api/v1/watchlist/10/schedule", json={"user_id": "u1", "date": "soon"})
        self.assertEqual(resp.status_code, 400, resp.text)

        resp = self.client.post("/api/v1/watchlist/99/watched", json={"user_id": "u1", "date": "2024-01-10"})
        self.assertEqual(resp.status_code, 404, resp.text)

        resp = self.client.post("/api/v1/watchlist/abc/watched", json={"user_id": "u1", "date": "2024-01-10"})
        self.assertEqual(resp.status_code, 400, resp.text)

    def test_calendar_views(self):
        self._add(10, "Dune")
        self._add(11, "Heat")
        self._add(12, "Alien")
        self.client.post("/api/v1/watchlist/10/schedule", json={"user_id": "u1", "date": "2024-01-20"})
        self.client.post("/api/v1/watchlist/11/watched", json={"user_id": "u1", "date": "2024-01-10"})
        self.client.post("/api/v1/watchlist/12/watched", json={"user_id": "u1", "date": "2024-01-15"})

        overview = self.client.get("/api/v1/watchlist/overview", params={"user_id": "u1"}).json()
        self.assertEqual(overview["today"], "2024-01-15")
        self.assertEqual([i["movie_id"] for i in overview["upcoming"]], [10])
        self.assertEqual([i["movie_id"] for i in overview["watched"]], [12, 11])
        self.assertEqual(overview["watched_days"], ["2024-01-10", "2024-01-15"])
        self.assertEqual(overview["scheduled_days"], ["2024-01-20"])

        dates = self.client.get("/api/v1/watchlist/watched-dates", params={"user_id": "u1"}).json()
        self.assertEqual(dates, ["2024-01-10", "2024-01-15"])

        upcoming = self.client.get("/api/v1/watchlist/upcoming", params={"user_id": "u1", "limit": 5}).json()
        self.assertEqual([i["movie_id"] for i in upcoming], [10])

        day = self.client.get("/api/v1/watchlist/by-date", params={"user_id": "u1", "date": "2024-01-20"}).json()
        self.assertEqual(day["date"], "2024-01-20")
        self.assertEqual([i["movie_id"] for i in day["upcoming"]], [10])
        self.assertEqual(day["watched"], [])

        bad = self.client.get("/api/v1/watchlist/by-date", params={"user_id": "u1", "date": "20/01/2024"})
        self.assertEqual(bad.status_code, 400, bad.text)
        self.assertEqual(bad.json()["detail"], "invalid date format")

    def test_ratings_page(self):
        self._add(10, "Dune")
        self._add(11, "Heat")
        self._add(12, "Alien")
        self.client.post("/api/v1/watchlist/10/watched", json={"user_id": "u1", "date": "2024-01-15"})
        self.client.post("/api/v1/watchlist/11/watched", json={"user_id": "u1", "date": "2024-01-10"})
        self.client.post("/api/v1/watchlist/12/schedule", json={"user_id": "u1", "date": "2024-01-16"})
        self.client.put("/api/v1/watchlist/10/rating", json={"user_id": "u1", "rating": 5})
        self.client.put("/api/v1/watchlist/11/rating", json={"user_id": "u1", "rating": 2})
        for movie_id in (10, 12):
            resp = self.client.post(
                "/api/v1/comments",
                json={"user_id": "u1", "movie_id": movie_id, "content": "noted"},
            )
            self.assertEqual(resp.status_code, 201, resp.text)

        resp = self.client.get("/api/v1/watchlist/ratings", params={"user_id": "u1"})
        self.assertEqual(resp.status_code, 200, resp.text)
        body = resp.json()
        self.assertEqual(body["summary"], {"watched": 2, "rated": 2, "highly_rated": 1, "commented": 1})
        self.assertEqual([i["movie_id"] for i in body["movies"]], [10, 11])

        empty = self.client.get("/api/v1/watchlist/ratings", params={"user_id": "u2"}).json()
        self.assertEqual(empty["summary"], {"watched": 0, "rated": 0, "highly_rated": 0, "commented": 0})
        self.assertEqual(empty["movies"], [])

    def test_unknown_timezone(self):
        resp = self.client.get("/api/v1/watchlist", params={"user_id": "u1", "tz": "Not/AZone"})
        self.assertEqual(resp.status_code, 400, resp.text)


if __name__ == "__main__":
    unittest.main()
