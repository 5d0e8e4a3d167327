# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest
from datetime import datetime, timedelta

from sqlmodel import select

from fitchain.models import User
from fitchain.services.users import advance_streak, calculate_level, xp_for_level
from tests.support import ApiTestCase


class TestLevelCurve(unittest.TestCase):
    def test_levels(self) -> None:
        self.assertEqual(calculate_level(0), 1)
        self.assertEqual(calculate_level(99), 1)
        self.assertEqual(calculate_level(100), 2)
        self.assertEqual(calculate_level(399), 2)
        self.assertEqual(calculate_level(400), 3)
        self.assertEqual(xp_for_level(3), 900)


class TestStreak(unittest.TestCase):
    def setUp(self) -> None:
        self.now = datetime(2026, 10, 19, 12, 0, 0)

    def _user(self, hours_ago: float, streak: int = 4) -> User:
        last = self.now - timedelta(hours=hours_ago)
        return User(
            username="alice", streak=streak, last_active=last, last_streak_update=last
        )

    def test_same_day_keeps_streak(self) -> None:
        self.assertEqual(advance_streak(self._user(3), self.now), 4)

    def test_next_day_extends_streak(self) -> None:
        self.assertEqual(advance_streak(self._user(30), self.now), 5)

    def test_gap_resets_streak(self) -> None:
        self.assertEqual(advance_streak(self._user(48), self.now), 1)


class TestUserSync(ApiTestCase):
    def test_sync_creates_user_with_defaults(self) -> None:
        resp = self.client.post("/api/user/sync", json={"username": "alice"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertEqual(
            {k: v for k, v in body["user"].items() if k != "id"},
            {
                "username": "alice",
                "totalXP": 0,
                "level": 1,
                "streak": 1,
                "totalCalories": 0,
                "totalEntries": 0,
            },
        )

    def test_sync_is_idempotent(self) -> None:
        first = self.client.post("/api/user/sync", json={"username": "alice"}).json()
        self.client.post(
            "/api/food/log",
            json={"username": "alice", "foodName": "Oats", "calories": 300, "xpEarned": 150},
        )
        second = self.client.post("/api/user/sync", json={"username": "alice"}).json()
        third = self.client.get("/api/user/sync", params={"username": "alice"}).json()

        self.assertEqual(first["user"]["id"], second["user"]["id"])
        self.assertEqual(second["user"]["id"], third["user"]["id"])
        for field in ("totalXP", "level", "streak"):
            self.assertGreaterEqual(second["user"][field], first["user"][field])
            self.assertEqual(third["user"][field], second["user"][field])
        self.assertEqual(third["user"]["totalEntries"], 1)

        with self.session() as session:
            self.assertEqual(len(session.exec(select(User)).all()), 1)

    def test_username_is_trimmed(self) -> None:
        resp = self.client.post("/api/user/sync", json={"username": "  bob  "})
        self.assertEqual(resp.json()["user"]["username"], "bob")

    def test_missing_username_is_rejected(self) -> None:
        self.assertEqual(self.client.post("/api/user/sync", json={}).status_code, 400)
        self.assertEqual(
            self.client.post("/api/user/sync", json={"username": "   "}).status_code, 400
        )
        self.assertEqual(self.client.get("/api/user/sync").status_code, 400)

    def test_overlong_username_is_rejected(self) -> None:
        resp = self.client.post("/api/user/sync", json={"username": "x" * 101})
        self.assertEqual(resp.status_code, 400)


class TestUserStats(ApiTestCase):
    def test_unknown_user(self) -> None:
        resp = self.client.get("/api/user/stats", params={"username": "ghost"})
        self.assertEqual(resp.status_code, 404)

    def test_rank_and_progress(self) -> None:
        for name in ("alice", "bob"):
            self.client.post("/api/user/sync", json={"username": name})
        self.client.post(
            "/api/food/log",
            json={"username": "bob", "foodName": "Salad", "calories": 250, "xpEarned": 150},
        )

        bob = self.client.get("/api/user/stats", params={"username": "bob"}).json()["stats"]
        alice = self.client.get("/api/user/stats", params={"username": "alice"}).json()["stats"]

        self.assertEqual(bob["rank"], 1)
        self.assertEqual(alice["rank"], 2)
        self.assertEqual(bob["level"], 2)
        self.assertEqual(bob["xpForNextLevel"], 900)
        self.assertEqual(bob["xpProgress"], 150 % 400)


class TestLeaderboard(ApiTestCase):
    def _seed(self) -> None:
        for name, xp in (("alice", 50), ("bob", 500), ("carol", 200)):
            self.client.post("/api/user/sync", json={"username": name})
            self.client.post(
                "/api/food/log",
                json={"username": name, "foodName": "Meal", "calories": 400, "xpEarned": xp},
            )

    def test_limit_and_order(self) -> None:
        self._seed()
        resp = self.client.get("/api/leaderboard-db", params={"limit": 2})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()

        self.assertEqual(body["count"], 2)
        entries = body["leaderboard"]
        self.assertEqual([entry["rank"] for entry in entries], [1, 2])
        self.assertEqual([entry["username"] for entry in entries], ["bob", "carol"])
        self.assertEqual(entries[0]["totalXP"], 500)
        self.assertEqual(entries[0]["totalEntries"], 1)
        self.assertTrue(entries[0]["joinedAt"].endswith("Z"))

    def test_default_limit_returns_everyone(self) -> None:
        self._seed()
        body = self.client.get("/api/leaderboard-db").json()
        self.assertEqual(body["count"], 3)
        self.assertEqual(body["leaderboard"][-1]["username"], "alice")

    def test_empty_leaderboard(self) -> None:
        body = self.client.get("/api/leaderboard-db").json()
        self.assertEqual(body, {"success": True, "leaderboard": [], "count": 0})

    def test_equal_xp_ranks_earlier_joiner_first(self) -> None:
        for name in ("zed", "amy", "mia"):
            self.client.post("/api/user/sync", json={"username": name})
            self.client.post(
                "/api/food/log",
                json={"username": name, "foodName": "Meal", "calories": 300, "xpEarned": 120},
            )

        entries = self.client.get("/api/leaderboard-db").json()["leaderboard"]

        self.assertEqual([entry["username"] for entry in entries], ["zed", "amy", "mia"])
        self.assertEqual([entry["rank"] for entry in entries], [1, 2, 3])

    def test_invalid_limit_is_a_client_error(self) -> None:
        for limit in (0, 501, "abc"):
            resp = self.client.get("/api/leaderboard-db", params={"limit": limit})
            self.assertEqual(resp.status_code, 400, limit)
            self.assertIn("detail", resp.json())


if __name__ == "__main__":
    unittest.main()
