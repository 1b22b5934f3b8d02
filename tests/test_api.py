# -*- coding: utf-8 -*-

from __future__ import annotations

import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

PASSWORD = "password123"
SETUP = {"bmr": 1618, "gender": "male", "height": 170, "weight": 70, "timezone": "Asia/Tokyo"}


class AppTestCase(unittest.TestCase):
    """Fresh data root, settings and app per test class."""

    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = Path(tempfile.mkdtemp(prefix="lifeos-test-"))
        data_root = cls._tmp / "data"
        os.environ["LIFEOS_DATA_ROOT"] = str(data_root)
        os.environ["LIFEOS_DB_PATH"] = str(data_root / "lifeos.db")
        os.environ["LIFEOS_JWT_SECRET"] = "test-secret"
        os.environ.pop("LIFEOS_MAX_MITS_PER_DAY", None)

        # Ensure settings/app reflect the env vars above.
        for name in list(sys.modules.keys()):
            if name.startswith("lifeos."):
                sys.modules.pop(name, None)

        from lifeos.api import app  # noqa: WPS433 (import inside test for env control)

        cls.app = app
        cls.client = TestClient(app)

    @classmethod
    def tearDownClass(cls) -> None:
        cls.client.close()
        shutil.rmtree(cls._tmp, ignore_errors=True)

    def new_client(self) -> TestClient:
        client = TestClient(self.app)
        self.addCleanup(client.close)
        return client

    def signup(self, client: TestClient, email: str) -> str:
        resp = client.post("/api/auth/register", json={"email": email, "password": PASSWORD})
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()["token"]


class TestAuth(AppTestCase):
    def test_auth_required(self) -> None:
        client = self.new_client()
        self.assertEqual(client.get("/api/mits").status_code, 401)
        self.assertEqual(client.get("/api/profile").status_code, 401)
        self.assertEqual(client.get("/api/health").status_code, 200)

    def test_register_login_refresh_logout(self) -> None:
        client = self.new_client()
        self.signup(client, "Ann@Example.com")

        resp = client.post("/api/auth/register", json={"email": "ann@example.com", "password": PASSWORD})
        self.assertEqual(resp.status_code, 400)

        resp = client.post("/api/auth/login", json={"email": "ann@example.com", "password": "wrong-password"})
        self.assertEqual(resp.status_code, 401)

        resp = client.post("/api/auth/login", json={"email": "ann@example.com", "password": PASSWORD})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["email"], "ann@example.com")

        resp = client.get("/api/auth/me")
        self.assertEqual(resp.status_code, 200)

        resp = client.post("/api/auth/refresh")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["token"])

        resp = client.post("/api/auth/logout")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(client.get("/api/auth/me").status_code, 401)

    def test_bearer_token(self) -> None:
        token = self.signup(self.new_client(), "bearer@example.com")
        client = self.new_client()
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 200)

        resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
        self.assertEqual(resp.status_code, 401)


class TestProfile(AppTestCase):
    def test_setup_then_partial_update(self) -> None:
        client = self.new_client()
        self.signup(client, "profile@example.com")

        self.assertEqual(client.get("/api/profile").status_code, 404)
        self.assertEqual(client.patch("/api/profile", json={"weight": 71}).status_code, 404)

        resp = client.put("/api/profile", json={**SETUP, "height": 0})
        self.assertEqual(resp.status_code, 422)

        resp = client.put("/api/profile", json=SETUP)
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["timezone"], "Asia/Tokyo")

        resp = client.patch("/api/profile", json={"weight": 72.5, "first_name": "Sam"})
        self.assertEqual(resp.status_code, 200)
        profile = resp.json()
        self.assertEqual(profile["weight"], 72.5)
        self.assertEqual(profile["first_name"], "Sam")
        self.assertEqual(profile["bmr"], 1618)
        self.assertEqual(profile["gender"], "male")

        resp = client.patch("/api/profile", json={"timezone": "Mars/Olympus_Mons"})
        self.assertEqual(resp.status_code, 422)

    def test_non_finite_measurements_rejected(self) -> None:
        client = self.new_client()
        self.signup(client, "finite@example.com")
        client.put("/api/profile", json=SETUP)

        for body in ({"height": "nan"}, {"weight": "inf"}, {"height": "-inf"}):
            with self.subTest(body=body):
                self.assertEqual(client.patch("/api/profile", json=body).status_code, 422)
        self.assertEqual(client.put("/api/profile", json={**SETUP, "weight": "nan"}).status_code, 422)

        profile = client.get("/api/profile").json()
        self.assertEqual(profile["height"], 170)
        self.assertEqual(profile["weight"], 70)

    def test_null_clears_only_optional_fields(self) -> None:
        client = self.new_client()
        self.signup(client, "nulls@example.com")
        client.put("/api/profile", json={**SETUP, "first_name": "Sam", "avatar_url": "https://example.com/a.png"})

        resp = client.patch("/api/profile", json={"first_name": None, "avatar_url": None, "height": None, "bmr": None})
        self.assertEqual(resp.status_code, 200, resp.text)
        profile = resp.json()
        self.assertIsNone(profile["first_name"])
        self.assertIsNone(profile["avatar_url"])
        self.assertEqual(profile["height"], 170)
        self.assertEqual(profile["bmr"], 1618)
        self.assertEqual(profile["timezone"], "Asia/Tokyo")


class TestMITs(AppTestCase):
    DAY = "2025-01-30"

    def test_cap_order_toggle_delete(self) -> None:
        client = self.new_client()
        self.signup(client, "mits@example.com")

        ids = []
        for title in ("First", "  Second  ", "Third"):
            resp = client.post("/api/mits", json={"date": self.DAY, "title": title})
            self.assertEqual(resp.status_code, 200, resp.text)
            ids.append(resp.json()["id"])

        resp = client.post("/api/mits", json={"date": self.DAY, "title": "Fourth"})
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["detail"], f"You've reached the maximum of 3 MITs for {self.DAY}")

        # Another day has its own cap.
        resp = client.post("/api/mits", json={"date": "2025-01-31", "title": "Tomorrow"})
        self.assertEqual(resp.status_code, 200)

        resp = client.get("/api/mits", params={"date": self.DAY})
        self.assertEqual(resp.status_code, 200)
        listing = resp.json()
        self.assertEqual(listing["count"], 3)
        self.assertEqual(listing["limit"], 3)
        self.assertEqual([m["title"] for m in listing["items"]], ["First", "Second", "Third"])

        resp = client.patch(f"/api/mits/{ids[0]}", json={"completed": True})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["completed"])
        self.assertIsNotNone(resp.json()["completed_at"])

        resp = client.patch(f"/api/mits/{ids[0]}", json={"completed": False})
        self.assertFalse(resp.json()["completed"])
        self.assertIsNone(resp.json()["completed_at"])

        resp = client.delete(f"/api/mits/{ids[1]}")
        self.assertEqual(resp.json(), {"status": "ok", "mit_id": ids[1]})
        self.assertEqual(client.delete(f"/api/mits/{ids[1]}").status_code, 404)

        resp = client.post("/api/mits", json={"date": self.DAY, "title": "Replacement"})
        self.assertEqual(resp.status_code, 200)

    def test_validation(self) -> None:
        client = self.new_client()
        self.signup(client, "validate@example.com")
        self.assertEqual(client.post("/api/mits", json={"date": self.DAY, "title": "   "}).status_code, 422)
        self.assertEqual(client.post("/api/mits", json={"date": "30/01/2025", "title": "x"}).status_code, 422)
        for day in ("2025-13-45", "2025-02-30", "2025-00-10"):
            with self.subTest(day=day):
                self.assertEqual(client.post("/api/mits", json={"date": day, "title": "x"}).status_code, 422)
                self.assertEqual(client.get("/api/mits", params={"date": day}).status_code, 422)
        self.assertEqual(client.get("/api/mits", params={"date": "2024-02-29"}).status_code, 200)
        self.assertEqual(client.patch("/api/mits/missing", json={"completed": True}).status_code, 404)

    def test_items_are_private(self) -> None:
        owner = self.new_client()
        self.signup(owner, "owner@example.com")
        mit_id = owner.post("/api/mits", json={"date": self.DAY, "title": "Mine"}).json()["id"]

        other = self.new_client()
        self.signup(other, "other@example.com")
        self.assertEqual(other.get("/api/mits", params={"date": self.DAY}).json()["items"], [])
        self.assertEqual(other.patch(f"/api/mits/{mit_id}", json={"completed": True}).status_code, 404)
        self.assertEqual(other.delete(f"/api/mits/{mit_id}").status_code, 404)

    def test_default_day_follows_profile_timezone(self) -> None:
        client = self.new_client()
        self.signup(client, "tz@example.com")
        client.put("/api/profile", json=SETUP)
        resp = client.get("/api/mits")
        self.assertEqual(resp.json()["timezone"], "Asia/Tokyo")


class TestPages(AppTestCase):
    def test_guard_redirects(self) -> None:
        anon = self.new_client()
        resp = anon.get("/daily", follow_redirects=False)
        self.assertEqual(resp.status_code, 303)
        self.assertEqual(resp.headers["location"], "/auth/login")
        self.assertEqual(anon.get("/auth/login").json()["action"], "/api/auth/login")

        client = self.new_client()
        self.signup(client, "pages@example.com")
        resp = client.get("/daily", follow_redirects=False)
        self.assertEqual(resp.status_code, 303)
        self.assertEqual(resp.headers["location"], "/onboarding")

        resp = client.get("/onboarding", follow_redirects=False)
        self.assertEqual(resp.headers["location"], "/onboarding/profile-setup")

        self.assertEqual(client.get("/bmr-calculator").status_code, 200)

        resp = client.get("/auth/login", follow_redirects=False)
        self.assertEqual(resp.status_code, 303)
        self.assertEqual(resp.headers["location"], "/daily")

    def test_onboarding_with_prefill(self) -> None:
        client = self.new_client()
        self.signup(client, "onboard@example.com")

        resp = client.get("/onboarding/profile-setup", params={"tz": "Europe/Paris"})
        page = resp.json()
        self.assertEqual(page["defaults"]["timezone"], "Europe/Paris")
        self.assertFalse(page["prefilled"])

        resp = client.post("/api/calculator/bmr/prefill", json={"bmr": 1452, "gender": "female", "height": 165, "weight": 60})
        self.assertEqual(resp.json()["redirect"], "/onboarding/profile-setup")

        page = client.get("/onboarding/profile-setup").json()
        self.assertTrue(page["prefilled"])
        self.assertEqual(page["defaults"]["bmr"], 1452)
        self.assertEqual(page["defaults"]["gender"], "female")

        resp = client.post("/onboarding/profile-setup", json={"bmr": "1452", "gender": "female", "height": ""})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["error"], "Please fill in all required fields")

        resp = client.post(
            "/onboarding/profile-setup",
            json={"bmr": "1452", "gender": "female", "height": "165", "weight": "-60", "timezone": "Europe/Paris"},
        )
        self.assertEqual(resp.json()["error"], "Weight must be a positive number")

        resp = client.post(
            "/onboarding/profile-setup",
            json={"bmr": "1452", "gender": "female", "height": "165", "weight": "60", "timezone": "Europe/Paris"},
            follow_redirects=False,
        )
        self.assertEqual(resp.status_code, 303)
        self.assertEqual(resp.headers["location"], "/daily")
        self.assertFalse(client.get("/onboarding/profile-setup").json()["prefilled"])

        resp = client.get("/daily", params={"width": 375})
        self.assertEqual(resp.status_code, 200)
        page = resp.json()
        self.assertEqual(page["timezone"], "Europe/Paris")
        self.assertEqual(page["limit"], 3)
        self.assertTrue(page["can_add"])
        self.assertEqual(page["navigation"]["variant"], "bottom_bar")

        client.post("/api/mits", json={"date": page["date"], "title": "Walk"})
        page = client.get("/daily").json()
        self.assertEqual([m["title"] for m in page["mits"]], ["Walk"])
        self.assertEqual(page["navigation"]["variant"], "sidebar")

    def test_settings_notifications(self) -> None:
        client = self.new_client()
        self.signup(client, "settings@example.com")
        client.put("/api/profile", json=SETUP)

        page = client.get("/settings").json()
        self.assertEqual(page["form"]["weight"], "70")
        self.assertEqual(page["form"]["timezone"], "Asia/Tokyo")
        self.assertIsNone(page["notification"])

        page = client.post("/settings", json={"weight": "72.5", "gender": ""}).json()
        self.assertEqual(page["notification"]["type"], "success")
        self.assertEqual(page["notification"]["auto_dismiss_ms"], 3000)
        self.assertEqual(page["form"]["weight"], "72.5")
        self.assertEqual(page["form"]["gender"], "male")

        page = client.post("/settings", json={"height": "-1"}).json()
        self.assertEqual(page["notification"]["type"], "error")
        self.assertEqual(page["notification"]["message"], "Height must be a positive number")
        self.assertIsNone(page["notification"]["auto_dismiss_ms"])
        self.assertEqual(page["form"]["height"], "170")

    def test_placeholder_pages(self) -> None:
        client = self.new_client()
        self.signup(client, "placeholder@example.com")
        client.put("/api/profile", json=SETUP)
        for path in ("/calories", "/injections", "/analytics", "/winners-bible", "/nirvana"):
            with self.subTest(path=path):
                resp = client.get(path)
                self.assertEqual(resp.status_code, 200)
                self.assertTrue(resp.json()["coming_soon"])
                active = [e["href"] for e in resp.json()["navigation"]["items"] if e["active"]]
                self.assertEqual(active, [path])


class TestCalculatorAndLookups(AppTestCase):
    @classmethod
    def setUpClass(cls) -> None:
        super().setUpClass()
        cls.client.post("/api/auth/register", json={"email": "calc@example.com", "password": PASSWORD})

    def test_bmr(self) -> None:
        body = {"age": 30, "gender": "male", "height": 170, "weight": 70}
        resp = self.client.post("/api/calculator/bmr", json=body)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["bmr"], 1618)
        self.assertIsNone(resp.json()["tdee"])

        resp = self.client.post("/api/calculator/bmr", json={**body, "gender": "other", "activity_level": 1.2})
        self.assertEqual(resp.json()["bmr"], 1535)
        self.assertEqual(resp.json()["tdee"], 1842)

        self.assertEqual(self.client.post("/api/calculator/bmr", json={**body, "age": 0}).status_code, 400)
        self.assertEqual(self.client.post("/api/calculator/bmr", json={**body, "gender": "robot"}).status_code, 400)

    def test_non_finite_inputs_rejected(self) -> None:
        body = {"age": 30, "gender": "male", "height": 170, "weight": 70}
        for override in ({"age": "nan"}, {"height": "-inf"}, {"weight": "inf"}, {"activity_level": "nan"}):
            with self.subTest(override=override):
                resp = self.client.post("/api/calculator/bmr", json={**body, **override})
                self.assertEqual(resp.status_code, 422)
        for tdee_body in ({"bmr": "nan"}, {"bmr": "inf"}, {"bmr": 1618, "activity_level": "nan"}):
            with self.subTest(tdee_body=tdee_body):
                self.assertEqual(self.client.post("/api/calculator/tdee", json=tdee_body).status_code, 422)

    def test_tdee(self) -> None:
        resp = self.client.post("/api/calculator/tdee", json={"bmr": 1618})
        self.assertEqual(resp.json()["tdee"], 1942)
        resp = self.client.post("/api/calculator/tdee", json={"bmr": 1618, "activity_level": 3.0})
        self.assertEqual(resp.status_code, 400)

    def test_activity_levels(self) -> None:
        items = self.client.get("/api/calculator/activity-levels").json()["items"]
        self.assertEqual([i["multiplier"] for i in items], [1.2, 1.375, 1.55, 1.725, 1.9])

    def test_timezones(self) -> None:
        payload = self.client.get("/api/timezones", params={"preview": "UTC"}).json()
        self.assertIn("UTC", [i["value"] for i in payload["items"]])
        self.assertTrue(payload["preview"].endswith("UTC"))
        self.assertEqual(self.client.get("/api/timezones", params={"preview": "Nowhere/Land"}).status_code, 400)

    def test_navigation(self) -> None:
        nav = self.client.get("/api/navigation", params={"path": "/settings", "width": 500}).json()
        self.assertEqual(nav["variant"], "bottom_bar")
        self.assertEqual([e["label"] for e in nav["overflow"] if e["active"]], ["Settings"])


if __name__ == "__main__":
    unittest.main()
