import unittest
from datetime import date, timedelta

from fastapi.testclient import TestClient

from studyflow.api import app, get_auth, get_store
from studyflow.services.auth_service import LocalAuthService
from studyflow.services.storage import MemoryStorage, StorageError
from studyflow.state.app_state import Store


class BrokenStorage(MemoryStorage):
    def write(self, key, value):
        raise StorageError("read-only volume")


class ApiTestCase(unittest.TestCase):
    storage_class = MemoryStorage

    def setUp(self):
        self.storage = self.storage_class()
        self.store = Store(self.storage)
        app.dependency_overrides[get_store] = lambda: self.store
        app.dependency_overrides[get_auth] = lambda: LocalAuthService("admin", "admin")
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def login(self):
        res = self.client.post("/auth/login", json={"username": "admin", "password": "admin"})
        self.assertEqual(res.status_code, 200)

    def create_subject(self, name="Math"):
        res = self.client.post("/subjects", json={"name": name, "instructor": "Dr. Lee"})
        self.assertEqual(res.status_code, 201)
        return res.json()["id"]

    def create_task(self, subject_id, name="Essay", day=None):
        day = day or date.today()
        res = self.client.post(
            "/tasks",
            json={"subject_id": subject_id, "name": name, "date": day.isoformat(), "priority": "high"},
        )
        self.assertEqual(res.status_code, 201)
        return res.json()["id"]


class AuthApiTests(ApiTestCase):
    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})

    def test_protected_routes_require_session(self):
        for path in ("/subjects", "/tasks", "/dashboard", "/session", "/calendar/2026/10"):
            self.assertEqual(self.client.get(path).status_code, 401)

    def test_wrong_credentials_leave_state_unchanged(self):
        res = self.client.post("/auth/login", json={"username": "admin", "password": "x"})
        self.assertEqual(res.status_code, 401)
        self.assertIsNone(self.store.session)

    def test_login_then_logout(self):
        self.login()
        self.assertEqual(self.client.get("/session").json()["username"], "admin")
        self.client.post("/auth/logout")
        self.assertEqual(self.client.get("/session").status_code, 401)


class SubjectApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.login()

    def test_create_and_list(self):
        subject_id = self.create_subject()
        subjects = self.client.get("/subjects").json()
        self.assertEqual([s["id"] for s in subjects], [subject_id])
        self.assertEqual(subjects[0]["current_display"], "—")

    def test_blank_name_rejected(self):
        res = self.client.post("/subjects", json={"name": "  "})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(self.store.subjects, ())

    def test_update_and_missing(self):
        subject_id = self.create_subject()
        res = self.client.put(f"/subjects/{subject_id}", json={"name": "Calculus", "instructor": ""})
        self.assertEqual(res.json()["name"], "Calculus")
        self.assertEqual(self.client.put("/subjects/nope", json={"name": "X"}).status_code, 404)

    def test_save_assessments_returns_grades(self):
        subject_id = self.create_subject()
        res = self.client.put(
            f"/subjects/{subject_id}/assessments",
            json=[
                {"name": "P1", "weight": 40, "score": 7},
                {"name": "P2", "weight": 60, "score": None},
            ],
        )
        self.assertEqual(res.status_code, 200)
        grades = res.json()
        self.assertEqual(grades["status"], "NeedsAverage")
        self.assertEqual(grades["needed_average"], 5.3)
        self.assertEqual(grades["current_display"], "7.0")
        self.assertEqual(len(self.store.get_subject(subject_id).assessments), 2)

    def test_out_of_range_score_rejected(self):
        subject_id = self.create_subject()
        res = self.client.put(
            f"/subjects/{subject_id}/assessments",
            json=[{"name": "P1", "weight": 40, "score": 11}],
        )
        self.assertEqual(res.status_code, 422)

    def test_final_grades(self):
        subject_id = self.create_subject()
        self.client.put(
            f"/subjects/{subject_id}/assessments",
            json=[{"name": "P1", "weight": 50, "score": 3}, {"name": "P2", "weight": 50, "score": 4}],
        )
        grades = self.client.get(f"/subjects/{subject_id}/grades").json()
        self.assertEqual(grades["status"], "Final")
        self.assertFalse(grades["passed"])
        self.assertEqual(grades["projected_display"], "3.5")

    def test_delete_cascades(self):
        keep = self.create_subject("History")
        drop = self.create_subject("Math")
        self.create_task(drop)
        kept_task = self.create_task(keep)
        self.assertEqual(self.client.delete(f"/subjects/{drop}").status_code, 200)
        tasks = self.client.get("/tasks").json()
        self.assertEqual([t["id"] for t in tasks], [kept_task])


class TaskApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.login()
        self.math = self.create_subject("Math")
        self.bio = self.create_subject("Biology")

    def test_task_needs_existing_subject(self):
        res = self.client.post("/tasks", json={"subject_id": "ghost", "name": "x", "date": "2026-10-30"})
        self.assertEqual(res.status_code, 404)

    def test_filter_by_status_and_subject(self):
        t1 = self.create_task(self.math, "a")
        t2 = self.create_task(self.math, "b")
        self.create_task(self.bio, "c")
        self.client.patch(f"/tasks/{t2}/toggle")

        res = self.client.get("/tasks", params={"status": "pending", "subject_id": self.math})
        self.assertEqual([t["id"] for t in res.json()], [t1])
        done = self.client.get("/tasks", params={"status": "done"}).json()
        self.assertEqual([t["id"] for t in done], [t2])
        self.assertEqual(done[0]["subject_name"], "Math")

    def test_update_and_delete(self):
        task_id = self.create_task(self.math)
        res = self.client.put(
            f"/tasks/{task_id}",
            json={"subject_id": self.bio, "name": "Lab report", "date": "2026-11-02",
                  "priority": "low", "status": "done"},
        )
        self.assertEqual(res.json()["subject_name"], "Biology")
        self.assertEqual(res.json()["status"], "done")
        self.assertEqual(self.client.delete(f"/tasks/{task_id}").status_code, 200)
        self.assertEqual(self.client.delete(f"/tasks/{task_id}").status_code, 404)

    def test_dashboard_and_calendar(self):
        today = date.today()
        self.create_task(self.math, "today", today)
        dashboard = self.client.get("/dashboard").json()
        self.assertEqual([t["name"] for t in dashboard["today"]], ["today"])
        self.assertEqual(dashboard["pending_total"], 1)
        self.assertEqual(dashboard["subject_count"], 2)

        calendar = self.client.get(f"/calendar/{today.year}/{today.month}").json()
        cell = calendar["days"][today.day - 1]
        self.assertEqual(cell["date"], today.isoformat())
        self.assertEqual([t["name"] for t in cell["tasks"]], ["today"])
        self.assertEqual(self.client.get("/calendar/2026/13").status_code, 400)

    def test_past_tasks_not_upcoming(self):
        self.create_task(self.math, "yesterday", date.today() - timedelta(days=1))
        self.assertEqual(self.client.get("/dashboard").json()["upcoming"], [])


class PersistenceFailureApiTests(ApiTestCase):
    storage_class = BrokenStorage

    def test_failed_save_is_surfaced(self):
        res = self.client.post("/auth/login", json={"username": "admin", "password": "admin"})
        self.assertEqual(res.status_code, 503)
        self.assertIn("read-only volume", res.json()["detail"])


if __name__ == "__main__":
    unittest.main()
