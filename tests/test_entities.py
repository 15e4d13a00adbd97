import unittest
from datetime import date

from studyflow.models.entities import Assessment, Priority, Subject, Task, TaskStatus


class EntityTests(unittest.TestCase):
    def test_task_dict_shape(self):
        task = Task("t1", "s1", "Essay", date(2026, 10, 30), Priority.LOW, TaskStatus.DONE)
        self.assertEqual(
            task.to_dict(),
            {
                "id": "t1",
                "subject_id": "s1",
                "name": "Essay",
                "date": "2026-10-30",
                "priority": "low",
                "status": "done",
            },
        )

    def test_task_from_dict_rejects_unknown_enum(self):
        data = Task("t1", "s1", "Essay", date(2026, 10, 30)).to_dict()
        data["status"] = "archived"
        with self.assertRaises(ValueError):
            Task.from_dict(data)

    def test_task_date_with_time_part(self):
        data = Task("t1", "s1", "Essay", date(2026, 10, 30)).to_dict()
        data["date"] = "2026-10-30T00:00:00"
        self.assertEqual(Task.from_dict(data).date, date(2026, 10, 30))

    def test_assessment_rejects_non_numeric(self):
        with self.assertRaises(TypeError):
            Assessment.from_dict({"name": "P1", "weight": "40", "score": None})
        with self.assertRaises(TypeError):
            Assessment.from_dict({"name": "P1", "weight": True, "score": None})

    def test_assessment_rejects_out_of_range_values(self):
        bad = [
            {"name": "P1", "weight": 1, "score": 1e30},
            {"name": "P1", "weight": 1, "score": -0.5},
            {"name": "P1", "weight": -10, "score": None},
            {"name": "P1", "weight": float("inf"), "score": None},
            {"name": "P1", "weight": 10, "score": float("nan")},
        ]
        for data in bad:
            with self.assertRaises(ValueError):
                Assessment.from_dict(data)

    def test_assessment_accepts_bounds(self):
        self.assertEqual(Assessment.from_dict({"name": "P1", "weight": 0, "score": 0}).score, 0.0)
        self.assertEqual(Assessment.from_dict({"name": "P1", "weight": 5, "score": 10}).score, 10.0)

    def test_subject_round_trip(self):
        subject = Subject("s1", "Math", "Dr. Lee", (Assessment("P1", 40, 7.5), Assessment("P2", 60)))
        self.assertEqual(Subject.from_dict(subject.to_dict()), subject)

    def test_status_toggle(self):
        self.assertIs(TaskStatus.PENDING.toggled(), TaskStatus.DONE)
        self.assertIs(TaskStatus.DONE.toggled(), TaskStatus.PENDING)


if __name__ == "__main__":
    unittest.main()
