import unittest
from datetime import date, datetime

from studyflow.core.forms import (
    AssessmentDraft,
    FormValidationError,
    SubjectDraft,
    TaskDraft,
    parse_date,
    parse_score,
    parse_weight,
)
from studyflow.models.entities import Assessment, Priority, Subject, TaskStatus


class SubjectDraftTests(unittest.TestCase):
    def test_build_new_subject(self):
        subject = SubjectDraft(name="  Physics ", instructor=" Dr. Ruiz ").build()
        self.assertEqual(subject.name, "Physics")
        self.assertEqual(subject.instructor, "Dr. Ruiz")
        self.assertEqual(subject.assessments, ())
        self.assertTrue(subject.id)

    def test_ids_are_unique(self):
        first = SubjectDraft(name="A").build()
        second = SubjectDraft(name="A").build()
        self.assertNotEqual(first.id, second.id)

    def test_name_required(self):
        with self.assertRaises(FormValidationError) as ctx:
            SubjectDraft(name="   ").build()
        self.assertEqual(ctx.exception.field, "name")

    def test_edit_keeps_id_and_assessments(self):
        existing = Subject("s1", "Math", "Old", (Assessment("P1", 50, 8.0),))
        edited = SubjectDraft(name="Maths", instructor=None).build(existing)
        self.assertEqual(edited.id, "s1")
        self.assertEqual(edited.name, "Maths")
        self.assertEqual(edited.instructor, "")
        self.assertEqual(edited.assessments, existing.assessments)


class TaskDraftTests(unittest.TestCase):
    def test_build_pending_task(self):
        task = TaskDraft(name="Essay", date="2026-10-30", priority=Priority.HIGH, subject_id="s1").build()
        self.assertEqual(task.date, date(2026, 10, 30))
        self.assertEqual(task.status, TaskStatus.PENDING)
        self.assertEqual(task.priority, Priority.HIGH)
        self.assertEqual(task.subject_id, "s1")

    def test_default_priority_is_medium(self):
        task = TaskDraft(name="Essay", date=date(2026, 10, 30), subject_id="s1").build()
        self.assertEqual(task.priority, Priority.MEDIUM)

    def test_required_fields(self):
        cases = [
            (TaskDraft(date="2026-10-30", subject_id="s1"), "name"),
            (TaskDraft(name="Essay", subject_id="s1"), "date"),
            (TaskDraft(name="Essay", date="", subject_id="s1"), "date"),
            (TaskDraft(name="Essay", date="2026-10-30", priority=None, subject_id="s1"), "priority"),
            (TaskDraft(name="Essay", date="2026-10-30"), "subject_id"),
        ]
        for draft, field in cases:
            with self.assertRaises(FormValidationError) as ctx:
                draft.build()
            self.assertEqual(ctx.exception.field, field)

    def test_bad_date(self):
        with self.assertRaises(FormValidationError):
            TaskDraft(name="Essay", date="30/10/2026", subject_id="s1").build()

    def test_datetime_is_reduced_to_date(self):
        self.assertEqual(parse_date(datetime(2026, 10, 30, 9, 15)), date(2026, 10, 30))


class AssessmentDraftTests(unittest.TestCase):
    def test_defaults_for_new_assessment(self):
        draft = AssessmentDraft.from_assessment(Assessment())
        self.assertEqual(draft.weight, "10")
        self.assertIsNone(draft.score)
        self.assertEqual(draft.build(), Assessment("New assessment", 10.0, None))

    def test_parse_weight(self):
        self.assertEqual(parse_weight(""), 0.0)
        self.assertEqual(parse_weight("12.5"), 12.5)
        for raw in ("-1", "abc", "inf"):
            with self.assertRaises(FormValidationError):
                parse_weight(raw)

    def test_parse_score(self):
        self.assertIsNone(parse_score("  "))
        self.assertEqual(parse_score("0"), 0.0)
        self.assertEqual(parse_score("10"), 10.0)
        for raw in ("10.1", "-0.5", "nan", "x"):
            with self.assertRaises(FormValidationError):
                parse_score(raw)

    def test_blank_name_gets_placeholder(self):
        self.assertEqual(AssessmentDraft(name="", weight="20", score="7").build().name, "New assessment")


if __name__ == "__main__":
    unittest.main()
