"""
Form drafts.

A draft is filled field by field from user input and only turns into an
entity through ``build()``, which validates the required fields. Fields that
have not been filled are ``None``.
"""

from dataclasses import dataclass, replace
import datetime as dt
import math
from typing import Optional, Union
import uuid

from studyflow.core.grades import MAX_SCORE
from studyflow.models.entities import (
    DEFAULT_ASSESSMENT_NAME,
    Assessment,
    Priority,
    Subject,
    Task,
    TaskStatus,
)


class FormValidationError(ValueError):
    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


def new_id() -> str:
    return str(uuid.uuid4())


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def parse_date(value: Union[dt.date, str, None]) -> Optional[dt.date]:
    if isinstance(value, dt.datetime):
        return value.date()
    if value is None or isinstance(value, dt.date):
        return value
    text = value.strip()
    if not text:
        return None
    try:
        return dt.date.fromisoformat(text[:10])
    except ValueError as exc:
        raise FormValidationError("date", "Invalid date format. Use YYYY-MM-DD.") from exc


@dataclass
class SubjectDraft:
    name: Optional[str] = None
    instructor: Optional[str] = None

    @classmethod
    def from_subject(cls, subject: Subject) -> "SubjectDraft":
        return cls(name=subject.name, instructor=subject.instructor)

    def build(self, existing: Optional[Subject] = None) -> Subject:
        """New subject, or ``existing`` with the edited name and instructor."""
        name = _clean(self.name)
        if not name:
            raise FormValidationError("name", "Subject name is required.")
        instructor = _clean(self.instructor)
        if existing is not None:
            return replace(existing, name=name, instructor=instructor)
        return Subject(id=new_id(), name=name, instructor=instructor, assessments=())


@dataclass
class TaskDraft:
    name: Optional[str] = None
    date: Union[dt.date, str, None] = None
    priority: Optional[Priority] = Priority.MEDIUM
    subject_id: Optional[str] = None

    def build(self) -> Task:
        name = _clean(self.name)
        if not name:
            raise FormValidationError("name", "Task name is required.")
        due = parse_date(self.date)
        if due is None:
            raise FormValidationError("date", "Task date is required.")
        if self.priority is None:
            raise FormValidationError("priority", "Priority is required.")
        subject_id = _clean(self.subject_id)
        if not subject_id:
            raise FormValidationError("subject_id", "Pick a subject for the task.")
        return Task(
            id=new_id(),
            subject_id=subject_id,
            name=name,
            date=due,
            priority=Priority(self.priority),
            status=TaskStatus.PENDING,
        )


def parse_weight(raw: Optional[str]) -> float:
    """Blank weight input counts as 0."""
    text = _clean(raw)
    if not text:
        return 0.0
    try:
        weight = float(text)
    except ValueError as exc:
        raise FormValidationError("weight", "Weight must be a number.") from exc
    if not math.isfinite(weight):
        raise FormValidationError("weight", "Weight must be a number.")
    if weight < 0:
        raise FormValidationError("weight", "Weight cannot be negative.")
    return weight


def parse_score(raw: Optional[str]) -> Optional[float]:
    """Blank score input means the assessment is not graded yet."""
    text = _clean(raw)
    if not text:
        return None
    try:
        score = float(text)
    except ValueError as exc:
        raise FormValidationError("score", "Score must be a number.") from exc
    if not 0 <= score <= MAX_SCORE:
        raise FormValidationError("score", f"Score must be between 0 and {MAX_SCORE:g}.")
    return score


@dataclass
class AssessmentDraft:
    name: Optional[str] = None
    weight: Optional[str] = None
    score: Optional[str] = None

    @classmethod
    def from_assessment(cls, assessment: Assessment) -> "AssessmentDraft":
        return cls(
            name=assessment.name,
            weight=f"{assessment.weight:g}",
            score=None if assessment.score is None else f"{assessment.score:g}",
        )

    def build(self) -> Assessment:
        return Assessment(
            name=_clean(self.name) or DEFAULT_ASSESSMENT_NAME,
            weight=parse_weight(self.weight),
            score=parse_score(self.score),
        )
