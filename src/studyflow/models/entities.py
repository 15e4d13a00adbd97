from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional, Tuple

DEFAULT_ASSESSMENT_NAME = "New assessment"
DEFAULT_ASSESSMENT_WEIGHT = 10.0
MAX_SCORE = 10.0


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"

    def toggled(self) -> "TaskStatus":
        return TaskStatus.DONE if self is TaskStatus.PENDING else TaskStatus.PENDING


def _number(value: Any, field_name: str) -> float:
    # bool is an int subclass and must not sneak in as a weight or score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{field_name} must be a number, got {type(value).__name__}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{field_name} must be finite, got {number!r}")
    return number


@dataclass(frozen=True)
class Assessment:
    name: str = DEFAULT_ASSESSMENT_NAME
    weight: float = DEFAULT_ASSESSMENT_WEIGHT
    score: Optional[float] = None

    @property
    def is_graded(self) -> bool:
        return self.score is not None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "weight": self.weight, "score": self.score}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Assessment":
        weight = _number(data["weight"], "weight")
        if weight < 0:
            raise ValueError(f"weight must not be negative, got {weight!r}")
        score = data.get("score")
        if score is not None:
            score = _number(score, "score")
            if not 0 <= score <= MAX_SCORE:
                raise ValueError(f"score must be between 0 and {MAX_SCORE:g}, got {score!r}")
        return cls(name=str(data["name"]), weight=weight, score=score)


@dataclass(frozen=True)
class Subject:
    id: str
    name: str
    instructor: str = ""
    assessments: Tuple[Assessment, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "instructor": self.instructor,
            "assessments": [a.to_dict() for a in self.assessments],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Subject":
        raw_assessments = data.get("assessments") or []
        if not isinstance(raw_assessments, list):
            raise TypeError("assessments must be a list")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            instructor=str(data.get("instructor") or ""),
            assessments=tuple(Assessment.from_dict(a) for a in raw_assessments),
        )


@dataclass(frozen=True)
class Task:
    id: str
    subject_id: str
    name: str
    date: date
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING

    @property
    def is_pending(self) -> bool:
        return self.status is TaskStatus.PENDING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "subject_id": self.subject_id,
            "name": self.name,
            "date": self.date.isoformat(),
            "priority": self.priority.value,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        return cls(
            id=str(data["id"]),
            subject_id=str(data["subject_id"]),
            name=str(data["name"]),
            date=date.fromisoformat(str(data["date"])[:10]),
            priority=Priority(data.get("priority", Priority.MEDIUM.value)),
            status=TaskStatus(data.get("status", TaskStatus.PENDING.value)),
        )
