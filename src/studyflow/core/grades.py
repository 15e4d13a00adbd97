"""
Weighted-average grade engine.

Scores live on a 0-10 scale and each assessment carries a non-negative
weight. Everything here is a pure function of the assessment list; nothing
touches the store.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Sequence, Union

from studyflow.models.entities import MAX_SCORE, Assessment

DEFAULT_PASS_THRESHOLD = 6.0
EMPTY_DISPLAY = "—"


def round_one(value: float) -> float:
    """Round half-up to one decimal place."""
    return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def format_average(value: Optional[float]) -> str:
    if value is None:
        return EMPTY_DISPLAY
    return f"{round_one(value):.1f}"


@dataclass(frozen=True)
class Final:
    """No weight is left to grade; the projected average is the final one."""

    passed: bool

    @property
    def label(self) -> str:
        return "Passed" if self.passed else "Failed"


@dataclass(frozen=True)
class AlreadyPassed:
    @property
    def label(self) -> str:
        return "Already passed"


@dataclass(frozen=True)
class Impossible:
    @property
    def label(self) -> str:
        return "Mathematically impossible"


@dataclass(frozen=True)
class NeedsAverage:
    score: float

    @property
    def display_score(self) -> float:
        return round_one(self.score)

    @property
    def label(self) -> str:
        return f"Needs an average of {self.display_score:.1f} on the remaining assessments"


GradeStatus = Union[Final, AlreadyPassed, Impossible, NeedsAverage]


def graded_subset(assessments: Iterable[Assessment]) -> List[Assessment]:
    return [a for a in assessments if a.score is not None]


def total_weight(assessments: Iterable[Assessment]) -> float:
    return sum((a.weight for a in assessments), 0.0)


def graded_weight(assessments: Iterable[Assessment]) -> float:
    return total_weight(graded_subset(assessments))


def weighted_sum(assessments: Iterable[Assessment]) -> float:
    return sum((a.score * a.weight for a in graded_subset(assessments)), 0.0)


def current_average(assessments: Sequence[Assessment]) -> Optional[float]:
    """Weighted mean over graded assessments, None while nothing carries graded weight."""
    weight = graded_weight(assessments)
    if weight <= 0:
        return None
    return weighted_sum(assessments) / weight


def projected_average(assessments: Sequence[Assessment]) -> Optional[float]:
    """Graded points spread over the total weight, ungraded work counting as zero."""
    weight = total_weight(assessments)
    if weight <= 0:
        return None
    return weighted_sum(assessments) / weight


def grade_status(
    assessments: Sequence[Assessment],
    pass_threshold: float = DEFAULT_PASS_THRESHOLD,
) -> GradeStatus:
    total = total_weight(assessments)
    points = weighted_sum(assessments)

    if total <= 0:
        # nothing weighted yet, so the whole threshold is still ahead
        return NeedsAverage(pass_threshold)

    remaining = total - graded_weight(assessments)
    if remaining <= 0:
        return Final(passed=points / total >= pass_threshold)

    needed = (pass_threshold * total - points) / remaining
    if needed < 0:
        return AlreadyPassed()
    if needed > MAX_SCORE:
        return Impossible()
    return NeedsAverage(needed)


@dataclass(frozen=True)
class GradeSummary:
    total_weight: float
    graded_weight: float
    weighted_sum: float
    current_average: Optional[float]
    projected_average: Optional[float]
    status: GradeStatus

    @property
    def remaining_weight(self) -> float:
        return self.total_weight - self.graded_weight

    @property
    def current_display(self) -> str:
        return format_average(self.current_average)

    @property
    def projected_display(self) -> str:
        return format_average(self.projected_average)


def summarize(
    assessments: Sequence[Assessment],
    pass_threshold: float = DEFAULT_PASS_THRESHOLD,
) -> GradeSummary:
    items = list(assessments)
    return GradeSummary(
        total_weight=total_weight(items),
        graded_weight=graded_weight(items),
        weighted_sum=weighted_sum(items),
        current_average=current_average(items),
        projected_average=projected_average(items),
        status=grade_status(items, pass_threshold),
    )
