"""Weighted attendance scoring shared by every dashboard and the sheet.

A class counts fully when the student was present, 0.8 when delayed,
0.6 when late and not at all when absent. Percentages always divide by the
number of recorded marks.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence

from ..core.constants import ATTENDANCE_WEIGHTS, GOOD_ATTENDANCE_PERCENT, WARNING_ATTENDANCE_PERCENT
from ..core.enums import AttendanceBand, AttendanceStatus


def round_half_up(value: float, places: int) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class AttendanceTally:
    """Counts of each attendance status for one student, subject or sheet."""

    present: int = 0
    delayed: int = 0
    late: int = 0
    absent: int = 0

    @classmethod
    def from_statuses(cls, statuses: Iterable[AttendanceStatus]) -> "AttendanceTally":
        counts = {s: 0 for s in AttendanceStatus}
        for status in statuses:
            counts[AttendanceStatus(status)] += 1
        return cls(
            present=counts[AttendanceStatus.PRESENT],
            delayed=counts[AttendanceStatus.LATE],
            late=counts[AttendanceStatus.VERY_LATE],
            absent=counts[AttendanceStatus.ABSENT],
        )

    def __add__(self, other: "AttendanceTally") -> "AttendanceTally":
        return AttendanceTally(
            present=self.present + other.present,
            delayed=self.delayed + other.delayed,
            late=self.late + other.late,
            absent=self.absent + other.absent,
        )

    @property
    def total(self) -> int:
        return self.present + self.delayed + self.late + self.absent

    @property
    def attended(self) -> int:
        return self.present + self.delayed + self.late

    @property
    def weighted_score(self) -> float:
        return weighted_score(self)

    @property
    def percentage(self) -> float:
        return attendance_percentage(self.weighted_score, self.total)

    @property
    def band(self) -> AttendanceBand:
        return attendance_band(self.percentage)


def weighted_score(tally: AttendanceTally) -> float:
    return (
        tally.present * ATTENDANCE_WEIGHTS[AttendanceStatus.PRESENT]
        + tally.delayed * ATTENDANCE_WEIGHTS[AttendanceStatus.LATE]
        + tally.late * ATTENDANCE_WEIGHTS[AttendanceStatus.VERY_LATE]
        + tally.absent * ATTENDANCE_WEIGHTS[AttendanceStatus.ABSENT]
    )


def attendance_percentage(weighted: float, counted: int) -> float:
    """Weighted score over counted classes, as a percentage with one decimal."""
    if counted <= 0:
        return 0.0
    return round_half_up(weighted / counted * 100, 1)


def attendance_band(percentage: float) -> AttendanceBand:
    if percentage >= GOOD_ATTENDANCE_PERCENT:
        return AttendanceBand.GOOD
    if percentage >= WARNING_ATTENDANCE_PERCENT:
        return AttendanceBand.WARNING
    return AttendanceBand.CRITICAL


@dataclass(frozen=True)
class ScoredSubject:
    name: str
    tally: AttendanceTally


@dataclass(frozen=True)
class OverallStats:
    total_present: int
    total_delayed: int
    total_late: int
    total_absent: int
    total_classes: int
    overall_percentage: float
    best_subject: Optional[str]
    total_subjects: int

    def to_dict(self) -> dict:
        return {
            "totalPresent": self.total_present,
            "totalDelayedPresent": self.total_delayed,
            "totalLatePresent": self.total_late,
            "totalAbsent": self.total_absent,
            "totalClasses": self.total_classes,
            "overallPercentage": self.overall_percentage,
            "bestSubject": self.best_subject,
            "totalSubjects": self.total_subjects,
        }


def overall_stats(subjects: Sequence[ScoredSubject]) -> OverallStats:
    combined = AttendanceTally()
    for subject in subjects:
        combined = combined + subject.tally

    best: Optional[ScoredSubject] = None
    for subject in subjects:
        # first subject wins ties
        if best is None or subject.tally.percentage > best.tally.percentage:
            best = subject

    return OverallStats(
        total_present=combined.present,
        total_delayed=combined.delayed,
        total_late=combined.late,
        total_absent=combined.absent,
        total_classes=combined.total,
        overall_percentage=combined.percentage,
        best_subject=best.name if best else None,
        total_subjects=len(subjects),
    )
