from __future__ import annotations

import pytest

from campus_attendance.attendance.scoring import (
    AttendanceTally,
    ScoredSubject,
    attendance_band,
    attendance_percentage,
    overall_stats,
    round_half_up,
)
from campus_attendance.core.enums import AttendanceBand, AttendanceStatus


def test_weighted_score_uses_status_weights():
    tally = AttendanceTally(present=2, delayed=1, late=1, absent=3)
    assert tally.total == 7
    assert tally.attended == 4
    assert tally.weighted_score == pytest.approx(2 + 0.8 + 0.6)


def test_tally_from_statuses():
    tally = AttendanceTally.from_statuses(
        [AttendanceStatus.PRESENT] * 18 + [AttendanceStatus.LATE, AttendanceStatus.ABSENT]
    )
    assert tally == AttendanceTally(present=18, delayed=1, late=0, absent=1)
    assert tally.percentage == 94.0
    assert tally.band == AttendanceBand.GOOD


def test_percentage_is_zero_without_classes():
    assert attendance_percentage(0.0, 0) == 0.0
    assert AttendanceTally().percentage == 0.0
    assert AttendanceTally().band == AttendanceBand.CRITICAL


def test_percentage_rounds_to_one_decimal():
    # 2 present + 1 late out of 3 -> 86.666...
    assert AttendanceTally(present=2, late=1).percentage == 86.7
    assert attendance_percentage(1, 3) == 33.3


def test_round_half_up():
    assert round_half_up(0.25, 1) == 0.3
    assert round_half_up(18.805, 2) == 18.81
    assert round_half_up(93.99999999999999, 1) == 94.0


@pytest.mark.parametrize(
    "percentage,band",
    [
        (100.0, AttendanceBand.GOOD),
        (80.0, AttendanceBand.GOOD),
        (79.9, AttendanceBand.WARNING),
        (70.0, AttendanceBand.WARNING),
        (69.9, AttendanceBand.CRITICAL),
        (0.0, AttendanceBand.CRITICAL),
    ],
)
def test_band_thresholds(percentage, band):
    assert attendance_band(percentage) == band


def test_overall_stats_combines_subjects_and_picks_best():
    stats = overall_stats(
        [
            ScoredSubject("OS", AttendanceTally(present=8, absent=2)),
            ScoredSubject("DBMS", AttendanceTally(present=9, delayed=1)),
            ScoredSubject("CN", AttendanceTally(present=9, delayed=1)),
        ]
    )

    assert stats.total_present == 26
    assert stats.total_delayed == 2
    assert stats.total_absent == 2
    assert stats.total_classes == 30
    assert stats.overall_percentage == round_half_up((26 + 1.6) / 30 * 100, 1)
    assert stats.best_subject == "DBMS"
    assert stats.total_subjects == 3


def test_overall_stats_without_subjects():
    stats = overall_stats([])
    assert stats.best_subject is None
    assert stats.overall_percentage == 0.0
    assert stats.to_dict()["totalSubjects"] == 0
