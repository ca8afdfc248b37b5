from __future__ import annotations

from datetime import datetime, time

import pytest

from src.staff_attendance.staff_attendance.attendance.lateness import compute_lateness
from src.staff_attendance.staff_attendance.common.datetime_utils import CivilOffset
from src.staff_attendance.staff_attendance.core.exceptions import ValidationError

from conftest import CIVIL, utc

UTC_PLUS_8 = CivilOffset(480)


def civil_instant(offset: CivilOffset, *args) -> datetime:
    return offset.to_instant(datetime(*args))


def test_within_tolerance_is_on_time():
    assert compute_lateness("09:00", 15, civil_instant(CIVIL, 2024, 3, 4, 9, 10), CIVIL) is None


def test_late_beyond_tolerance():
    assert compute_lateness("09:00", 15, civil_instant(CIVIL, 2024, 3, 4, 9, 20), CIVIL) == 5


def test_early_arrival_is_on_time():
    assert compute_lateness("09:00", 0, civil_instant(CIVIL, 2024, 3, 4, 8, 30), CIVIL) is None


def test_elapsed_minutes_are_floored():
    assert compute_lateness("09:00", 15, civil_instant(CIVIL, 2024, 3, 4, 9, 15, 59), CIVIL) is None
    assert compute_lateness("09:00", 15, civil_instant(CIVIL, 2024, 3, 4, 9, 16, 0), CIVIL) == 1


def test_resolves_against_civil_day_not_utc_day():
    # 16:50 UTC on Jan 1 is 00:50 on Jan 2 at UTC+8: early for Jan 2's 09:00 shift.
    assert compute_lateness("09:00", 15, utc(2024, 1, 1, 16, 50), UTC_PLUS_8) is None
    # 00:50 UTC on Jan 2 is 08:50 civil, still early.
    assert compute_lateness("09:00", 15, utc(2024, 1, 2, 0, 50), UTC_PLUS_8) is None


def test_shift_shortly_after_civil_midnight():
    assert compute_lateness("00:15", 0, utc(2024, 1, 1, 16, 30), UTC_PLUS_8) == 15


def test_naive_clock_in_is_read_as_utc():
    assert compute_lateness("09:00", 0, datetime(2024, 3, 4, 2, 5), CIVIL) == 5


def test_accepts_time_values():
    assert compute_lateness(time(6, 0), 15, civil_instant(CIVIL, 2024, 3, 4, 6, 20), CIVIL) == 5


def test_rejects_malformed_start():
    with pytest.raises(ValidationError):
        compute_lateness("9:00", 15, utc(2024, 1, 1, 2, 0), CIVIL)
