from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """One clock-in/clock-out pair. Timestamps are aware UTC instants."""

    attendance_id: int
    staff_id: int
    schedule_id: Optional[int]
    clock_in_at: datetime
    shift_start_time: str
    late_minutes: Optional[int]
    clock_in_lat: float
    clock_in_lon: float
    clock_in_photo: str
    clock_out_at: Optional[datetime] = None
    clock_out_lat: Optional[float] = None
    clock_out_lon: Optional[float] = None
    clock_out_photo: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.clock_out_at is None

    @property
    def is_late(self) -> bool:
        return self.late_minutes is not None
