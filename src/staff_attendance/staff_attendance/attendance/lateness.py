from __future__ import annotations

import math
from datetime import datetime, time
from typing import Optional, Union

from ..common.datetime_utils import CivilOffset, as_utc, parse_wall_clock


def compute_lateness(
    scheduled_start: Union[str, time],
    tolerance_minutes: int,
    clock_in_at: datetime,
    offset: CivilOffset,
) -> Optional[int]:
    """Minutes late beyond the tolerance window, or None when on time.

    The scheduled start is anchored to the civil calendar day the clock-in
    falls on, so the result does not depend on the process timezone.
    Elapsed time is floored to whole minutes; early arrivals are on time.
    """
    start = parse_wall_clock(scheduled_start, "Shift start time")

    civil_clock_in = offset.to_civil(clock_in_at)
    scheduled_at = offset.to_instant(datetime.combine(civil_clock_in.date(), start))

    elapsed = math.floor((as_utc(clock_in_at) - scheduled_at).total_seconds() / 60)
    if elapsed <= int(tolerance_minutes):
        return None
    return elapsed - int(tolerance_minutes)
