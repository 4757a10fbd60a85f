from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

from ..core.constants import DEFAULT_LATE_GRACE_MINUTES
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


@dataclass(frozen=True)
class CheckInStatusPolicy:
    """Decide present vs late from the school start time plus a grace period.

    Without a start time every admitted check-in counts as present.
    """

    start_time: Optional[time] = None
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES

    def decide(self, now: datetime) -> StatusDecision:
        if self.start_time is None:
            return StatusDecision(status=AttendanceStatus.PRESENT)

        start = datetime.combine(now.date(), self.start_time)
        if now <= start + timedelta(minutes=self.grace_minutes):
            return StatusDecision(status=AttendanceStatus.PRESENT)

        late_minutes = int((now - start).total_seconds() // 60)
        return StatusDecision(status=AttendanceStatus.LATE, note=f"Late by {late_minutes} min")
