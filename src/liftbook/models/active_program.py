"""Active program tracking model."""

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta

from .program import DurationUnit


def add_months(start: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the end of the target month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def compute_end_date(
    start: datetime, duration: int | None, unit: str | None
) -> datetime | None:
    """Work out when a program started at ``start`` finishes.

    Args:
        start: When the program was activated
        duration: Program length; missing means zero
        unit: "days", "weeks" or "months"; anything else counts as days

    Returns:
        The end timestamp, or None when it falls outside the supported
        date range
    """
    amount = duration or 0
    parsed = DurationUnit.parse(unit)
    try:
        if parsed is DurationUnit.WEEKS:
            return start + timedelta(days=amount * 7)
        if parsed is DurationUnit.MONTHS:
            return add_months(start, amount)
        return start + timedelta(days=amount)
    except (OverflowError, ValueError):
        # Past the calendar's range; treat the program as open-ended
        return None


@dataclass
class ActiveProgram:
    """Marks which program a user is currently running."""

    user_id: int
    program_id: int
    start_date: datetime
    end_date: datetime | None = None
    is_active: bool = True
    id: int | None = None

    @classmethod
    def start(
        cls,
        user_id: int,
        program_id: int,
        duration: int | None,
        duration_unit: str | None,
        now: datetime | None = None,
    ) -> "ActiveProgram":
        """Create an active-program record starting now."""
        start_date = now or datetime.now()
        return cls(
            user_id=user_id,
            program_id=program_id,
            start_date=start_date,
            end_date=compute_end_date(start_date, duration, duration_unit),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "program_id": self.program_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "is_active": self.is_active,
        }
