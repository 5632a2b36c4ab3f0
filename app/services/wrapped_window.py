"""Time windows shared by every wrapped reducer.

All bounds are UTC. The full-year window is inclusive on both ends; the
last-minute window (Dec 18 up to, but not including, Dec 26) is half-open.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Optional

from app.core.exceptions import InvalidInputError
from app.core.parsing import as_utc

MIN_YEAR = 1
MAX_YEAR = 9999

LAST_MINUTE_START_DAY = 18
LAST_MINUTE_END_DAY = 26  # exclusive

# Millisecond precision end-of-day, matching the stored timestamp contract
END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime
    end_inclusive: bool = True

    @classmethod
    def for_day(cls, day: date) -> "TimeWindow":
        """Inclusive window covering a single UTC calendar day."""
        return cls(
            start=datetime.combine(day, time.min, tzinfo=timezone.utc),
            end=datetime.combine(day, END_OF_DAY, tzinfo=timezone.utc),
            end_inclusive=True,
        )

    def contains(self, moment: Optional[datetime]) -> bool:
        if moment is None:
            return False
        moment = as_utc(moment)
        if moment < self.start:
            return False
        if self.end_inclusive:
            return moment <= self.end
        return moment < self.end


@dataclass(frozen=True)
class WrappedWindows:
    year: int
    full_year: TimeWindow
    last_minute: TimeWindow


def resolve_year(year: Any = None) -> int:
    """Validate a year argument, defaulting to the current UTC year."""
    if year is None:
        return datetime.now(timezone.utc).year

    if isinstance(year, bool):
        raise InvalidInputError("Year must be numeric", {"year": year})

    if isinstance(year, str):
        candidate = year.strip()
        try:
            year = int(candidate) if candidate.lstrip("-").isdecimal() else None
        except ValueError:
            year = None
        if year is None:
            raise InvalidInputError("Year must be numeric", {"year": candidate})

    if not isinstance(year, int):
        raise InvalidInputError("Year must be numeric", {"year": year})

    if year < MIN_YEAR or year > MAX_YEAR:
        raise InvalidInputError(
            f"Year must be between {MIN_YEAR} and {MAX_YEAR}", {"year": year}
        )
    return year


def resolve_windows(year: Any = None) -> WrappedWindows:
    """Compute the full-year and last-minute windows for a year."""
    year = resolve_year(year)

    full_year = TimeWindow(
        start=datetime(year, 1, 1, tzinfo=timezone.utc),
        end=datetime.combine(date(year, 12, 31), END_OF_DAY, tzinfo=timezone.utc),
        end_inclusive=True,
    )
    last_minute = TimeWindow(
        start=datetime(year, 12, LAST_MINUTE_START_DAY, tzinfo=timezone.utc),
        end=datetime(year, 12, LAST_MINUTE_END_DAY, tzinfo=timezone.utc),
        end_inclusive=False,
    )
    return WrappedWindows(year=year, full_year=full_year, last_minute=last_minute)
