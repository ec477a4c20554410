"""Calendar fields understood by cron expressions, and a plain date-time record."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class TimeField(Enum):
    """A field of a cron expression together with its inclusive limits."""

    SECONDS = ("seconds", 0, 59)
    MINUTES = ("minutes", 0, 59)
    HOURS = ("hours", 0, 23)
    DAY_OF_MONTH = ("day_of_month", 1, 31)
    MONTHS = ("months", 1, 12)
    # Sunday is 0, Saturday is 6.
    DAY_OF_WEEK = ("day_of_week", 0, 6)

    def __init__(self, label: str, first: int, last: int) -> None:
        self.label = label
        self.first = first
        self.last = last

    def contains(self, value: int) -> bool:
        """Return True if ``value`` lies within this field's limits."""
        return self.first <= value <= self.last

    def full_range(self) -> range:
        """Every value this field may take, in ascending order."""
        return range(self.first, self.last + 1)


class Month(IntEnum):
    """Months of the year, numbered from 1."""

    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12


MONTHS_WITH_31 = frozenset(
    {
        Month.JANUARY,
        Month.MARCH,
        Month.MAY,
        Month.JULY,
        Month.AUGUST,
        Month.OCTOBER,
        Month.DECEMBER,
    }
)


@dataclass(frozen=True, order=True)
class DateTime:
    """Calendar components of a point in time."""

    year: int = 0
    month: int = 0
    day: int = 0
    hour: int = 0
    minute: int = 0
    second: int = 0