"""Finding the next point in time that a cron expression allows."""

from __future__ import annotations

from datetime import datetime, timedelta

from cronkit.cron_data import CronData
from cronkit.timetypes import DateTime, TimeField

_MAX_ITERATIONS = 100_000


class ScheduleError(RuntimeError):
    """Raised when no matching point in time can be found."""


def to_calendar_time(time: datetime) -> DateTime:
    """Split ``time`` into its calendar components, dropping fractions of a second."""
    return DateTime(time.year, time.month, time.day, time.hour, time.minute, time.second)


def _start_of_day(time: datetime) -> datetime:
    return time.replace(hour=0, minute=0, second=0, microsecond=0)


def _start_of_next_month(time: datetime) -> datetime:
    if time.month == 12:
        return _start_of_day(time.replace(year=time.year + 1, month=1, day=1))
    return _start_of_day(time.replace(month=time.month + 1, day=1))


class CronSchedule:
    """Calculates run times for a parsed cron expression."""

    def __init__(self, data: CronData) -> None:
        self.data = data

    def calculate_from(self, start: datetime) -> datetime:
        """The first allowed time at or after ``start``, floored to whole seconds."""
        data = self.data
        # When every day of the month is allowed (or ignored with '?'),
        # the day of week decides.
        use_day_of_week = len(data.day_of_month) == TimeField.DAY_OF_MONTH.last
        curr = start

        try:
            for _ in range(_MAX_ITERATIONS):
                if curr.month not in data.months:
                    curr = _start_of_next_month(curr)
                    continue

                if use_day_of_week:
                    day_allowed = curr.isoweekday() % 7 in data.day_of_week
                else:
                    day_allowed = curr.day in data.day_of_month
                if not day_allowed:
                    curr = _start_of_day(curr) + timedelta(days=1)
                    continue

                if curr.hour not in data.hours:
                    curr += timedelta(hours=1) - timedelta(minutes=curr.minute, seconds=curr.second)
                elif curr.minute not in data.minutes:
                    curr += timedelta(minutes=1) - timedelta(seconds=curr.second)
                elif curr.second not in data.seconds:
                    curr += timedelta(seconds=1)
                else:
                    return curr.replace(microsecond=0)
        except (OverflowError, ValueError) as exc:
            raise ScheduleError(f"no run time found after {start}") from exc

        raise ScheduleError(f"no run time found after {start}")