"""Turning cron expressions with random ranges, R(low-high), into fixed ones."""

from __future__ import annotations

import random
import re

from cronkit.cron_data import InvalidScheduleError, parse_field_part, replace_names_with_numbers
from cronkit.timetypes import MONTHS_WITH_31, Month, TimeField

_SPLIT = re.compile(r"\s*(.*?)\s+(.*?)\s+(.*?)\s+(.*?)\s+(.*?)\s+(.*?)\s*")
_RANDOM = re.compile(r"[rR]\((\d+)-(\d+)\)")


def _cap(value: int, lower: int, upper: int) -> int:
    return max(min(value, upper), lower)


def _day_limiter(months: frozenset[int]) -> tuple[int, int]:
    high = TimeField.DAY_OF_MONTH.last
    for month in months:
        if month == Month.FEBRUARY:
            # Limit to 29, possibly delaying the schedule until a leap year.
            high = min(high, 29)
        elif month not in MONTHS_WITH_31:
            high = min(high, 30)
    return TimeField.DAY_OF_MONTH.first, high


class CronRandomization:
    """Replaces every ``R(low-high)`` field of a schedule with one random value."""

    def __init__(self, seed: int | None = None) -> None:
        self._random = random.Random(seed)

    def parse(self, cron_schedule: str) -> str:
        """Return ``cron_schedule`` with its random fields fixed.

        Raises InvalidScheduleError if a random range cannot be resolved.
        """
        match = _SPLIT.fullmatch(cron_schedule)
        if match is None:
            raise InvalidScheduleError(
                f"expected six fields in cron expression {cron_schedule!r}"
            )
        sec, minute, hour, dom, month, dow = match.groups()
        month = replace_names_with_numbers(month, TimeField.MONTHS)
        dow = replace_names_with_numbers(dow, TimeField.DAY_OF_WEEK)

        sec_text, _ = self._random_in_range(sec, TimeField.SECONDS)
        minute_text, _ = self._random_in_range(minute, TimeField.MINUTES)
        hour_text, _ = self._random_in_range(hour, TimeField.HOURS)

        # Months come before the day of month so the day can be capped.
        month_text, selected_month = self._random_in_range(month, TimeField.MONTHS)
        if selected_month is None:
            month_range = parse_field_part(month, TimeField.MONTHS)
        else:
            month_range = frozenset({selected_month})

        dom_text, _ = self._random_in_range(
            dom, TimeField.DAY_OF_MONTH, _day_limiter(month_range)
        )
        dow_text, _ = self._random_in_range(dow, TimeField.DAY_OF_WEEK)

        return " ".join((sec_text, minute_text, hour_text, dom_text, month_text, dow_text))

    def _random_in_range(
        self,
        section: str,
        field: TimeField,
        limit: tuple[int, int] | None = None,
    ) -> tuple[str, int | None]:
        match = _RANDOM.fullmatch(section)
        if match is None:
            return section, None

        left, right = int(match[1]), int(match[2])
        if limit is not None:
            left = _cap(left, *limit)
            right = _cap(right, *limit)

        values = parse_field_part(f"{left}-{right}", field)
        if limit is not None:
            low, high = limit
            values = frozenset(v for v in values if low <= v <= high)

        selected = self._random.choice(sorted(values))
        return str(selected), selected