"""Parsing and validation of six-field cron expressions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from itertools import chain
from typing import ClassVar, Iterable

from cronkit.timetypes import MONTHS_WITH_31, Month, TimeField

MONTH_NAMES = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN",
               "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")
DAY_NAMES = ("SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT")

_SHORTCUTS = (
    ("@yearly", "0 0 0 1 1 *"),
    ("@annually", "0 0 0 1 1 *"),
    ("@monthly", "0 0 0 1 * *"),
    ("@weekly", "0 0 0 * * 0"),
    ("@daily", "0 0 0 * * ?"),
    ("@hourly", "0 0 * * * ?"),
)

_SPLIT = re.compile(r"\s*(.*?)\s+(.*?)\s+(.*?)\s+(.*?)\s+(.*?)\s+(.*?)\s*", re.ASCII)
_NUMBER = re.compile(r"[0-9]+")
_RANGE = re.compile(r"(\d+)-(\d+)", re.ASCII)
_STEP = re.compile(r"(\d+|\*)/(\d+)", re.ASCII)


class InvalidScheduleError(ValueError):
    """Raised when a cron expression cannot be parsed or can never match."""


def has_any_in_range(values: Iterable[int], low: int, high: int) -> bool:
    """Return True if any value from ``low`` to ``high`` inclusive is in ``values``."""
    present = set(values)
    return any(v in present for v in range(low, high + 1))


def parse_field_part(text: str, field: TimeField) -> frozenset[int]:
    """Parse one comma-free part of a field: ``*``, ``?``, a number, a range or a step."""
    if text in ("*", "?"):
        # The ignore character '?' allows the full range, just like '*'.
        return frozenset(field.full_range())

    if _NUMBER.fullmatch(text):
        value = int(text)
        if not field.contains(value):
            raise InvalidScheduleError(f"{field.label} value {value} is out of range")
        return frozenset({value})

    match = _RANGE.fullmatch(text)
    if match:
        low, high = int(match[1]), int(match[2])
        if field.contains(low) and field.contains(high):
            if low <= high:
                return frozenset(range(low, high + 1))
            # A reversed range wraps around, e.g. hours 22-1 means 22, 23, 0, 1.
            return frozenset(chain(range(low, field.last + 1), range(field.first, high + 1)))

    match = _STEP.fullmatch(text)
    if match:
        start = field.first if match[1] == "*" else int(match[1])
        step = int(match[2])
        if field.contains(start) and step > 0:
            return frozenset(range(start, field.last + 1, step))

    raise InvalidScheduleError(f"invalid {field.label} specification {text!r}")


def replace_names_with_numbers(text: str, field: TimeField) -> str:
    """Replace month or weekday names in ``text`` (case-insensitively) with numbers."""
    if field is TimeField.MONTHS:
        names = MONTH_NAMES
    elif field is TimeField.DAY_OF_WEEK:
        names = DAY_NAMES
    else:
        raise ValueError(f"field {field.label} has no names")

    for value, name in enumerate(names, start=field.first):
        text = re.sub(re.escape(name), str(value), text, flags=re.IGNORECASE)
    return text


def _parse_field(text: str, field: TimeField) -> frozenset[int]:
    result: set[int] = set()
    for part in text.split(","):
        result |= parse_field_part(part, field)
    return frozenset(result)


def _check_dom_vs_dow(dom: str, dow: str) -> None:
    # Day of month and day of week are mutually exclusive: one of them must be
    # '*' or ignored with '?'.
    if dom == "?" or dow == "?" or dom == "*" or dow == "*":
        return
    raise InvalidScheduleError(
        "day of month and day of week cannot both be given; use '?' for one of them"
    )


@dataclass(frozen=True)
class CronData:
    """The allowed values of every field of a valid cron expression."""

    seconds: frozenset[int]
    minutes: frozenset[int]
    hours: frozenset[int]
    day_of_month: frozenset[int]
    months: frozenset[int]
    day_of_week: frozenset[int]

    _cache: ClassVar[dict[str, CronData]] = {}

    @classmethod
    def create(cls, cron_expression: str) -> CronData:
        """Parse ``cron_expression``, reusing an earlier result for the same text."""
        cached = cls._cache.get(cron_expression)
        if cached is None:
            cached = cls._parse(cron_expression)
            cls._cache[cron_expression] = cached
        return cached

    @classmethod
    def _parse(cls, cron_expression: str) -> CronData:
        expression = cron_expression
        for shortcut, replacement in _SHORTCUTS:
            expression = expression.replace(shortcut, replacement)

        match = _SPLIT.fullmatch(expression)
        if match is None:
            raise InvalidScheduleError(
                f"expected six fields in cron expression {cron_expression!r}"
            )
        sec, minute, hour, dom, month, dow = match.groups()

        data = cls(
            seconds=_parse_field(sec, TimeField.SECONDS),
            minutes=_parse_field(minute, TimeField.MINUTES),
            hours=_parse_field(hour, TimeField.HOURS),
            day_of_month=_parse_field(dom, TimeField.DAY_OF_MONTH),
            months=_parse_field(
                replace_names_with_numbers(month, TimeField.MONTHS), TimeField.MONTHS
            ),
            day_of_week=_parse_field(
                replace_names_with_numbers(dow, TimeField.DAY_OF_WEEK), TimeField.DAY_OF_WEEK
            ),
        )
        _check_dom_vs_dow(dom, dow)
        data._validate_date_vs_months()
        return data

    def _validate_date_vs_months(self) -> None:
        if self.months == {Month.FEBRUARY} and not has_any_in_range(self.day_of_month, 1, 29):
            raise InvalidScheduleError("no allowed day exists in February")

        last_day = TimeField.DAY_OF_MONTH.last
        if self.day_of_month == {last_day} and not (self.months & MONTHS_WITH_31):
            raise InvalidScheduleError(f"none of the allowed months has {last_day} days")

    def values(self, field: TimeField) -> frozenset[int]:
        """The allowed values of ``field``."""
        return getattr(self, field.label)