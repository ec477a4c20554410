"""Clocks that supply the current time to a scheduler."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class CronClock(ABC):
    """Source of the wall-clock time that schedules are matched against.

    Times are naive ``datetime`` values holding the clock's own wall time.
    """

    @abstractmethod
    def now(self) -> datetime:
        """The current time as seen by this clock."""

    @abstractmethod
    def utc_offset(self, now: datetime) -> timedelta:
        """The offset of this clock from UTC at the UTC instant ``now``."""


class UTCClock(CronClock):
    """A clock running on UTC."""

    def now(self) -> datetime:
        return _utc_now()

    def utc_offset(self, now: datetime) -> timedelta:
        return timedelta(0)


class LocalClock(CronClock):
    """A clock running on the local time zone of the machine."""

    def now(self) -> datetime:
        utc = _utc_now()
        return utc + self.utc_offset(utc)

    def utc_offset(self, now: datetime) -> timedelta:
        offset = now.replace(tzinfo=timezone.utc).astimezone().utcoffset()
        return offset if offset is not None else timedelta(0)