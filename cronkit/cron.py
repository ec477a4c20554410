"""A scheduler that runs named tasks according to cron expressions."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta
from typing import Mapping

from cronkit.clock import CronClock, LocalClock
from cronkit.cron_data import CronData, InvalidScheduleError
from cronkit.task import Task, TaskFunction, TaskQueue

_ONE_SECOND = timedelta(seconds=1)
_THREE_HOURS = timedelta(hours=3)


class Cron:
    """Holds scheduled tasks and runs those that are due on each tick.

    ``tick`` is expected to be called at least once a second so that no
    scheduled run is missed.
    """

    def __init__(self, clock: CronClock | None = None, thread_safe: bool = False) -> None:
        self.clock = clock if clock is not None else LocalClock()
        self._tasks = TaskQueue(threading.RLock() if thread_safe else None)
        self._last_tick: datetime | None = None

    def add_schedule(self, name: str, schedule: str, work: TaskFunction) -> None:
        """Schedule ``work`` under ``name``; raise InvalidScheduleError for a bad schedule.

        A valid schedule that never matches any future time is not added.
        """
        data = CronData.create(schedule)
        with self._tasks.locked() as tasks:
            task = Task(name, data, work)
            if task.calculate_next(self.clock.now()):
                tasks.push(task)
                tasks.sort()

    def add_schedules(self, schedules: Mapping[str, str], work: TaskFunction) -> None:
        """Schedule ``work`` under every name in ``schedules``, or under none at all.

        Raises InvalidScheduleError naming the first invalid entry.
        """
        to_add: list[Task] = []
        for name, schedule in schedules.items():
            try:
                data = CronData.create(schedule)
            except InvalidScheduleError as exc:
                raise InvalidScheduleError(
                    f"invalid schedule {schedule!r} for task {name!r}: {exc}"
                ) from exc
            task = Task(name, data, work)
            if task.calculate_next(self.clock.now()):
                to_add.append(task)

        if to_add:
            with self._tasks.locked() as tasks:
                tasks.extend(to_add)
                tasks.sort()

    def clear_schedules(self) -> None:
        """Remove every task."""
        with self._tasks.locked() as tasks:
            tasks.clear()

    def remove_schedule(self, name: str) -> None:
        """Remove the task called ``name``, if there is one."""
        with self._tasks.locked() as tasks:
            tasks.remove(name)

    def count(self) -> int:
        """The number of scheduled tasks."""
        with self._tasks.locked() as tasks:
            return len(tasks)

    def tick(self, now: datetime | None = None) -> int:
        """Run every task that is due at ``now`` (default: the clock's time).

        Returns the number of tasks that ran.
        """
        if now is None:
            now = self.clock.now()

        with self._tasks.locked() as tasks:
            if self._last_tick is not None:
                diff = abs(now - self._last_tick)
                if diff < _ONE_SECOND:
                    # Time only flows once at least a second has passed, either way.
                    now = self._last_tick
                elif diff >= _THREE_HOURS:
                    # Changes of three hours or more are clock or time-zone
                    # corrections: the new time is used immediately.
                    for task in tasks:
                        task.calculate_next(now)
                # Smaller changes keep the planned times: moving back does not run
                # tasks twice, moving forward runs what became due in between.

            self._last_tick = now

            executed = 0
            for task in list(tasks):
                if task.is_expired(now):
                    task.execute(now)
                    if not task.calculate_next(now + _ONE_SECOND):
                        tasks.remove(task.name)
                    executed += 1

            if executed:
                tasks.sort()
            return executed

    def time_until_next(self) -> timedelta:
        """Time until the first task is due; ``timedelta.max`` when there is none."""
        with self._tasks.locked() as tasks:
            if not len(tasks):
                return timedelta.max
            return tasks.top().time_until_expiry(self.clock.now())

    def recalculate_schedule(self) -> None:
        """Plan every task afresh, strictly after the current time."""
        with self._tasks.locked() as tasks:
            start = self.clock.now() + _ONE_SECOND
            for task in tasks:
                task.calculate_next(start)
            tasks.sort()

    def time_until_expiry_for_tasks(self) -> list[tuple[str, timedelta]]:
        """Each task's name with the time left until it is due, in run order."""
        with self._tasks.locked() as tasks:
            now = self.clock.now()
            return [(task.name, task.time_until_expiry(now)) for task in tasks]

    def __str__(self) -> str:
        with self._tasks.locked() as tasks:
            return "".join(f"{task.status(self.clock.now())}\n" for task in tasks)