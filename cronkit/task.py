"""Scheduled tasks and the ordered queue that holds them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager, nullcontext
from datetime import datetime, timedelta
from typing import Callable, ContextManager, Iterable, Iterator

from cronkit.cron_data import CronData
from cronkit.schedule import CronSchedule, ScheduleError, to_calendar_time

_ONE_SECOND = timedelta(seconds=1)


class TaskInformation(ABC):
    """What a running task may learn about itself."""

    @property
    @abstractmethod
    def delay(self) -> timedelta:
        """How late the latest run started compared with its planned time."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The task's name."""


TaskFunction = Callable[[TaskInformation], object]


class Task(TaskInformation):
    """A named piece of work bound to a cron schedule."""

    def __init__(self, name: str, data: CronData, work: TaskFunction) -> None:
        self._name = name
        self.schedule = CronSchedule(data)
        self._work = work
        self.next_schedule = datetime.min
        self._delay = timedelta(seconds=-1)
        self.valid = False
        self.last_run = datetime.min

    @property
    def name(self) -> str:
        return self._name

    @property
    def delay(self) -> timedelta:
        return self._delay

    def execute(self, now: datetime) -> None:
        """Run the work, recording how late it started."""
        # next_schedule still holds the planned time of this run.
        self._delay = now - self.next_schedule
        self.last_run = now
        self._work(self)

    def calculate_next(self, start: datetime) -> bool:
        """Plan the next run at or after ``start``; return False if there is none."""
        try:
            self.next_schedule = self.schedule.calculate_from(start)
        except ScheduleError:
            # A task whose next run cannot be found never expires again.
            self.valid = False
        else:
            self.valid = True
            # Make sure the task is allowed to run at its next time.
            self.last_run = self.next_schedule - _ONE_SECOND
        return self.valid

    def is_expired(self, now: datetime) -> bool:
        """True if the task is due to run at ``now``."""
        return (
            self.valid
            and now >= self.last_run
            and self.time_until_expiry(now) == timedelta(0)
        )

    def time_until_expiry(self, now: datetime) -> timedelta:
        """Time left until the next run, never negative."""
        if now >= self.next_schedule:
            return timedelta(0)
        return self.next_schedule - now

    def status(self, now: datetime) -> str:
        """A one-line description of when the task next runs."""
        millis = self.time_until_expiry(now) // timedelta(milliseconds=1)
        dt = to_calendar_time(self.next_schedule)
        return (
            f"'{self.name}' expires in {millis}ms => "
            f"{dt.year}-{dt.month}-{dt.day} {dt.hour}:{dt.minute}:{dt.second}"
        )

    def __lt__(self, other: Task) -> bool:
        return self.next_schedule < other.next_schedule

    def __repr__(self) -> str:
        return f"Task(name={self.name!r}, next_schedule={self.next_schedule!r})"


class TaskQueue:
    """Tasks ordered by their next run time, guarded by an optional lock."""

    def __init__(self, lock: ContextManager | None = None) -> None:
        self._lock = lock if lock is not None else nullcontext()
        self._tasks: list[Task] = []

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def __getitem__(self, index: int) -> Task:
        return self._tasks[index]

    def push(self, task: Task) -> None:
        """Append one task; call ``sort`` to restore the order."""
        self._tasks.append(task)

    def extend(self, tasks: Iterable[Task]) -> None:
        """Append several tasks; call ``sort`` to restore the order."""
        self._tasks.extend(tasks)

    def top(self) -> Task:
        """The task that runs first; raises IndexError when empty."""
        if not self._tasks:
            raise IndexError("top of an empty task queue")
        return self._tasks[0]

    def sort(self) -> None:
        """Order the tasks by their next run time."""
        self._tasks.sort(key=lambda task: task.next_schedule)

    def clear(self) -> None:
        """Remove every task."""
        self._tasks.clear()

    def remove(self, name: str) -> None:
        """Remove the first task called ``name``, if there is one."""
        for index, task in enumerate(self._tasks):
            if task.name == name:
                del self._tasks[index]
                return

    @contextmanager
    def locked(self) -> Iterator[TaskQueue]:
        """Hold the queue's lock for the duration of the block."""
        with self._lock:
            yield self