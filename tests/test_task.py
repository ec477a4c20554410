import threading
from datetime import datetime, timedelta

import pytest

from cronkit.cron_data import CronData
from cronkit.schedule import CronSchedule
from cronkit.task import Task, TaskInformation, TaskQueue

START = datetime(2018, 3, 1, 11, 59, 58)


def make_task(name="job", schedule="0 0 12 * * ?", work=None):
    return Task(name, CronData.create(schedule), work or (lambda info: None))


def impossible_data():
    everything = frozenset(range(60))
    return CronData(
        seconds=everything,
        minutes=everything,
        hours=frozenset(range(24)),
        day_of_month=frozenset({31}),
        months=frozenset({2}),
        day_of_week=frozenset(range(7)),
    )


def test_calculate_next_matches_schedule():
    task = make_task()
    assert task.calculate_next(START) is True
    expected = CronSchedule(CronData.create("0 0 12 * * ?")).calculate_from(START)
    assert task.next_schedule == expected
    assert task.last_run == task.next_schedule - timedelta(seconds=1)


def test_calculate_next_fails_for_unreachable_schedule():
    task = Task("never", impossible_data(), lambda info: None)
    assert task.calculate_next(START) is False
    assert task.valid is False
    assert task.is_expired(START) is False


def test_not_expired_before_calculation():
    task = make_task()
    assert task.is_expired(datetime(2030, 1, 1)) is False


def test_time_until_expiry_before_and_after():
    task = make_task()
    task.calculate_next(START)
    before = task.next_schedule - timedelta(seconds=5)
    assert task.time_until_expiry(before) == timedelta(seconds=5)
    assert task.time_until_expiry(task.next_schedule + timedelta(hours=1)) == timedelta(0)


def test_is_expired_at_schedule_time_only():
    task = make_task()
    task.calculate_next(START)
    assert task.is_expired(task.next_schedule) is True
    assert task.is_expired(task.next_schedule - timedelta(seconds=1)) is False


def test_execute_records_delay_and_calls_work():
    seen = []
    task = make_task(work=lambda info: seen.append((info.name, info.delay)))
    assert task.delay == timedelta(seconds=-1)
    task.calculate_next(START)
    late = task.next_schedule + timedelta(seconds=3)
    task.execute(late)
    assert seen == [("job", timedelta(seconds=3))]
    assert task.last_run == late


def test_not_expired_again_after_running_in_the_past():
    task = make_task()
    task.calculate_next(START)
    run_time = task.next_schedule + timedelta(seconds=10)
    task.execute(run_time)
    assert task.is_expired(run_time - timedelta(seconds=1)) is False


def test_status_format():
    task = make_task()
    task.calculate_next(START)
    now = task.next_schedule - timedelta(milliseconds=1500)
    assert task.status(now) == "'job' expires in 1500ms => 2018-3-1 12:0:0"


def test_tasks_order_by_next_schedule():
    early = make_task("early", "0 0 12 * * ?")
    late = make_task("late", "0 0 13 * * ?")
    early.calculate_next(START)
    late.calculate_next(START)
    assert early < late
    assert not late < early


def test_task_information_is_abstract():
    with pytest.raises(TypeError):
        TaskInformation()


def scheduled(name, schedule):
    task = make_task(name, schedule)
    task.calculate_next(START)
    return task


def test_queue_sorts_and_tops():
    queue = TaskQueue()
    queue.push(scheduled("c", "0 0 14 * * ?"))
    queue.extend([scheduled("a", "0 0 12 * * ?"), scheduled("b", "0 0 13 * * ?")])
    assert len(queue) == 3
    queue.sort()
    assert [t.name for t in queue] == ["a", "b", "c"]
    assert queue.top().name == "a"
    assert queue[2].name == "c"


def test_queue_remove_existing_and_missing():
    queue = TaskQueue()
    queue.extend([scheduled(f"Task-{i}", "* * * * * ?") for i in range(1, 6)])
    queue.remove("Task-6")
    assert len(queue) == 5
    queue.remove("Task-5")
    assert len(queue) == 4
    assert "Task-5" not in [t.name for t in queue]


def test_queue_clear():
    queue = TaskQueue()
    queue.push(scheduled("a", "* * * * * ?"))
    queue.clear()
    assert len(queue) == 0
    with pytest.raises(IndexError):
        queue.top()


def test_queue_locked_with_reentrant_lock():
    queue = TaskQueue(threading.RLock())
    with queue.locked() as outer:
        with queue.locked() as inner:
            inner.push(scheduled("a", "* * * * * ?"))
        assert outer is queue
    assert len(queue) == 1


def test_queue_locked_holds_lock():
    lock = threading.Lock()
    queue = TaskQueue(lock)
    with queue.locked():
        assert lock.locked() is True
    assert lock.locked() is False