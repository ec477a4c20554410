# cronkit

A small cron-style scheduler for Python. Schedules have six fields, so they
work to the second. Nothing runs by itself. Your program calls `tick()` at
least once a second, and each call runs every task that is due.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Schedule format

```
┌───────────── second        (0-59)
│ ┌─────────── minute        (0-59)
│ │ ┌───────── hour          (0-23)
│ │ │ ┌─────── day of month  (1-31)
│ │ │ │ ┌───── month         (1-12 or JAN-DEC)
│ │ │ │ │ ┌─── day of week   (0-6, Sunday = 0, or SUN-SAT)
* * * * * *
```

Each field accepts:

- `*`: every value.
- `?`: ignore this field. It is treated as every value.
- A single number.
- A range such as `1-5`. A reversed range wraps around, so `22-2` in the
  hour field means 22, 23, 0, 1 and 2.
- A step such as `*/15` or `5/10`, counting up to the field's last value.
- A comma-separated list of any of the above.

Month and weekday names are matched without regard to case.

Day of month and day of week cannot both be restricted. At least one of them
must be `?` or `*`. An expression is also rejected when none of its days can
exist in its months. Two examples are `0 0 * 30 FEB *` and
`0 0 * 31 APR *`.

These shorthands are accepted:

| Shorthand   | Meaning       |
|-------------|---------------|
| `@yearly`   | `0 0 0 1 1 *` |
| `@annually` | `0 0 0 1 1 *` |
| `@monthly`  | `0 0 0 1 * *` |
| `@weekly`   | `0 0 0 * * 0` |
| `@daily`    | `0 0 0 * * ?` |
| `@hourly`   | `0 0 * * * ?` |

## Usage

```python
from cronkit.cron import Cron

cron = Cron()

def report(info):
    print(f"{info.name} ran {info.delay} late")

cron.add_schedule("report", "0 */5 * * * ?", report)

while True:
    cron.tick()
    # ... sleep for at most one second ...
```

The work function receives the task itself. It exposes two read-only
properties: `name` and `delay`. `delay` is how far the run started behind its
planned time.

`add_schedule` raises `cronkit.cron_data.InvalidScheduleError`, a
`ValueError`, when the expression is not valid. A valid expression that never
matches any future time is silently not added.

`add_schedules(mapping, work)` adds several named schedules at once. If any
of them is invalid, it raises `InvalidScheduleError` naming that entry, and
none of them is added.

Other operations on `Cron`:

- `tick(now=None)` runs the tasks that are due at `now`, which defaults to
  the clock's time. It returns how many tasks ran.
- `count()` gives the number of scheduled tasks.
- `remove_schedule(name)` removes a task. `clear_schedules()` removes all of
  them.
- `time_until_next()` gives the time left before the earliest task is due. It
  returns `timedelta.max` when nothing is scheduled.
- `time_until_expiry_for_tasks()` gives a list of `(name, timedelta)` pairs,
  one for each task.
- `recalculate_schedule()` moves every task to its next time strictly after
  now.
- `str(cron)` gives one status line for each task, for example
  `'report' expires in 1500ms => 2018-3-1 12:15:0`.

### Clocks

A `Cron` follows local wall-clock time through `cronkit.clock.LocalClock` by
default. To schedule in UTC, pass `clock=UTCClock()`. You can pass any
subclass of `cronkit.clock.CronClock` that implements `now()` and
`utc_offset(now)`, such as a clock you control in tests. Times are naive
`datetime` values.

Pass `thread_safe=True` when several threads share one instance. Operations
then hold a re-entrant lock.

### Clock changes

- Ticks less than one second after the previous tick count as the previous
  tick's time. A burst of ticks therefore never runs a task twice.
- A jump of three hours or more, in either direction, is treated as a clock
  correction. Every task is rescheduled from the new time.
- If the clock moves forward by less than that, tasks that fell due in the
  gap are run.
- If the clock moves back by less than that, no task runs a second time.

### Parsing and computing times directly

```python
from datetime import datetime
from cronkit.cron_data import CronData
from cronkit.schedule import CronSchedule

data = CronData.create("0 0 12 * * MON-FRI")
schedule = CronSchedule(data)
print(schedule.calculate_from(datetime(2018, 3, 10, 12, 13, 45)))
# 2018-03-12 12:00:00
```

`CronData.create` caches its results by expression text. The parsed
`CronData` holds each field as a `frozenset` of allowed values, for example
`data.hours` or `data.values(TimeField.HOURS)`.

`CronSchedule.calculate_from` returns the first allowed time at or after the
given one, with fractions of a second dropped. If no such time can be found,
it raises `cronkit.schedule.ScheduleError`. `0 0 * 31 FEB *` is an example of
an expression with no such time.

`cronkit.cron_data` also provides these helpers:

- `parse_field_part(text, field)`
- `replace_names_with_numbers(text, field)`
- `has_any_in_range(values, low, high)`

`cronkit.timetypes` defines `TimeField`, `Month` and the `DateTime` record
that `cronkit.schedule.to_calendar_time` returns.

### Randomized schedules

`CronRandomization` replaces each `R(low-high)` field with one random value
from that range. Month and day names may be used inside it:

```python
from cronkit.randomization import CronRandomization

randomizer = CronRandomization(seed=42)
schedule = randomizer.parse("0 0 R(13-20) ? * R(MON-FRI)")
```

Reversed ranges wrap around, as they do elsewhere. The day-of-month range is
capped so that the chosen day exists in the chosen months. February is capped
at the 29th. `parse` returns the resulting expression as a string, and raises
`InvalidScheduleError` when a random range cannot be resolved. Pass the result
to `add_schedule` to use it.

## What it does not do

cronkit is a library only. It has no daemon and no command-line program. It
does not read crontab files, start background threads or timers, or run
external commands. Your program must call `tick()` itself and supply the work
functions.