import pytest

from cronkit.clock import UTCClock
from cronkit.cron import Cron
from cronkit.cron_data import CronData, InvalidScheduleError
from cronkit.randomization import CronRandomization

ITERATIONS = 300


@pytest.mark.parametrize(
    "schedule",
    [
        "R(0-59) R(0-59) R(0-23) R(1-31) R(1-12) ?",
        "R(45-15) R(30-0) R(18-2) R(28-15) R(8-3) ?",
        "R(0-59) R(0-59) R(0-23) ? R(1-12) R(0-6)",
        "R(45-15) R(30-0) R(18-2) ? R(8-3) R(4-1)",
        "0 0 R(13-20) * * ?",
        "0 0 0 ? * R(0-6)",
        "0 R(45-15) */12 ? * *",
        "0 0 0 ? * R(TUE-FRI)",
        "0 0 0 ? R(JAN-DEC) R(MON-FRI)",
        "0 0 0 ? R(DEC-MAR) R(SAT-SUN)",
        "0 0 0 ? R(JAN-FEB) *",
        "0 0 0 ? R(OCT-OCT) *",
    ],
)
def test_only_valid_schedules_generated(schedule):
    randomizer = CronRandomization(seed=1)
    for _ in range(ITERATIONS):
        result = randomizer.parse(schedule)
        assert len(result.split()) == 6
        cron = Cron(clock=UTCClock())
        cron.add_schedule("validate schedule", result, lambda info: None)
        assert cron.count() == 1


@pytest.mark.parametrize(
    "schedule",
    [
        "0 0 0 1 R(JAN-DEC) R(MON-SUN)",
        "0 0 0 ? R(JAN) *",
        "0 0 0 ? R(MON-TUE) *",
        "0 0 0 ? * R(JAN-JUN)",
    ],
)
def test_invalid_schedules_rejected(schedule):
    randomizer = CronRandomization(seed=2)
    for _ in range(50):
        with pytest.raises(InvalidScheduleError):
            result = randomizer.parse(schedule)
            Cron(clock=UTCClock()).add_schedule(
                "validate schedule", result, lambda info: None
            )


def test_selected_hours_within_range_and_all_reached():
    randomizer = CronRandomization(seed=3)
    hours = {int(randomizer.parse("0 0 R(13-20) * * ?").split()[2]) for _ in range(500)}
    assert hours == set(range(13, 21))


def test_reverse_range_wraps():
    randomizer = CronRandomization(seed=4)
    minutes = {int(randomizer.parse("0 R(45-15) */12 ? * *").split()[1]) for _ in range(500)}
    assert minutes <= set(range(45, 60)) | set(range(0, 16))
    assert minutes & set(range(45, 60))
    assert minutes & set(range(0, 16))


def test_non_random_fields_copied():
    randomizer = CronRandomization(seed=5)
    assert randomizer.parse("R(5-5) R(7-7) R(3-3) ? * *") == "5 7 3 ? * *"


def test_day_capped_for_february():
    randomizer = CronRandomization(seed=6)
    assert randomizer.parse("0 0 0 R(30-31) FEB ?") == "0 0 0 29 2 ?"


def test_day_capped_for_thirty_day_month():
    randomizer = CronRandomization(seed=7)
    assert randomizer.parse("0 0 0 R(31-31) APR ?") == "0 0 0 30 4 ?"


def test_result_parses_as_cron_data():
    randomizer = CronRandomization(seed=8)
    result = randomizer.parse("0 0 0 ? R(JAN-FEB) *")
    assert CronData.create(result).months <= {1, 2}


def test_same_seed_same_result():
    schedule = "R(0-59) R(0-59) R(0-23) R(1-31) R(1-12) ?"
    first = CronRandomization(seed=42)
    second = CronRandomization(seed=42)
    assert [first.parse(schedule) for _ in range(20)] == [
        second.parse(schedule) for _ in range(20)
    ]


def test_out_of_range_random_raises():
    with pytest.raises(InvalidScheduleError):
        CronRandomization(seed=9).parse("R(0-60) * * * * ?")


def test_too_few_fields_raises():
    with pytest.raises(InvalidScheduleError):
        CronRandomization(seed=10).parse("* * *")