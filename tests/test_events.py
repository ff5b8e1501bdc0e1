"""Tests for the event models and the composite fitness function."""

import math
from dataclasses import replace

import pytest

from fs_gearopt.core.dataset import FitnessWeights, create_default_dataset
from fs_gearopt.core.simulator import simulate_acceleration
from fs_gearopt.performance.acceleration import (
    acceleration_time,
    analyze_acceleration,
    derived_acceleration_time,
    final_time,
)
from fs_gearopt.performance.autocross import (
    DEFAULT_COURSE,
    CornerSegment,
    StraightSegment,
    autocross_breakdown,
    autocross_time,
    corner_time,
)
from fs_gearopt.performance.fitness import (
    EventTimes,
    evaluate_event_times,
    evaluate_fitness,
    fitness_from_times,
)
from fs_gearopt.performance.skidpad import skidpad_lateral_g, skidpad_time, skidpad_velocity

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _sample_weights() -> FitnessWeights:
    return FitnessWeights(acceleration=0.4, skidpad=0.2, autocross=0.4)


def _high_downforce_dataset():
    """Downforce term large enough to overwhelm m/r on the skidpad circle."""
    dataset = create_default_dataset()
    return dataset.with_changes(aero=replace(dataset.aero, downforce_coefficient=100.0))


# ---------------------------------------------------------------------------
# Acceleration
# ---------------------------------------------------------------------------


def test_acceleration_time_is_plausible() -> None:
    t = acceleration_time(create_default_dataset())
    assert 3.0 < t < 8.0, f"75 m time {t:.3f}s is implausible for the baseline car"


def test_empty_trace_uses_fallback_times() -> None:
    """A run without samples is never reported as zero time."""
    assert final_time([], 20.0) == 20.0
    assert acceleration_time(create_default_dataset(), distance=0.0) == 20.0
    assert derived_acceleration_time(create_default_dataset(), distance=0.0) == 99.0


def test_derived_time_uses_given_gears() -> None:
    dataset = create_default_dataset()
    baseline = derived_acceleration_time(dataset)
    short_geared = derived_acceleration_time(dataset, (3.5, 3.4, 3.3, 3.2, 3.1, 3.0))

    assert baseline == pytest.approx(acceleration_time(dataset))
    assert short_geared != pytest.approx(baseline)


def test_analyze_acceleration_summary() -> None:
    points = simulate_acceleration(create_default_dataset(), 75.0)
    summary = analyze_acceleration(points)

    assert summary["completed"] is True
    assert summary["time"] == points[-1].time
    assert summary["top_gear_used"] >= 2
    assert summary["peak_accel_g"] > 0.0


# ---------------------------------------------------------------------------
# Skidpad
# ---------------------------------------------------------------------------


def test_skidpad_closed_form() -> None:
    dataset = create_default_dataset()
    mass, mu, radius = 300.0, 1.8, 8.0
    cdf = 0.5 * 1.225 * 2.8 * 1.1
    expected_v = math.sqrt(mass * 9.81 * mu / (mass / radius - cdf * mu))

    assert skidpad_velocity(dataset) == pytest.approx(expected_v)
    assert skidpad_time(dataset) == pytest.approx(2 * 2 * math.pi * radius / expected_v)
    assert skidpad_lateral_g(dataset) == pytest.approx(expected_v ** 2 / radius / 9.81)


def test_skidpad_degenerate_configuration_does_not_nan() -> None:
    """Downforce overwhelming the inertial term gives zero speed and infinite time."""
    dataset = _high_downforce_dataset()

    assert skidpad_velocity(dataset) == 0.0
    assert math.isinf(skidpad_time(dataset))
    assert not math.isnan(skidpad_time(dataset))


# ---------------------------------------------------------------------------
# Autocross
# ---------------------------------------------------------------------------


def test_corner_time_closed_form() -> None:
    dataset = create_default_dataset()
    corner = CornerSegment(angle_deg=90.0, radius_m=15.0)
    speed = math.sqrt(1.8 * 9.81 * 15.0)

    assert corner.arc_length_m == pytest.approx(15.0 * math.pi / 2)
    assert corner_time(dataset, corner) == pytest.approx(corner.arc_length_m / speed)


def test_autocross_is_sum_of_segments() -> None:
    dataset = create_default_dataset()
    breakdown = autocross_breakdown(dataset)

    assert [s["type"] for s in breakdown] == ["straight", "corner", "straight", "corner", "straight"]
    assert autocross_time(dataset) == pytest.approx(sum(s["time"] for s in breakdown))
    assert all(s["time"] > 0.0 for s in breakdown)


def test_carrying_exit_speed_shortens_straights() -> None:
    """Entering a straight at corner speed is faster than a standing launch."""
    dataset = create_default_dataset()
    restart = autocross_breakdown(dataset, carry_exit_speed=False)
    carried = autocross_breakdown(dataset, carry_exit_speed=True)

    assert carried[0]["time"] == pytest.approx(restart[0]["time"])
    assert carried[2]["time"] < restart[2]["time"]
    assert carried[4]["time"] < restart[4]["time"]


def test_unknown_segment_type_raises() -> None:
    with pytest.raises(TypeError):
        autocross_breakdown(create_default_dataset(), course=(StraightSegment(10.0), "hairpin"))


def test_default_course_layout() -> None:
    assert DEFAULT_COURSE[0] == StraightSegment(60.0)
    assert DEFAULT_COURSE[3] == CornerSegment(120.0, 10.0)


# ---------------------------------------------------------------------------
# Fitness
# ---------------------------------------------------------------------------


def test_fitness_formula() -> None:
    times = EventTimes(acceleration=4.0, skidpad=8.0, autocross=15.0)
    expected = 10.0 * (0.4 / 4.0 + 0.2 / 8.0 + 0.4 / 15.0)
    assert fitness_from_times(times, _sample_weights()) == pytest.approx(expected)


@pytest.mark.parametrize(
    "times",
    [
        EventTimes(acceleration=20.0, skidpad=8.0, autocross=15.0),
        EventTimes(acceleration=0.0, skidpad=8.0, autocross=15.0),
        EventTimes(acceleration=-1.0, skidpad=8.0, autocross=15.0),
        EventTimes(acceleration=4.0, skidpad=math.inf, autocross=15.0),
        EventTimes(acceleration=4.0, skidpad=8.0, autocross=math.nan),
        EventTimes(acceleration=4.0, skidpad=8.0, autocross=15.0, autocross_completed=False),
        EventTimes(acceleration=4.0, skidpad=8.0, autocross=15.0, acceleration_completed=False),
    ],
)
def test_invalid_event_times_give_zero_fitness(times: EventTimes) -> None:
    """Non-positive, non-finite or cutoff times are worst case, never divided by."""
    assert times.valid is False
    assert fitness_from_times(times, _sample_weights()) == 0.0


def test_baseline_fitness_is_positive_and_repeatable() -> None:
    dataset = create_default_dataset()
    times = evaluate_event_times(dataset)
    fitness = evaluate_fitness(dataset)

    assert times.valid
    assert fitness > 0.0
    assert fitness == evaluate_fitness(dataset)
    assert fitness == pytest.approx(fitness_from_times(times, dataset.fitness_weights))


def test_degenerate_skidpad_gives_zero_fitness() -> None:
    assert evaluate_fitness(_high_downforce_dataset()) == 0.0


def test_run_cut_short_by_a_shift_is_worst_case() -> None:
    """Runs that stop short of their distance never count as fast finishes."""
    dataset = create_default_dataset()
    slow_shift = dataset.with_changes(engine=replace(dataset.engine, gear_shift_time_s=25.0))

    times = evaluate_event_times(slow_shift)
    breakdown = autocross_breakdown(slow_shift)

    assert times.acceleration >= 20.0
    assert times.acceleration_completed is False
    assert times.valid is False
    assert not any(s["completed"] for s in breakdown if s["type"] == "straight")
    assert evaluate_fitness(slow_shift) == 0.0
