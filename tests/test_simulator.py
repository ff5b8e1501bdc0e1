"""Tests for the forward dynamics simulator."""

from dataclasses import replace

import pytest

from fs_gearopt.core.dataset import create_default_dataset
from fs_gearopt.core.simulator import ForwardDynamicsSimulator, simulate_acceleration
from fs_gearopt.utils.constants import SIM_CUTOFF_TIME, SIM_SAMPLE_INTERVAL, SIM_TIME_STEP


def _sample_run():
    return simulate_acceleration(create_default_dataset(), 75.0)


def test_acceleration_run_reaches_target_within_cutoff() -> None:
    """The baseline car covers 75 m with strictly increasing distance in under 20 s."""
    points = _sample_run()

    assert points, "the run must produce samples"
    assert 0.0 < points[-1].time < SIM_CUTOFF_TIME
    assert points[-1].distance >= 75.0

    distances = [p.distance for p in points]
    assert all(b > a for a, b in zip(distances, distances[1:])), "distance must strictly increase"


def test_run_starts_at_launch_condition() -> None:
    points = _sample_run()
    first = points[0]

    assert first.time == 0.0
    assert first.distance == 0.0
    assert first.gear == 1
    assert first.rpm == pytest.approx(4500.0)


def test_samples_follow_output_cadence() -> None:
    """Samples are taken on the 0.05 s cadence; only a gear shift can widen a gap."""
    dataset = create_default_dataset()
    points = _sample_run()
    times = [p.time for p in points]

    max_gap = SIM_SAMPLE_INTERVAL + dataset.engine.gear_shift_time_s + 2 * SIM_TIME_STEP
    assert all(b > a for a, b in zip(times, times[1:])), "sample times must strictly increase"
    assert all(b - a <= max_gap for a, b in zip(times, times[1:]))
    assert len(points) >= times[-1] / max_gap


def test_run_shifts_up_and_respects_redline() -> None:
    dataset = create_default_dataset()
    points = _sample_run()

    assert max(p.gear for p in points) > 1
    assert all(dataset.engine.idle_rpm <= p.rpm <= dataset.engine.redline_rpm for p in points)
    gears = [p.gear for p in points]
    assert gears == sorted(gears), "gears only ever shift up"


def test_simulator_is_idempotent() -> None:
    """Two runs with identical inputs produce identical samples."""
    simulator = ForwardDynamicsSimulator(create_default_dataset())
    assert simulator.run(75.0) == simulator.run(75.0)
    assert _sample_run() == _sample_run()


@pytest.mark.parametrize("distance", [0.0, -10.0, float("nan")])
def test_degenerate_target_returns_empty_trace(distance: float) -> None:
    assert simulate_acceleration(create_default_dataset(), distance) == []


def test_entry_speed_selects_gear_below_shift_point() -> None:
    """A straight entered at speed starts in the lowest gear that stays under the shift RPM."""
    dataset = create_default_dataset()
    simulator = ForwardDynamicsSimulator(dataset)
    points = simulator.run(40.0, initial_velocity=16.0)

    assert points[0].velocity == pytest.approx(16.0)
    assert points[0].rpm <= dataset.driver.shift_rpm
    assert points[0].gear == simulator.select_gear(16.0) + 1
    assert points[0].gear > 1


def test_run_that_cannot_finish_stops_at_cutoff() -> None:
    """A car without traction never reaches the target and stops at the cutoff."""
    dataset = create_default_dataset()
    slippery = dataset.with_changes(tire=replace(dataset.tire, mu_longitudinal=0.0))
    points = ForwardDynamicsSimulator(slippery, max_time=2.0).run(75.0)

    assert points[-1].distance < 75.0
    assert points[-1].time >= 2.0


def test_shift_past_cutoff_ends_run_at_cutoff() -> None:
    """A shift that outlasts the remaining time ends the run at the post-shift time."""
    dataset = create_default_dataset()
    slow_shift = dataset.with_changes(engine=replace(dataset.engine, gear_shift_time_s=25.0))
    points = simulate_acceleration(slow_shift, 75.0)

    assert points[-1].time >= SIM_CUTOFF_TIME
    assert points[-1].distance < 75.0
    assert points[-1].gear == 2
    times = [p.time for p in points]
    assert all(b > a for a, b in zip(times, times[1:]))
