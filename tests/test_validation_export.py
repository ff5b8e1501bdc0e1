"""Tests for plausibility validation and CSV/JSON export."""

import json
import math
import os
from dataclasses import replace

import pandas as pd
import pytest

from fs_gearopt.core.dataset import create_default_dataset
from fs_gearopt.core.simulator import simulate_acceleration
from fs_gearopt.optimization.base import (
    GeneticStep,
    OptimizationResult,
    ParticleState,
    SearchStep,
    SwarmStep,
)
from fs_gearopt.performance.fitness import EventTimes
from fs_gearopt.utils.export import (
    particles_to_dataframe,
    result_to_dict,
    save_result_json,
    save_steps_csv,
    save_trace_csv,
    step_to_row,
    steps_to_dataframe,
    trace_to_dataframe,
)
from fs_gearopt.utils.validation import (
    check_trace_limits,
    validate_dataset,
    validate_event_times,
    validate_in_range,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_GEARS = (3.1, 2.4, 1.9, 1.55, 1.3, 1.1)


def _sample_result() -> OptimizationResult:
    return OptimizationResult(
        gear_ratios=_GEARS,
        fitness=1.4,
        accel_time=4.3,
        generation=12,
        strategy='genetic',
        evaluations=960,
    )


def _sample_swarm_step(iteration: int = 0) -> SwarmStep:
    return SwarmStep(
        iteration=iteration,
        particles=(ParticleState(_GEARS, 1.2), ParticleState((3.0, 2.2, 1.8, 1.5, 1.2, 1.0), 1.0)),
        global_best=_GEARS,
        global_best_fitness=1.2,
    )


# ---------------------------------------------------------------------------
# Range validation
# ---------------------------------------------------------------------------


def test_value_inside_range_is_valid() -> None:
    result = validate_in_range(4.5, 'acceleration_time')
    assert result['status'] == 'valid'
    assert result['expected_range'] == (3.5, 6.0)


@pytest.mark.parametrize(
    "value,status",
    [
        (6.2, 'good'),
        (6.5, 'acceptable'),
        (7.0, 'warning'),
        (9.0, 'critical_error'),
        (math.inf, 'critical_error'),
    ],
)
def test_status_grows_with_relative_error(value: float, status: str) -> None:
    assert validate_in_range(value, 'acceleration_time')['status'] == status


def test_custom_and_unknown_ranges() -> None:
    assert validate_in_range(5.0, 'anything', custom_range=(1.0, 2.0))['status'] == 'critical_error'
    assert validate_in_range(5.0, 'chain_stretch')['status'] == 'unknown'


def test_default_dataset_is_valid() -> None:
    report = validate_dataset(create_default_dataset())

    assert report['status'] == 'valid'
    assert report['warnings'] == []
    assert set(report['metric_validations']) == {'vehicle_mass', 'weight_distribution', 'power_to_weight'}


def test_degenerate_skidpad_and_rpm_settings_are_flagged() -> None:
    dataset = create_default_dataset()
    dataset = dataset.with_changes(
        aero=replace(dataset.aero, downforce_coefficient=100.0),
        driver=replace(dataset.driver, shift_rpm=12000.0),
    )

    report = validate_dataset(dataset)

    assert report['status'] == 'warning'
    assert any('skidpad' in w for w in report['warnings'])
    assert any('redline' in w for w in report['warnings'])
    assert any('RPM limit' in w for w in report['warnings'])


def test_event_time_validation() -> None:
    report = validate_event_times(EventTimes(acceleration=4.2, skidpad=math.inf, autocross=15.0))

    assert report['metric_validations']['acceleration_time']['status'] == 'valid'
    assert report['metric_validations']['skidpad_time']['status'] == 'critical_error'
    assert report['status'] == 'critical_error'


def test_baseline_trace_stays_within_limits() -> None:
    dataset = create_default_dataset()
    report = check_trace_limits(dataset, simulate_acceleration(dataset, 75.0))

    assert report['within_limits'] is True
    assert report['violations'] == []
    assert report['peaks']['rpm'] <= dataset.limits.max_rpm
    assert report['peaks']['lateral_g'] == 0.0


def test_tight_limits_are_reported() -> None:
    dataset = create_default_dataset()
    strict = dataset.with_changes(limits=replace(dataset.limits, max_rpm=5000.0))

    report = check_trace_limits(strict, simulate_acceleration(strict, 75.0))

    assert report['within_limits'] is False
    assert [v['metric'] for v in report['violations']] == ['rpm']


def test_empty_trace_has_no_violations() -> None:
    assert check_trace_limits(create_default_dataset(), [])['within_limits'] is True


# ---------------------------------------------------------------------------
# DataFrame conversion
# ---------------------------------------------------------------------------


def test_trace_dataframe_has_one_row_per_sample() -> None:
    points = simulate_acceleration(create_default_dataset(), 75.0)
    df = trace_to_dataframe(points)

    assert len(df) == len(points)
    assert df.columns[0] == 'time'
    assert df['speed_kmh'].iloc[-1] == pytest.approx(points[-1].velocity * 3.6)


def test_search_step_row_expands_gear_columns() -> None:
    step = SearchStep(iteration=3, fitness=1.1, gear_ratios=_GEARS, improved=True,
                      best_fitness=1.1, best_gear_ratios=_GEARS)
    row = step_to_row(step)

    assert row['step_type'] == 'SearchStep'
    assert row['gear_1'] == 3.1
    assert row['best_gear_6'] == 1.1
    assert 'gear_ratios' not in row


def test_swarm_steps_are_summarised() -> None:
    df = steps_to_dataframe([_sample_swarm_step(0), _sample_swarm_step(1)])

    assert list(df['iteration']) == [0, 1]
    assert list(df['particle_count']) == [2, 2]
    assert df['mean_particle_fitness'].iloc[0] == pytest.approx(1.1)
    assert df['best_fitness'].iloc[0] == 1.2
    assert 'best_gear_1' in df.columns


def test_particles_dataframe_is_long_format() -> None:
    df = particles_to_dataframe([_sample_swarm_step(0), _sample_swarm_step(1)])

    assert len(df) == 4
    assert list(df.columns[:3]) == ['iteration', 'particle', 'fitness']
    assert df['gear_6'].iloc[1] == 1.0


def test_step_to_row_rejects_plain_objects() -> None:
    with pytest.raises(TypeError):
        step_to_row({'iteration': 0})


# ---------------------------------------------------------------------------
# File export
# ---------------------------------------------------------------------------


def test_save_trace_and_steps_csv(tmp_path) -> None:
    points = simulate_acceleration(create_default_dataset(), 75.0)
    steps = [
        GeneticStep(generation=g, generation_best_fitness=1.0 + g, avg_fitness=0.8, generation_best_gears=_GEARS,
                    diversity=0.1, best_fitness=1.0 + g, best_gear_ratios=_GEARS)
        for g in range(3)
    ]
    trace_path = os.path.join(str(tmp_path), "out", "trace.csv")
    steps_path = os.path.join(str(tmp_path), "out", "progress.csv")

    save_trace_csv(points, trace_path)
    save_steps_csv(steps, steps_path)

    trace = pd.read_csv(trace_path)
    progress = pd.read_csv(steps_path)
    assert len(trace) == len(points)
    assert list(progress['generation']) == [0, 1, 2]
    assert progress['generation_best_gear_4'].iloc[0] == pytest.approx(1.55)


def test_save_result_json(tmp_path) -> None:
    path = os.path.join(str(tmp_path), "result.json")
    written = save_result_json(_sample_result(), path)

    with open(path) as f:
        loaded = json.load(f)

    assert loaded == written == result_to_dict(_sample_result())
    assert loaded['gear_ratios'] == list(_GEARS)
    assert loaded['termination'] == 'budget'


def test_utils_public_names_resolve() -> None:
    """Every exported utility name exists and the unit factors are consistent."""
    import fs_gearopt.utils as utils

    assert all(hasattr(utils, name) for name in utils.__all__)
    assert utils.MS_TO_KMH == 3.6
    assert utils.DEG_TO_RAD * 180.0 == pytest.approx(math.pi)
