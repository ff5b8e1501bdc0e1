"""Tests for the four gear ratio search strategies.

Most tests replace the simulator-backed fitness with a cheap analytic one so
that search behaviour can be checked over many iterations; the scenario tests
at the end use the real fitness with tiny budgets.
"""

import logging
import math

import numpy as np
import pytest

from fs_gearopt.core.dataset import create_default_dataset
from fs_gearopt.optimization import base
from fs_gearopt.optimization.annealing import (
    AnnealingState,
    SimulatedAnnealingOptimizer,
    annealing_optimize,
)
from fs_gearopt.optimization.base import (
    TERMINATION_BUDGET,
    TERMINATION_CANCELLED,
    TERMINATION_CONVERGED,
    CallbackObserver,
    CancellationToken,
    StepRecorder,
    is_better,
)
from fs_gearopt.optimization.genetic import genetic_optimize, tournament_select
from fs_gearopt.optimization.random_search import random_search_optimize
from fs_gearopt.optimization.swarm import particle_swarm_optimize
from fs_gearopt.performance.fitness import evaluate_fitness
from fs_gearopt.transmission.gearing import is_normalized

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_TARGET = np.array([3.0, 2.3, 1.8, 1.5, 1.25, 1.05])


def _quadratic_fitness(dataset, gear_ratios=None, carry_exit_speed=False) -> float:
    ratios = np.asarray(gear_ratios if gear_ratios is not None else dataset.gearbox.gears)
    return float(10.0 - np.sum((ratios - _TARGET[:len(ratios)]) ** 2))


def _constant_fitness(dataset, gear_ratios=None, carry_exit_speed=False) -> float:
    return 1.0


def _use_fitness(monkeypatch, fitness) -> None:
    monkeypatch.setattr(base, "evaluate_fitness", fitness)
    monkeypatch.setattr(base, "derived_acceleration_time", lambda dataset, gear_ratios=None: 4.2)


def _small_runs():
    """Each strategy with a budget large enough to exercise its loop."""
    return [
        ("random", lambda ds, **kw: random_search_optimize(ds, iterations=40, **kw)),
        ("annealing", lambda ds, **kw: annealing_optimize(ds, max_iterations=60, **kw)),
        ("swarm", lambda ds, **kw: particle_swarm_optimize(ds, num_particles=6, max_iterations=8, **kw)),
        ("genetic", lambda ds, **kw: genetic_optimize(ds, population_size=8, max_generations=6, **kw)),
    ]


STRATEGY_RUNS = _small_runs()
STRATEGY_IDS = [name for name, _ in STRATEGY_RUNS]


# ---------------------------------------------------------------------------
# Shared properties
# ---------------------------------------------------------------------------


def test_is_better_rejects_non_finite() -> None:
    assert is_better(2.0, 1.0)
    assert not is_better(1.0, 1.0)
    assert not is_better(math.nan, 1.0)
    assert not is_better(math.inf, 1.0)
    assert is_better(0.0, math.nan)
    assert is_better(0.5, -math.inf)


@pytest.mark.parametrize("name,run", STRATEGY_RUNS, ids=STRATEGY_IDS)
def test_result_gears_are_sorted_and_bounded(monkeypatch, name, run) -> None:
    _use_fitness(monkeypatch, _quadratic_fitness)
    dataset = create_default_dataset()
    c = dataset.gearbox.constraints

    result = run(dataset, seed=11)

    assert result.strategy == name
    assert len(result.gear_ratios) == 6
    assert is_normalized(result.gear_ratios, c.min_ratio, c.max_ratio), result.gear_ratios


@pytest.mark.parametrize("name,run", STRATEGY_RUNS, ids=STRATEGY_IDS)
def test_running_best_matches_result(monkeypatch, name, run) -> None:
    """Best fitness over the emitted steps never decreases and ends at the result."""
    _use_fitness(monkeypatch, _quadratic_fitness)
    dataset = create_default_dataset()
    recorder = StepRecorder()

    result = run(dataset, seed=5, observer=recorder)

    bests = [step.best_fitness for step in recorder.steps]
    assert bests, f"{name} emitted no progress steps"
    assert all(b >= a for a, b in zip(bests, bests[1:])), f"{name} best fitness decreased"
    assert recorder.last.best_fitness == result.fitness
    assert recorder.last.best_gear_ratios == result.gear_ratios
    assert result.fitness >= _quadratic_fitness(dataset), "result is worse than the starting gears"
    assert result.accel_time == 4.2


@pytest.mark.parametrize("name,run", STRATEGY_RUNS, ids=STRATEGY_IDS)
def test_seeded_runs_are_reproducible(monkeypatch, name, run) -> None:
    _use_fitness(monkeypatch, _quadratic_fitness)
    dataset = create_default_dataset()
    first, second = StepRecorder(), StepRecorder()

    a = run(dataset, seed=123, observer=first)
    b = run(dataset, rng=np.random.default_rng(123), observer=second)

    assert a == b
    assert first.steps == second.steps


@pytest.mark.parametrize("name,run", STRATEGY_RUNS, ids=STRATEGY_IDS)
def test_cancellation_returns_best_known_result(monkeypatch, name, run) -> None:
    """Cancelling stops the run at the next check and keeps the best result so far."""
    _use_fitness(monkeypatch, _quadratic_fitness)
    dataset = create_default_dataset()
    token = CancellationToken()
    recorder = StepRecorder()

    def on_step(step) -> None:
        recorder.on_step(step)
        if len(recorder) == 3:
            token.cancel()

    result = run(dataset, seed=2, observer=CallbackObserver(on_step), cancel_token=token)

    assert result.termination == TERMINATION_CANCELLED
    assert len(recorder) == 3
    assert result.fitness == recorder.last.best_fitness


@pytest.mark.parametrize("name,run", STRATEGY_RUNS, ids=STRATEGY_IDS)
def test_input_dataset_is_not_mutated(monkeypatch, name, run) -> None:
    _use_fitness(monkeypatch, _quadratic_fitness)
    dataset = create_default_dataset()
    run(dataset, seed=9)
    assert dataset == create_default_dataset()


# ---------------------------------------------------------------------------
# Random search
# ---------------------------------------------------------------------------


def test_random_search_counts_evaluations(monkeypatch) -> None:
    _use_fitness(monkeypatch, _quadratic_fitness)
    recorder = StepRecorder()
    result = random_search_optimize(create_default_dataset(), iterations=25, seed=1, observer=recorder)

    assert result.evaluations == 26
    assert result.termination == TERMINATION_BUDGET
    assert [s.iteration for s in recorder.steps] == list(range(25))


# ---------------------------------------------------------------------------
# Simulated annealing
# ---------------------------------------------------------------------------


def test_acceptance_probability() -> None:
    optimizer = SimulatedAnnealingOptimizer(create_default_dataset(), boltzmann_k=0.1)

    assert optimizer.acceptance_probability(0.5, 1.0) == 1.0
    assert optimizer.acceptance_probability(0.0, 1.0) == 1.0
    assert optimizer.acceptance_probability(-0.1, 1.0) == pytest.approx(math.exp(-1.0))
    assert optimizer.acceptance_probability(-0.1, 0.0) == 0.0
    assert optimizer.acceptance_probability(math.nan, 1.0) == 0.0


def test_invalid_cooling_rate_rejected() -> None:
    with pytest.raises(ValueError):
        SimulatedAnnealingOptimizer(create_default_dataset(), cooling_rate=1.0)


def test_annealing_temperature_and_reheats(monkeypatch) -> None:
    """Temperature never rises except at a reheat, which needs a stall while cold."""
    _use_fitness(monkeypatch, _constant_fitness)
    params = dict(
        initial_temperature=0.04,
        cooling_rate=0.9,
        temperature_floor=0.05,
        reheat_threshold=5,
        reheat_temperature=0.5,
        max_reheats=2,
        min_temperature=1e-9,
        stall_window=1000,
    )
    recorder = StepRecorder()
    result = annealing_optimize(create_default_dataset(), max_iterations=80, seed=4,
                                observer=recorder, **params)

    previous = params["initial_temperature"]
    reheats = 0
    for step in recorder.steps:
        if step.reheated:
            reheats += 1
            assert previous < params["temperature_floor"]
            assert step.stall_count > params["reheat_threshold"]
            assert step.temperature == params["reheat_temperature"]
        else:
            assert step.temperature <= previous
        previous = step.temperature

    assert reheats == params["max_reheats"]
    assert result.termination == TERMINATION_BUDGET


def test_annealing_converges_when_cold_and_stalled(monkeypatch) -> None:
    _use_fitness(monkeypatch, _constant_fitness)
    optimizer = SimulatedAnnealingOptimizer(
        create_default_dataset(),
        max_iterations=100,
        initial_temperature=0.01,
        cooling_rate=0.5,
        min_temperature=1e-3,
        stall_window=5,
        max_reheats=0,
    )
    recorder = StepRecorder()
    result = optimizer.optimize(observer=recorder, seed=0)

    assert result.termination == TERMINATION_CONVERGED
    assert optimizer.last_state is AnnealingState.CONVERGED
    assert len(recorder) == 5


def test_annealing_state_before_and_after_budget_run(monkeypatch) -> None:
    """No state is reported before a run; an exhausted budget ends in TERMINATED."""
    _use_fitness(monkeypatch, _quadratic_fitness)
    optimizer = SimulatedAnnealingOptimizer(create_default_dataset(), max_iterations=10)

    assert optimizer.last_state is None
    result = optimizer.optimize(seed=0)

    assert result.termination == TERMINATION_BUDGET
    assert optimizer.last_state is AnnealingState.TERMINATED


def test_annealing_tunneling_happens(monkeypatch) -> None:
    _use_fitness(monkeypatch, _quadratic_fitness)
    recorder = StepRecorder()
    annealing_optimize(create_default_dataset(), max_iterations=50, seed=8,
                       observer=recorder, tunneling_probability=1.0)
    assert all(step.tunneled for step in recorder.steps)


# ---------------------------------------------------------------------------
# Particle swarm
# ---------------------------------------------------------------------------


def test_swarm_particles_stay_sorted_and_bounded(monkeypatch) -> None:
    _use_fitness(monkeypatch, _quadratic_fitness)
    dataset = create_default_dataset()
    c = dataset.gearbox.constraints
    recorder = StepRecorder()

    particle_swarm_optimize(dataset, num_particles=5, max_iterations=6, seed=3, observer=recorder)

    assert len(recorder) == 6
    for step in recorder.steps:
        assert len(step.particles) == 5
        for particle in step.particles:
            assert is_normalized(particle.position, c.min_ratio, c.max_ratio), particle.position


# ---------------------------------------------------------------------------
# Genetic algorithm
# ---------------------------------------------------------------------------


def test_tournament_prefers_finite_fitter_individual() -> None:
    rng = np.random.default_rng(0)
    fitnesses = [math.nan, 1.0]
    picks = {tournament_select(fitnesses, rng) for _ in range(50)}
    # The NaN individual can only win against itself
    assert 1 in picks


def test_genetic_reports_generation_count(monkeypatch) -> None:
    _use_fitness(monkeypatch, _quadratic_fitness)
    recorder = StepRecorder()
    result = genetic_optimize(create_default_dataset(), population_size=6, max_generations=4,
                              seed=13, observer=recorder)

    assert result.generation == 4
    assert [s.generation for s in recorder.steps] == [0, 1, 2, 3, 4]
    assert result.evaluations == 6 * 5
    assert all(s.diversity >= 0.0 for s in recorder.steps)


def test_genetic_zero_generations_evaluates_initial_population(monkeypatch) -> None:
    _use_fitness(monkeypatch, _quadratic_fitness)
    result = genetic_optimize(create_default_dataset(), population_size=5, max_generations=0, seed=1)
    assert result.generation == 0
    assert result.evaluations == 5


def test_genetic_rejects_empty_population() -> None:
    with pytest.raises(ValueError):
        genetic_optimize(create_default_dataset(), population_size=0)


# ---------------------------------------------------------------------------
# Scenarios with the real fitness
# ---------------------------------------------------------------------------


def test_random_search_zero_iterations_returns_input() -> None:
    """With no iterations the input gear set comes back with its own fitness."""
    dataset = create_default_dataset()
    recorder = StepRecorder()

    result = random_search_optimize(dataset, iterations=0, seed=0, observer=recorder)

    assert result.gear_ratios == dataset.gearbox.gears
    assert result.fitness == evaluate_fitness(dataset)
    assert result.evaluations == 1
    assert len(recorder) == 0


def test_genetic_single_individual_replicates() -> None:
    """A population of one keeps the same elite every generation with zero diversity."""
    dataset = create_default_dataset()
    recorder = StepRecorder()

    result = genetic_optimize(dataset, population_size=1, max_generations=3, seed=0, observer=recorder)

    assert len(recorder) == 4
    for step in recorder.steps:
        assert step.diversity == 0.0
        assert step.generation_best_gears == dataset.gearbox.gears
        assert step.generation_best_fitness == step.avg_fitness
    assert result.gear_ratios == dataset.gearbox.gears
    assert result.generation == 3


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("name,run", STRATEGY_RUNS, ids=STRATEGY_IDS)
def test_strategies_log_start_and_finish(monkeypatch, caplog, name, run) -> None:
    _use_fitness(monkeypatch, _quadratic_fitness)
    caplog.set_level(logging.INFO)

    run(create_default_dataset(), seed=0)

    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
    assert any("started" in m for m in messages), f"{name} did not log its start"
    assert any(m.startswith(f"{name} finished") for m in messages)
