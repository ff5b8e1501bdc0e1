"""
Shared building blocks for the gear ratio optimizers.

This module provides the pieces every search strategy uses:

1. OptimizationResult, returned once per optimizer run
2. Progress step records, pushed to an observer once per iteration
3. Observer implementations (recording, callback and logging sinks)
4. A cancellation token checked once per iteration
5. The fitness oracle wrapper and a finite-safe fitness comparison

Every optimizer takes an explicit ``numpy.random.Generator`` (or a seed), so
runs can be replayed exactly.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Tuple, Union
import logging
import math
import threading

import numpy as np

from ..performance.acceleration import derived_acceleration_time
from ..performance.fitness import evaluate_fitness
from ..transmission.gearing import GearSet

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Optimization")

TERMINATION_BUDGET = 'budget'
TERMINATION_CONVERGED = 'converged'
TERMINATION_CANCELLED = 'cancelled'


@dataclass(frozen=True)
class OptimizationResult:
    """
    Outcome of one optimizer run.

    Attributes:
        gear_ratios: Best gear set found, tallest first
        fitness: Fitness of that gear set
        accel_time: 75 m acceleration time of that gear set in s
        generation: Generations completed (genetic algorithm only)
        strategy: Name of the strategy that produced the result
        evaluations: Number of fitness evaluations performed
        termination: 'budget', 'converged' or 'cancelled'
    """

    gear_ratios: Tuple[float, ...]
    fitness: float
    accel_time: float
    generation: Optional[int] = None
    strategy: str = ''
    evaluations: int = 0
    termination: str = TERMINATION_BUDGET


@dataclass(frozen=True)
class SearchStep:
    """Random search progress: the candidate drawn and the best so far."""

    iteration: int
    fitness: float
    gear_ratios: Tuple[float, ...]
    improved: bool
    best_fitness: float
    best_gear_ratios: Tuple[float, ...]


@dataclass(frozen=True)
class AnnealingStep:
    """Simulated annealing progress after one proposal."""

    iteration: int
    temperature: float
    fitness: float
    gear_ratios: Tuple[float, ...]
    accepted: bool
    probability: float
    tunneled: bool
    reheated: bool
    stall_count: int
    best_fitness: float
    best_gear_ratios: Tuple[float, ...]


@dataclass(frozen=True)
class ParticleState:
    position: Tuple[float, ...]
    fitness: float


@dataclass(frozen=True)
class SwarmStep:
    """Particle swarm progress after every particle has moved once."""

    iteration: int
    particles: Tuple[ParticleState, ...]
    global_best: Tuple[float, ...]
    global_best_fitness: float

    @property
    def best_fitness(self) -> float:
        return self.global_best_fitness

    @property
    def best_gear_ratios(self) -> Tuple[float, ...]:
        return self.global_best


@dataclass(frozen=True)
class GeneticStep:
    """Genetic algorithm statistics of one evaluated generation."""

    generation: int
    generation_best_fitness: float
    avg_fitness: float
    generation_best_gears: Tuple[float, ...]
    diversity: float
    best_fitness: float
    best_gear_ratios: Tuple[float, ...]


ProgressStep = Union[SearchStep, AnnealingStep, SwarmStep, GeneticStep]


class ProgressObserver(Protocol):
    """Sink for progress steps; called once per iteration or generation."""

    def on_step(self, step: ProgressStep) -> None:
        ...


class StepRecorder:
    """Observer that keeps every step in emission order."""

    def __init__(self):
        self.steps: List[ProgressStep] = []

    def on_step(self, step: ProgressStep) -> None:
        self.steps.append(step)

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def last(self) -> Optional[ProgressStep]:
        return self.steps[-1] if self.steps else None


class CallbackObserver:
    """Adapter turning a plain function into an observer."""

    def __init__(self, callback: Callable[[ProgressStep], None]):
        self.callback = callback

    def on_step(self, step: ProgressStep) -> None:
        self.callback(step)


class ObserverGroup:
    """Forwards every step to several observers in order."""

    def __init__(self, *observers: ProgressObserver):
        self.observers = [o for o in observers if o is not None]

    def on_step(self, step: ProgressStep) -> None:
        for observer in self.observers:
            observer.on_step(step)


class LoggingObserver:
    """Observer that logs every n-th step at INFO level."""

    def __init__(self, every: int = 10, name: str = "Optimization_Progress"):
        self.every = max(1, int(every))
        self.logger = logging.getLogger(name)
        self._count = 0

    def on_step(self, step: ProgressStep) -> None:
        if self._count % self.every == 0:
            index = getattr(step, 'iteration', getattr(step, 'generation', self._count))
            self.logger.info(f"{type(step).__name__} {index}: best fitness {step.best_fitness:.4f}")
        self._count += 1


class CancellationToken:
    """Thread-safe flag an optimizer checks once per iteration."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def is_better(candidate: float, incumbent: float) -> bool:
    """
    Strict improvement test that never prefers a non-finite fitness.

    Args:
        candidate: Fitness of the new solution
        incumbent: Fitness of the current best

    Returns:
        True if candidate should replace incumbent
    """
    if not math.isfinite(candidate):
        return False
    if not math.isfinite(incumbent):
        return True
    return candidate > incumbent


def resolve_rng(rng: Optional[np.random.Generator] = None, seed: Optional[int] = None) -> np.random.Generator:
    """Use the given generator, or create one from the seed."""
    if rng is not None:
        return rng
    return np.random.default_rng(seed)


def notify(observer: Optional[ProgressObserver], step: ProgressStep):
    if observer is not None:
        observer.on_step(step)


def is_cancelled(cancel_token: Optional[CancellationToken]) -> bool:
    return cancel_token is not None and cancel_token.cancelled


class FitnessOracle:
    """
    Black-box fitness evaluation for gear sets of one dataset.

    Counts evaluations and maps any non-finite fitness to 0.0.
    """

    def __init__(self, dataset, carry_exit_speed: bool = False):
        self.dataset = dataset
        self.carry_exit_speed = carry_exit_speed
        constraints = dataset.gearbox.constraints
        self.min_ratio = constraints.min_ratio
        self.max_ratio = constraints.max_ratio
        self.num_gears = dataset.gearbox.max_gears
        self.evaluations = 0

    def __call__(self, gear_set: GearSet) -> float:
        self.evaluations += 1
        fitness = evaluate_fitness(self.dataset, gear_set.ratios, carry_exit_speed=self.carry_exit_speed)
        return fitness if math.isfinite(fitness) else 0.0

    def initial_gear_set(self) -> GearSet:
        """The dataset's own gear set."""
        return GearSet.from_values(self.dataset.gearbox.gears, self.min_ratio, self.max_ratio)

    def random_gear_set(self, rng: np.random.Generator) -> GearSet:
        return GearSet.random(self.num_gears, self.min_ratio, self.max_ratio, rng)


def build_result(oracle: FitnessOracle, gear_set: GearSet, fitness: float, strategy: str,
                 termination: str = TERMINATION_BUDGET, generation: Optional[int] = None) -> OptimizationResult:
    """Package the best gear set with its derived acceleration time."""
    result = OptimizationResult(
        gear_ratios=gear_set.ratios,
        fitness=fitness,
        accel_time=derived_acceleration_time(oracle.dataset, gear_set.ratios),
        generation=generation,
        strategy=strategy,
        evaluations=oracle.evaluations,
        termination=termination,
    )
    logger.info(
        f"{strategy} finished ({termination}) after {oracle.evaluations} evaluations: "
        f"fitness {fitness:.4f}, gears {[round(r, 3) for r in gear_set.ratios]}, "
        f"accel {result.accel_time:.3f}s"
    )
    return result
