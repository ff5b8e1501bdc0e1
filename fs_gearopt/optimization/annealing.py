"""
Simulated annealing optimizer.

The search walks from the dataset's gear set through neighbouring gear sets.
Neighbours are proposed with heavy-tailed (Cauchy) steps scaled by the
temperature, with an occasional large "tunneling" jump. Worse neighbours are
accepted with the Boltzmann probability exp(delta / (T * k)).

State machine:
    SEARCHING  -> CONVERGED   temperature negligible and no improvement for a stall window
    SEARCHING  -> TERMINATED  iteration budget exhausted (or cancelled)

While searching, the temperature cools geometrically every iteration. If the
temperature is already below its floor and the best fitness has stalled for
more than the reheat threshold, the temperature is raised once more (a
bounded number of times) instead of cooling.
"""

from enum import Enum, auto
from typing import Optional
import logging
import math

import numpy as np

from .base import (
    TERMINATION_BUDGET, TERMINATION_CANCELLED, TERMINATION_CONVERGED, AnnealingStep,
    CancellationToken, FitnessOracle, OptimizationResult, ProgressObserver, build_result,
    is_better, is_cancelled, notify, resolve_rng
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Simulated_Annealing")

STRATEGY_NAME = 'annealing'

# Cauchy samples are clipped to this many scale units
CAUCHY_CLIP = 10.0


class AnnealingState(Enum):
    """Search states of the annealing optimizer."""
    SEARCHING = auto()
    CONVERGED = auto()
    TERMINATED = auto()


class SimulatedAnnealingOptimizer:
    """
    Simulated annealing over gear sets.

    Parameters are fixed at construction; ``optimize`` can be called
    repeatedly and each call owns its own working state. ``last_state`` only
    records the outcome of the most recent run.
    """

    def __init__(self,
                 dataset,
                 max_iterations: int = 300,
                 initial_temperature: float = 2.0,
                 cooling_rate: float = 0.985,
                 boltzmann_k: float = 0.1,
                 step_scale: float = 0.25,
                 tunneling_probability: float = 0.05,
                 tunneling_scale: float = 0.5,
                 temperature_floor: float = 0.05,
                 reheat_threshold: int = 30,
                 reheat_temperature: float = 0.5,
                 max_reheats: int = 3,
                 min_temperature: float = 1e-3,
                 stall_window: int = 60,
                 carry_exit_speed: bool = False):
        """
        Initialize the annealing optimizer.

        Args:
            dataset: ConfigurationDataset to optimize
            max_iterations: Iteration budget
            initial_temperature: Starting temperature
            cooling_rate: Geometric cooling factor per iteration (0-1)
            boltzmann_k: Scale of the acceptance exponent
            step_scale: Cauchy step size per unit temperature
            tunneling_probability: Chance of a large jump per proposal
            tunneling_scale: Size of a tunneling jump as a fraction of the ratio span
            temperature_floor: Temperature below which reheating is allowed
            reheat_threshold: Stalled iterations needed before a reheat
            reheat_temperature: Temperature set by a reheat
            max_reheats: Maximum number of reheats per run
            min_temperature: Temperature considered negligible for convergence
            stall_window: Stalled iterations needed for convergence
            carry_exit_speed: Autocross straights keep the previous corner's speed
        """
        if not 0.0 < cooling_rate < 1.0:
            raise ValueError("cooling_rate must be between 0 and 1.")
        self.dataset = dataset
        self.max_iterations = max_iterations
        self.initial_temperature = initial_temperature
        self.cooling_rate = cooling_rate
        self.boltzmann_k = boltzmann_k
        self.step_scale = step_scale
        self.tunneling_probability = tunneling_probability
        self.tunneling_scale = tunneling_scale
        self.temperature_floor = temperature_floor
        self.reheat_threshold = reheat_threshold
        self.reheat_temperature = reheat_temperature
        self.max_reheats = max_reheats
        self.min_temperature = min_temperature
        self.stall_window = stall_window
        self.carry_exit_speed = carry_exit_speed
        # Final state of the most recently finished run; use the result's
        # termination when runs share this instance across threads
        self.last_state: Optional[AnnealingState] = None

    def acceptance_probability(self, delta: float, temperature: float) -> float:
        """Boltzmann acceptance probability for a fitness change."""
        if not math.isfinite(delta):
            return 0.0
        if delta >= 0.0:
            return 1.0
        scale = temperature * self.boltzmann_k
        if scale <= 0.0:
            return 0.0
        return math.exp(delta / scale)

    def propose(self, current, temperature: float, rng: np.random.Generator):
        """
        Propose a neighbour of the current gear set.

        Returns:
            Tuple of (neighbour GearSet, tunneled flag)
        """
        n = len(current)
        steps = np.clip(rng.standard_cauchy(n), -CAUCHY_CLIP, CAUCHY_CLIP) * temperature * self.step_scale
        tunneled = bool(rng.random() < self.tunneling_probability)
        if tunneled:
            span = current.max_ratio - current.min_ratio
            steps = steps + rng.uniform(-1.0, 1.0, size=n) * span * self.tunneling_scale
        return current.perturbed(steps), tunneled

    def optimize(self,
                 observer: Optional[ProgressObserver] = None,
                 rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None,
                 cancel_token: Optional[CancellationToken] = None) -> OptimizationResult:
        """
        Run simulated annealing.

        Args:
            observer: Optional sink receiving an AnnealingStep per iteration
            rng: Random generator (takes precedence over seed)
            seed: Seed for a new generator
            cancel_token: Optional token checked once per iteration

        Returns:
            OptimizationResult with the best gear set visited
        """
        rng = resolve_rng(rng, seed)
        oracle = FitnessOracle(self.dataset, carry_exit_speed=self.carry_exit_speed)

        current = oracle.initial_gear_set()
        current_fitness = oracle(current)
        best, best_fitness = current, current_fitness
        temperature = self.initial_temperature
        stall_count = 0
        reheats = 0
        state = AnnealingState.SEARCHING
        termination = TERMINATION_BUDGET

        logger.info(f"Annealing started: {self.max_iterations} iterations, T0={temperature}")

        for i in range(self.max_iterations):
            if is_cancelled(cancel_token):
                termination = TERMINATION_CANCELLED
                break

            neighbour, tunneled = self.propose(current, temperature, rng)
            neighbour_fitness = oracle(neighbour)
            probability = self.acceptance_probability(neighbour_fitness - current_fitness, temperature)
            accepted = bool(rng.random() < probability)

            if accepted:
                current, current_fitness = neighbour, neighbour_fitness

            if is_better(current_fitness, best_fitness):
                best, best_fitness = current, current_fitness
                stall_count = 0
            else:
                stall_count += 1

            reported_stall = stall_count
            reheated = False
            if (temperature < self.temperature_floor
                    and stall_count > self.reheat_threshold
                    and reheats < self.max_reheats):
                temperature = max(self.reheat_temperature, temperature)
                reheats += 1
                reheated = True
                stall_count = 0
                logger.debug(f"Reheat {reheats} at iteration {i}: T={temperature:.4f}")
            else:
                temperature *= self.cooling_rate

            notify(observer, AnnealingStep(
                iteration=i,
                temperature=temperature,
                fitness=current_fitness,
                gear_ratios=current.ratios,
                accepted=accepted,
                probability=probability,
                tunneled=tunneled,
                reheated=reheated,
                stall_count=reported_stall,
                best_fitness=best_fitness,
                best_gear_ratios=best.ratios,
            ))

            if temperature < self.min_temperature and stall_count >= self.stall_window:
                state = AnnealingState.CONVERGED
                termination = TERMINATION_CONVERGED
                logger.info(f"Annealing converged at iteration {i} (T={temperature:.2e})")
                break

        if state is AnnealingState.SEARCHING:
            state = AnnealingState.TERMINATED
        self.last_state = state

        return build_result(oracle, best, best_fitness, STRATEGY_NAME, termination)


def annealing_optimize(dataset,
                       max_iterations: int = 300,
                       observer: Optional[ProgressObserver] = None,
                       rng: Optional[np.random.Generator] = None,
                       seed: Optional[int] = None,
                       cancel_token: Optional[CancellationToken] = None,
                       **params) -> OptimizationResult:
    """
    Run simulated annealing with default or overridden parameters.

    Args:
        dataset: ConfigurationDataset to optimize
        max_iterations: Iteration budget
        observer: Optional sink receiving an AnnealingStep per iteration
        rng: Random generator (takes precedence over seed)
        seed: Seed for a new generator
        cancel_token: Optional token checked once per iteration
        **params: Further SimulatedAnnealingOptimizer parameters

    Returns:
        OptimizationResult with the best gear set visited
    """
    optimizer = SimulatedAnnealingOptimizer(dataset, max_iterations=max_iterations, **params)
    return optimizer.optimize(observer=observer, rng=rng, seed=seed, cancel_token=cancel_token)
