"""
Random search optimizer.

Draws uniformly random gear sets inside the ratio bounds and keeps the best.
It is the baseline the other strategies are compared against.
"""

from typing import Optional
import logging

import numpy as np

from .base import (
    TERMINATION_BUDGET, TERMINATION_CANCELLED, CancellationToken, FitnessOracle,
    OptimizationResult, ProgressObserver, SearchStep, build_result, is_better,
    is_cancelled, notify, resolve_rng
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Random_Search")

STRATEGY_NAME = 'random'


def random_search_optimize(dataset,
                           iterations: int = 500,
                           observer: Optional[ProgressObserver] = None,
                           rng: Optional[np.random.Generator] = None,
                           seed: Optional[int] = None,
                           cancel_token: Optional[CancellationToken] = None,
                           carry_exit_speed: bool = False) -> OptimizationResult:
    """
    Search for better gear ratios by uniform random sampling.

    The dataset's own gear set is the starting incumbent, so with zero
    iterations it is returned unchanged together with its fitness.

    Args:
        dataset: ConfigurationDataset to optimize
        iterations: Number of random gear sets to evaluate
        observer: Optional sink receiving a SearchStep per iteration
        rng: Random generator (takes precedence over seed)
        seed: Seed for a new generator
        cancel_token: Optional token checked once per iteration
        carry_exit_speed: Autocross straights keep the previous corner's speed

    Returns:
        OptimizationResult with the best gear set found
    """
    rng = resolve_rng(rng, seed)
    oracle = FitnessOracle(dataset, carry_exit_speed=carry_exit_speed)

    best = oracle.initial_gear_set()
    best_fitness = oracle(best)
    termination = TERMINATION_BUDGET

    logger.info(f"Random search started: {iterations} iterations, baseline fitness {best_fitness:.4f}")

    for i in range(iterations):
        if is_cancelled(cancel_token):
            termination = TERMINATION_CANCELLED
            break

        candidate = oracle.random_gear_set(rng)
        fitness = oracle(candidate)
        improved = is_better(fitness, best_fitness)
        if improved:
            best, best_fitness = candidate, fitness

        notify(observer, SearchStep(
            iteration=i,
            fitness=fitness,
            gear_ratios=candidate.ratios,
            improved=improved,
            best_fitness=best_fitness,
            best_gear_ratios=best.ratios,
        ))

    return build_result(oracle, best, best_fitness, STRATEGY_NAME, termination)
