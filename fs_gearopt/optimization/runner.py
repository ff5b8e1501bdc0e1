"""
Strategy registry and execution helpers for the gear ratio optimizers.

Optimizers are plain synchronous calls. This module looks them up by name,
runs them on a worker thread when the caller must stay responsive, and runs
all of them side by side for comparison.
"""

from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Dict, Iterable, Optional
import logging
import time

import numpy as np
import pandas as pd

from .annealing import annealing_optimize
from .base import CancellationToken, OptimizationResult, ProgressObserver
from .genetic import genetic_optimize
from .random_search import random_search_optimize
from .swarm import particle_swarm_optimize

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Optimization_Runner")

STRATEGIES: Dict[str, Callable[..., OptimizationResult]] = {
    'random': random_search_optimize,
    'annealing': annealing_optimize,
    'swarm': particle_swarm_optimize,
    'genetic': genetic_optimize,
}

# Reduced budgets for a quick side-by-side comparison
QUICK_BUDGETS: Dict[str, Dict] = {
    'random': {'iterations': 60},
    'annealing': {'max_iterations': 60},
    'swarm': {'num_particles': 10, 'max_iterations': 6},
    'genetic': {'population_size': 10, 'max_generations': 6},
}


def get_strategy(name: str) -> Callable[..., OptimizationResult]:
    """
    Look up an optimizer by name.

    Raises:
        ValueError: If the name is not a registered strategy
    """
    try:
        return STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Unknown strategy '{name}'. Available: {', '.join(STRATEGIES)}") from None


def run_optimizer(name: str, dataset,
                  observer: Optional[ProgressObserver] = None,
                  seed: Optional[int] = None,
                  rng: Optional[np.random.Generator] = None,
                  cancel_token: Optional[CancellationToken] = None,
                  **params) -> OptimizationResult:
    """
    Run one optimizer synchronously.

    Args:
        name: Strategy name ('random', 'annealing', 'swarm' or 'genetic')
        dataset: ConfigurationDataset to optimize
        observer: Optional progress sink
        seed: Seed for the strategy's random generator
        rng: Random generator (takes precedence over seed)
        cancel_token: Optional cancellation token
        **params: Budgets and coefficients of the strategy

    Returns:
        OptimizationResult of the run
    """
    optimizer = get_strategy(name)
    return optimizer(dataset, observer=observer, rng=rng, seed=seed, cancel_token=cancel_token, **params)


def run_in_background(name: str, dataset,
                      executor: Optional[Executor] = None,
                      observer: Optional[ProgressObserver] = None,
                      seed: Optional[int] = None,
                      cancel_token: Optional[CancellationToken] = None,
                      **params) -> Future:
    """
    Submit an optimizer run to a worker thread.

    The run gets its own generator built from ``seed``, so concurrent runs
    never share random state. The observer is invoked on the worker thread.

    Args:
        name: Strategy name
        dataset: ConfigurationDataset to optimize
        executor: Executor to submit to (a single-worker thread pool if omitted)
        observer: Optional progress sink
        seed: Seed for the run's random generator
        cancel_token: Optional cancellation token
        **params: Budgets and coefficients of the strategy

    Returns:
        Future resolving to the OptimizationResult
    """
    optimizer = get_strategy(name)
    rng = np.random.default_rng(seed)

    if executor is None:
        owned = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"gearopt-{name}")
        future = owned.submit(optimizer, dataset, observer=observer, rng=rng,
                              cancel_token=cancel_token, **params)
        owned.shutdown(wait=False)
    else:
        future = executor.submit(optimizer, dataset, observer=observer, rng=rng,
                                 cancel_token=cancel_token, **params)

    logger.info(f"Submitted '{name}' optimizer to background worker")
    return future


def _timed_run(name: str, dataset, seed: Optional[int], params: Dict):
    start = time.perf_counter()
    result = run_optimizer(name, dataset, seed=seed, **params)
    return result, time.perf_counter() - start


def compare_strategies(dataset,
                       strategies: Optional[Iterable[str]] = None,
                       seed: Optional[int] = 0,
                       budgets: Optional[Dict[str, Dict]] = None,
                       parallel: bool = False,
                       max_workers: Optional[int] = None) -> pd.DataFrame:
    """
    Run several strategies on the same dataset and tabulate the results.

    Args:
        dataset: ConfigurationDataset to optimize
        strategies: Strategy names (all registered strategies if omitted)
        seed: Seed shared by every strategy, each with its own generator
        budgets: Per-strategy keyword arguments (defaults of each strategy if omitted)
        parallel: Run strategies on a thread pool
        max_workers: Thread pool size when parallel

    Returns:
        DataFrame with one row per strategy, best fitness first
    """
    names = list(strategies) if strategies is not None else list(STRATEGIES)
    if not names:
        raise ValueError("At least one strategy is required for a comparison.")
    for name in names:
        get_strategy(name)
    budgets = budgets or {}

    if parallel and len(names) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(_timed_run, name, dataset, seed, budgets.get(name, {}))
                       for name in names]
            outcomes = [future.result() for future in futures]
    else:
        outcomes = [_timed_run(name, dataset, seed, budgets.get(name, {})) for name in names]

    rows = []
    for name, (result, elapsed) in zip(names, outcomes):
        rows.append({
            'strategy': name,
            'fitness': result.fitness,
            'accel_time': result.accel_time,
            'evaluations': result.evaluations,
            'termination': result.termination,
            'elapsed_s': elapsed,
            'gear_ratios': tuple(round(r, 4) for r in result.gear_ratios),
        })

    df = pd.DataFrame(rows)
    df = df.sort_values('fitness', ascending=False, kind='stable').reset_index(drop=True)
    logger.info(f"Compared {len(names)} strategies; best: {df.loc[0, 'strategy']}")
    return df
