"""
Optimization module for the Formula Student gear ratio optimizer.

Four strategies search the gear ratio space, each using the composite event
fitness as a black-box oracle:
1. Random search (baseline)
2. Simulated annealing with Cauchy steps, tunneling and reheating
3. Particle swarm optimization
4. Genetic algorithm with elitism, tournament selection and uniform crossover

All strategies share the result type, progress step records, observers and
cancellation token from the base module; the runner looks them up by name.
"""

# Import shared building blocks
from .base import (
    OptimizationResult,
    SearchStep,
    AnnealingStep,
    ParticleState,
    SwarmStep,
    GeneticStep,
    ProgressObserver,
    StepRecorder,
    CallbackObserver,
    LoggingObserver,
    ObserverGroup,
    CancellationToken,
    FitnessOracle,
    is_better,
    TERMINATION_BUDGET,
    TERMINATION_CONVERGED,
    TERMINATION_CANCELLED
)

# Import strategies
from .random_search import random_search_optimize
from .annealing import AnnealingState, SimulatedAnnealingOptimizer, annealing_optimize
from .swarm import ParticleSwarmOptimizer, particle_swarm_optimize
from .genetic import genetic_optimize

# Import runner
from .runner import (
    STRATEGIES,
    QUICK_BUDGETS,
    get_strategy,
    run_optimizer,
    run_in_background,
    compare_strategies
)

# Define public API
__all__ = [
    # Results and progress
    'OptimizationResult', 'SearchStep', 'AnnealingStep', 'ParticleState',
    'SwarmStep', 'GeneticStep', 'ProgressObserver', 'StepRecorder',
    'CallbackObserver', 'LoggingObserver', 'ObserverGroup', 'CancellationToken', 'FitnessOracle',
    'is_better', 'TERMINATION_BUDGET', 'TERMINATION_CONVERGED', 'TERMINATION_CANCELLED',

    # Strategies
    'random_search_optimize', 'AnnealingState', 'SimulatedAnnealingOptimizer',
    'annealing_optimize', 'ParticleSwarmOptimizer', 'particle_swarm_optimize',
    'genetic_optimize',

    # Runner
    'STRATEGIES', 'QUICK_BUDGETS', 'get_strategy', 'run_optimizer',
    'run_in_background', 'compare_strategies'
]
