"""
Genetic algorithm optimizer.

Each generation is evaluated, summarised in a GeneticStep and then replaced by
the next generation:

1. Elitism: the generation's best individual survives unchanged
2. Tournament selection: the better of two random individuals, drawn twice
3. Uniform crossover: every gene comes from either parent with equal chance
4. Mutation: each gene is offset by a bounded random amount with fixed probability
5. Clamp and re-sort, so every child is a valid gear set
"""

from typing import List, Optional, Sequence
import logging

import numpy as np

from .base import (
    TERMINATION_BUDGET, TERMINATION_CANCELLED, CancellationToken, FitnessOracle,
    GeneticStep, OptimizationResult, ProgressObserver, build_result, is_better,
    is_cancelled, notify, resolve_rng
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Genetic_Algorithm")

STRATEGY_NAME = 'genetic'


def tournament_select(fitnesses: Sequence[float], rng: np.random.Generator) -> int:
    """Index of the better of two uniformly drawn individuals."""
    a = int(rng.integers(len(fitnesses)))
    b = int(rng.integers(len(fitnesses)))
    return a if is_better(fitnesses[a], fitnesses[b]) else b


def uniform_crossover(parent_a, parent_b, rng: np.random.Generator):
    """Child taking each gene from either parent on a coin flip."""
    mask = rng.random(len(parent_a)) < 0.5
    return parent_a.with_values(np.where(mask, parent_a.as_array(), parent_b.as_array()))


def mutate(individual, rng: np.random.Generator, mutation_rate: float, mutation_amplitude: float):
    """Offset each gene by U(-amplitude, amplitude) with probability mutation_rate."""
    n = len(individual)
    mask = rng.random(n) < mutation_rate
    offsets = rng.uniform(-mutation_amplitude, mutation_amplitude, size=n)
    return individual.perturbed(np.where(mask, offsets, 0.0))


def genetic_optimize(dataset,
                     population_size: int = 80,
                     max_generations: int = 200,
                     observer: Optional[ProgressObserver] = None,
                     rng: Optional[np.random.Generator] = None,
                     seed: Optional[int] = None,
                     cancel_token: Optional[CancellationToken] = None,
                     mutation_rate: float = 0.15,
                     mutation_amplitude: float = 0.3,
                     carry_exit_speed: bool = False) -> OptimizationResult:
    """
    Evolve gear sets with a generational genetic algorithm.

    Individual 0 of the initial population is the dataset's gear set; the
    rest are uniform random gear sets. ``max_generations`` counts generations
    that are bred; the initial population is always evaluated, so zero
    generations evaluates the starting population only.

    Args:
        dataset: ConfigurationDataset to optimize
        population_size: Individuals per generation
        max_generations: Number of generations to breed
        observer: Optional sink receiving a GeneticStep per evaluated generation
        rng: Random generator (takes precedence over seed)
        seed: Seed for a new generator
        cancel_token: Optional token checked once per generation
        mutation_rate: Per-gene mutation probability
        mutation_amplitude: Half-width of the mutation offset interval
        carry_exit_speed: Autocross straights keep the previous corner's speed

    Returns:
        OptimizationResult with the best individual ever evaluated and the
        number of generations completed
    """
    if population_size < 1:
        raise ValueError("population_size must be at least 1.")

    rng = resolve_rng(rng, seed)
    oracle = FitnessOracle(dataset, carry_exit_speed=carry_exit_speed)
    termination = TERMINATION_BUDGET

    population: List = [oracle.initial_gear_set()]
    population.extend(oracle.random_gear_set(rng) for _ in range(population_size - 1))

    best, best_fitness = population[0], float('-inf')
    generations_completed = 0

    logger.info(f"Genetic algorithm started: population {population_size}, {max_generations} generations")

    generation = 0
    while True:
        fitnesses = [oracle(individual) for individual in population]

        elite_index = 0
        for i in range(1, len(population)):
            if is_better(fitnesses[i], fitnesses[elite_index]):
                elite_index = i
        elite = population[elite_index]
        if is_better(fitnesses[elite_index], best_fitness):
            best, best_fitness = elite, fitnesses[elite_index]

        notify(observer, GeneticStep(
            generation=generation,
            generation_best_fitness=fitnesses[elite_index],
            avg_fitness=float(np.mean(fitnesses)),
            generation_best_gears=elite.ratios,
            diversity=float(np.std(fitnesses)),
            best_fitness=best_fitness,
            best_gear_ratios=best.ratios,
        ))

        if generation >= max_generations:
            break
        if is_cancelled(cancel_token):
            termination = TERMINATION_CANCELLED
            break

        offspring = [elite]
        while len(offspring) < population_size:
            parent_a = population[tournament_select(fitnesses, rng)]
            parent_b = population[tournament_select(fitnesses, rng)]
            child = uniform_crossover(parent_a, parent_b, rng)
            offspring.append(mutate(child, rng, mutation_rate, mutation_amplitude))

        population = offspring
        generation += 1
        generations_completed = generation
        logger.debug(f"Generation {generation}: best so far {best_fitness:.4f}")

    return build_result(oracle, best, best_fitness, STRATEGY_NAME, termination,
                        generation=generations_completed)
