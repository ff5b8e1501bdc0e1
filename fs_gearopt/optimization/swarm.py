"""
Particle swarm optimizer.

Canonical PSO with fixed inertia, cognitive and social coefficients. Every
particle is a gear set position with a velocity vector. After each move the
position is clamped to the ratio bounds and re-sorted tallest first, so every
evaluated position is a valid gear set.
"""

from typing import List, Optional
import logging

import numpy as np

from .base import (
    TERMINATION_BUDGET, TERMINATION_CANCELLED, CancellationToken, FitnessOracle,
    OptimizationResult, ParticleState, ProgressObserver, SwarmStep, build_result,
    is_better, is_cancelled, notify, resolve_rng
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Particle_Swarm")

STRATEGY_NAME = 'swarm'


class Particle:
    """Mutable working state of one swarm member."""

    def __init__(self, position, velocity: np.ndarray, fitness: float):
        self.position = position
        self.velocity = velocity
        self.fitness = fitness
        self.best_position = position
        self.best_fitness = fitness

    def snapshot(self) -> ParticleState:
        return ParticleState(position=self.position.ratios, fitness=self.fitness)


class ParticleSwarmOptimizer:
    """
    Particle swarm search over gear sets.

    Particle 0 starts at the dataset's gear set; the others start at uniform
    random gear sets. Initial velocities are drawn from (-0.25, 0.25).
    """

    def __init__(self,
                 dataset,
                 num_particles: int = 50,
                 max_iterations: int = 100,
                 inertia: float = 0.7,
                 cognitive: float = 1.5,
                 social: float = 1.5,
                 initial_velocity_scale: float = 0.5,
                 carry_exit_speed: bool = False):
        """
        Initialize the swarm optimizer.

        Args:
            dataset: ConfigurationDataset to optimize
            num_particles: Swarm size
            max_iterations: Number of swarm iterations
            inertia: Weight of the previous velocity
            cognitive: Attraction towards the particle's own best
            social: Attraction towards the swarm's best
            initial_velocity_scale: Width of the initial velocity interval
            carry_exit_speed: Autocross straights keep the previous corner's speed
        """
        if num_particles < 1:
            raise ValueError("num_particles must be at least 1.")
        self.dataset = dataset
        self.num_particles = num_particles
        self.max_iterations = max_iterations
        self.inertia = inertia
        self.cognitive = cognitive
        self.social = social
        self.initial_velocity_scale = initial_velocity_scale
        self.carry_exit_speed = carry_exit_speed

    def _initialize(self, oracle: FitnessOracle, rng: np.random.Generator) -> List[Particle]:
        particles = []
        for i in range(self.num_particles):
            position = oracle.initial_gear_set() if i == 0 else oracle.random_gear_set(rng)
            velocity = (rng.random(len(position)) - 0.5) * self.initial_velocity_scale
            particles.append(Particle(position, velocity, oracle(position)))
        return particles

    def _move(self, particle: Particle, global_best, rng: np.random.Generator):
        """Update one particle's velocity and position in place."""
        position = particle.position.as_array()
        r1 = rng.random(len(position))
        r2 = rng.random(len(position))
        particle.velocity = (
            self.inertia * particle.velocity
            + self.cognitive * r1 * (particle.best_position.as_array() - position)
            + self.social * r2 * (global_best.as_array() - position)
        )
        particle.position = particle.position.with_values(position + particle.velocity)

    def optimize(self,
                 observer: Optional[ProgressObserver] = None,
                 rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None,
                 cancel_token: Optional[CancellationToken] = None) -> OptimizationResult:
        """
        Run the particle swarm.

        Args:
            observer: Optional sink receiving a SwarmStep per iteration
            rng: Random generator (takes precedence over seed)
            seed: Seed for a new generator
            cancel_token: Optional token checked once per iteration

        Returns:
            OptimizationResult with the swarm's global best
        """
        rng = resolve_rng(rng, seed)
        oracle = FitnessOracle(self.dataset, carry_exit_speed=self.carry_exit_speed)
        termination = TERMINATION_BUDGET

        particles = self._initialize(oracle, rng)
        leader = particles[0]
        for particle in particles[1:]:
            if is_better(particle.fitness, leader.fitness):
                leader = particle
        global_best, global_best_fitness = leader.position, leader.fitness

        logger.info(f"Swarm started: {self.num_particles} particles x {self.max_iterations} iterations, "
                    f"initial best {global_best_fitness:.4f}")

        for i in range(self.max_iterations):
            if is_cancelled(cancel_token):
                termination = TERMINATION_CANCELLED
                break

            for particle in particles:
                self._move(particle, global_best, rng)
                particle.fitness = oracle(particle.position)

                if is_better(particle.fitness, particle.best_fitness):
                    particle.best_position = particle.position
                    particle.best_fitness = particle.fitness
                if is_better(particle.fitness, global_best_fitness):
                    global_best = particle.position
                    global_best_fitness = particle.fitness

            notify(observer, SwarmStep(
                iteration=i,
                particles=tuple(p.snapshot() for p in particles),
                global_best=global_best.ratios,
                global_best_fitness=global_best_fitness,
            ))

        return build_result(oracle, global_best, global_best_fitness, STRATEGY_NAME, termination)


def particle_swarm_optimize(dataset,
                            num_particles: int = 50,
                            max_iterations: int = 100,
                            observer: Optional[ProgressObserver] = None,
                            rng: Optional[np.random.Generator] = None,
                            seed: Optional[int] = None,
                            cancel_token: Optional[CancellationToken] = None,
                            **params) -> OptimizationResult:
    """
    Run the particle swarm with default or overridden parameters.

    Args:
        dataset: ConfigurationDataset to optimize
        num_particles: Swarm size
        max_iterations: Number of swarm iterations
        observer: Optional sink receiving a SwarmStep per iteration
        rng: Random generator (takes precedence over seed)
        seed: Seed for a new generator
        cancel_token: Optional token checked once per iteration
        **params: Further ParticleSwarmOptimizer parameters

    Returns:
        OptimizationResult with the swarm's global best
    """
    optimizer = ParticleSwarmOptimizer(dataset, num_particles=num_particles,
                                       max_iterations=max_iterations, **params)
    return optimizer.optimize(observer=observer, rng=rng, seed=seed, cancel_token=cancel_token)
