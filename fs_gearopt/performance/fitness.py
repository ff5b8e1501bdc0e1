"""
Fitness function for the Formula Student gear ratio optimizer.

The composite fitness combines the three event times:

    fitness = 10 * (w_accel / t_accel + w_skid / t_skid + w_auto / t_auto)

Every evaluation reruns all events from scratch. Any event time that is not
finite or not positive, or a simulated run that stops short of its distance,
marks the configuration as worst case and the fitness is 0.0.
"""

from dataclasses import dataclass
from typing import Optional, Sequence
import logging
import math

from ..core.simulator import simulate_acceleration
from ..utils.constants import EVENT_FALLBACK_TIME, FITNESS_SCALE, FS_ACCELERATION_LENGTH, MIN_EVENT_TIME
from .acceleration import final_time, run_completed
from .autocross import DEFAULT_COURSE, autocross_breakdown, straights_completed
from .skidpad import skidpad_time

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Fitness_Function")


@dataclass(frozen=True)
class EventTimes:
    """Event times in seconds for one configuration."""

    acceleration: float
    skidpad: float
    autocross: float
    acceleration_completed: bool = True
    autocross_completed: bool = True

    @property
    def valid(self) -> bool:
        """Whether all three times can be used for a fitness value."""
        for value in (self.acceleration, self.skidpad, self.autocross):
            if not math.isfinite(value) or value <= MIN_EVENT_TIME:
                return False
        if not (self.acceleration_completed and self.autocross_completed):
            return False
        return self.acceleration < EVENT_FALLBACK_TIME


def evaluate_event_times(dataset, gear_ratios: Optional[Sequence[float]] = None,
                         carry_exit_speed: bool = False) -> EventTimes:
    """
    Run the three events for a configuration.

    Args:
        dataset: ConfigurationDataset to evaluate
        gear_ratios: Optional gear ratios replacing the dataset's gears
        carry_exit_speed: Autocross straights keep the previous corner's speed

    Returns:
        EventTimes for the configuration
    """
    if gear_ratios is not None:
        dataset = dataset.with_gear_ratios(gear_ratios)

    points = simulate_acceleration(dataset, FS_ACCELERATION_LENGTH)
    breakdown = autocross_breakdown(dataset, DEFAULT_COURSE, carry_exit_speed)
    return EventTimes(
        acceleration=final_time(points, EVENT_FALLBACK_TIME),
        acceleration_completed=run_completed(points, FS_ACCELERATION_LENGTH),
        skidpad=skidpad_time(dataset),
        autocross=sum(s['time'] for s in breakdown),
        autocross_completed=straights_completed(breakdown),
    )


def fitness_from_times(times: EventTimes, weights) -> float:
    """
    Combine event times into the composite fitness.

    Args:
        times: Event times of one configuration
        weights: FitnessWeights of the dataset

    Returns:
        Fitness value (higher is better, 0.0 for an invalid configuration)
    """
    if not times.valid:
        return 0.0

    fitness = FITNESS_SCALE * (
        weights.acceleration / times.acceleration
        + weights.skidpad / times.skidpad
        + weights.autocross / times.autocross
    )
    return fitness if math.isfinite(fitness) else 0.0


def evaluate_fitness(dataset, gear_ratios: Optional[Sequence[float]] = None,
                     carry_exit_speed: bool = False) -> float:
    """
    Evaluate the composite fitness of a configuration.

    Args:
        dataset: ConfigurationDataset to evaluate
        gear_ratios: Optional gear ratios replacing the dataset's gears
        carry_exit_speed: Autocross straights keep the previous corner's speed

    Returns:
        Fitness value (higher is better)
    """
    if gear_ratios is not None:
        dataset = dataset.with_gear_ratios(gear_ratios)
    times = evaluate_event_times(dataset, carry_exit_speed=carry_exit_speed)
    return fitness_from_times(times, dataset.fitness_weights)
