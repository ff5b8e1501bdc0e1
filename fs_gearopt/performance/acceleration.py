"""
Acceleration event module for the Formula Student gear ratio optimizer.

This module runs the 75 m straight-line acceleration event through the
forward dynamics simulator and reduces the sampled trace to event metrics.
Runs that produce no samples fall back to a sentinel time instead of zero.
"""

from typing import Dict, List, Optional, Sequence
import logging

from ..core.simulator import SimPoint, simulate_acceleration
from ..utils.constants import (
    EVENT_FALLBACK_TIME, FS_ACCELERATION_LENGTH, GRAVITY, MS_TO_KMH, OPTIMIZER_FALLBACK_TIME
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Acceleration_Performance")


def final_time(points: Sequence[SimPoint], fallback: float = EVENT_FALLBACK_TIME) -> float:
    """Time of the last sample, or the fallback for an empty run."""
    if not points:
        return fallback
    return points[-1].time


def run_completed(points: Sequence[SimPoint], distance: float) -> bool:
    """True if the run actually covered the target distance."""
    return bool(points) and points[-1].distance >= distance


def acceleration_time(dataset, distance: float = FS_ACCELERATION_LENGTH) -> float:
    """
    Run the acceleration event and return its time.

    Args:
        dataset: ConfigurationDataset to simulate
        distance: Event length in m

    Returns:
        Event time in s (20 s for a run without samples)
    """
    return final_time(simulate_acceleration(dataset, distance), EVENT_FALLBACK_TIME)


def derived_acceleration_time(dataset, gear_ratios: Optional[Sequence[float]] = None,
                              distance: float = FS_ACCELERATION_LENGTH) -> float:
    """
    Acceleration time reported alongside an optimization result.

    Args:
        dataset: ConfigurationDataset to simulate
        gear_ratios: Optional gear ratios replacing the dataset's gears
        distance: Event length in m

    Returns:
        Event time in s (99 s for a run without samples)
    """
    if gear_ratios is not None:
        dataset = dataset.with_gear_ratios(gear_ratios)
    return final_time(simulate_acceleration(dataset, distance), OPTIMIZER_FALLBACK_TIME)


def analyze_acceleration(points: List[SimPoint], distance: float = FS_ACCELERATION_LENGTH) -> Dict:
    """
    Summarize an acceleration trace.

    Args:
        points: Simulated trace
        distance: Target distance of the run in m

    Returns:
        Dictionary with event time, completion flag and peak values
    """
    if not points:
        return {
            'time': EVENT_FALLBACK_TIME,
            'completed': False,
            'final_speed_kmh': 0.0,
            'peak_accel_g': 0.0,
            'peak_rpm': 0.0,
            'top_gear_used': 0,
            'time_to_100kph': None,
        }

    time_to_100 = None
    for point in points:
        if point.velocity * MS_TO_KMH >= 100.0:
            time_to_100 = point.time
            break

    completed = run_completed(points, distance)
    if not completed:
        logger.warning(f"Acceleration run did not reach {distance}m within {points[-1].time:.2f}s")

    return {
        'time': points[-1].time,
        'completed': completed,
        'final_speed_kmh': points[-1].velocity * MS_TO_KMH,
        'peak_accel_g': max(p.longitudinal_accel for p in points) / GRAVITY,
        'peak_rpm': max(p.rpm for p in points),
        'top_gear_used': max(p.gear for p in points),
        'time_to_100kph': time_to_100,
    }
