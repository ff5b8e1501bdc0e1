"""
Skidpad event module for the Formula Student gear ratio optimizer.

Steady-state constant-radius cornering is solved in closed form. With
downforce proportional to speed squared, the lateral balance

    m * v² / r = mu * (m * g + Cdf * v²)

gives v² = m * g * mu / (m / r - Cdf * mu). When the aero term overwhelms the
inertial term the denominator is non-positive; that configuration is
reported as zero cornering speed and an infinite event time.
"""

import logging
import math

from ..utils.constants import FS_SKIDPAD_LAPS, FS_SKIDPAD_RADIUS, GRAVITY

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Skidpad_Performance")


def skidpad_velocity(dataset, radius: float = FS_SKIDPAD_RADIUS) -> float:
    """
    Steady-state cornering speed on a circle.

    Args:
        dataset: ConfigurationDataset providing mass, grip and aero
        radius: Circle radius in m

    Returns:
        Cornering speed in m/s (0.0 for a degenerate configuration)
    """
    mass = dataset.vehicle.mass_kg
    mu = dataset.tire.mu_lateral
    downforce_term = dataset.aero.downforce_term

    denominator = mass / radius - downforce_term * mu
    if denominator <= 0.0:
        logger.debug(
            f"Skidpad solve is degenerate: m/r = {mass / radius:.3f} <= Cdf*mu = {downforce_term * mu:.3f}"
        )
        return 0.0

    v_squared = mass * GRAVITY * mu / denominator
    return math.sqrt(max(0.0, v_squared))


def skidpad_time(dataset, radius: float = FS_SKIDPAD_RADIUS, laps: int = FS_SKIDPAD_LAPS) -> float:
    """
    Time for the timed skidpad laps.

    Args:
        dataset: ConfigurationDataset providing mass, grip and aero
        radius: Circle radius in m
        laps: Number of full circles timed

    Returns:
        Event time in s (math.inf when the cornering speed is zero)
    """
    velocity = skidpad_velocity(dataset, radius)
    if velocity <= 0.0:
        return math.inf
    return laps * 2.0 * math.pi * radius / velocity


def skidpad_lateral_g(dataset, radius: float = FS_SKIDPAD_RADIUS) -> float:
    """Lateral acceleration at the steady-state cornering speed, in g."""
    velocity = skidpad_velocity(dataset, radius)
    return velocity ** 2 / radius / GRAVITY
