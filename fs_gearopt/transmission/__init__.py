"""
Transmission module for the Formula Student gear ratio optimizer.

This module provides the GearSet value type searched by the optimizers and the
drivetrain relations between engine speed, road speed and tractive force.
"""

from .gearing import (
    GearSet,
    normalize_ratios,
    is_normalized,
    total_ratio,
    rpm_from_velocity,
    velocity_from_rpm,
    wheel_force,
    gear_efficiency,
    generate_tractive_curves
)

# Define public API
__all__ = [
    'GearSet', 'normalize_ratios', 'is_normalized',
    'total_ratio', 'rpm_from_velocity', 'velocity_from_rpm',
    'wheel_force', 'gear_efficiency', 'generate_tractive_curves'
]
