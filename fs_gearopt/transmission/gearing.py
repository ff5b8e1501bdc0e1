"""
Gearing module for the Formula Student gear ratio optimizer.

This module provides the immutable gear set value type used by every optimizer,
together with the drivetrain relations that convert between engine speed,
road speed and tractive force:

1. Total ratio = primary ratio x gear ratio x final drive ratio
2. Engine RPM <-> road speed through the total ratio and wheel radius
3. Wheel force from engine torque, total ratio and gear efficiency

Gear sets are always kept in non-increasing order (gear 1 is the tallest
ratio) and inside the gearbox ratio bounds.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple
import logging

import numpy as np
import pandas as pd

from ..engine.torque_curve import EngineMap
from ..utils.constants import MS_TO_KMH, RPM_TO_RAD_S, TRACTIVE_CURVE_RPM_STEP

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Gearing_System")


def normalize_ratios(ratios: Iterable[float], min_ratio: float, max_ratio: float) -> Tuple[float, ...]:
    """
    Clamp ratios into bounds and sort them tallest first.

    Args:
        ratios: Gear ratios in any order
        min_ratio: Lowest allowed ratio
        max_ratio: Highest allowed ratio

    Returns:
        Tuple of ratios in non-increasing order
    """
    values = np.nan_to_num(np.asarray(list(ratios), dtype=float), nan=min_ratio)
    clipped = np.clip(values, min_ratio, max_ratio)
    return tuple(float(r) for r in sorted(clipped, reverse=True))


def is_normalized(ratios: Sequence[float], min_ratio: float, max_ratio: float) -> bool:
    """True if the ratios are non-increasing and within bounds."""
    if any(r < min_ratio or r > max_ratio for r in ratios):
        return False
    return all(ratios[i] >= ratios[i + 1] for i in range(len(ratios) - 1))


@dataclass(frozen=True)
class GearSet:
    """
    Ordered, bounded sequence of gear ratios.

    Ratios are clamped and sorted on construction, so every instance is sorted
    and within bounds. Perturbations produce new instances.
    """

    ratios: Tuple[float, ...]
    min_ratio: float
    max_ratio: float

    def __post_init__(self) -> None:
        if self.min_ratio > self.max_ratio:
            raise ValueError(f"min_ratio {self.min_ratio} exceeds max_ratio {self.max_ratio}")
        object.__setattr__(self, "ratios", normalize_ratios(self.ratios, self.min_ratio, self.max_ratio))

    @classmethod
    def from_values(cls, values: Iterable[float], min_ratio: float, max_ratio: float) -> 'GearSet':
        """Build a normalised gear set from arbitrary values."""
        return cls(tuple(values), float(min_ratio), float(max_ratio))

    @classmethod
    def random(cls, num_gears: int, min_ratio: float, max_ratio: float,
               rng: np.random.Generator) -> 'GearSet':
        """Draw every ratio uniformly within bounds, then sort tallest first."""
        return cls.from_values(rng.uniform(min_ratio, max_ratio, size=num_gears), min_ratio, max_ratio)

    def with_values(self, values: Iterable[float]) -> 'GearSet':
        """Return a new gear set with the same bounds."""
        return GearSet.from_values(values, self.min_ratio, self.max_ratio)

    def perturbed(self, deltas: Sequence[float]) -> 'GearSet':
        """Return a new gear set with per-gear offsets applied."""
        return self.with_values(r + d for r, d in zip(self.ratios, deltas))

    def as_array(self) -> np.ndarray:
        """Gear ratios as a float array (a copy)."""
        return np.array(self.ratios, dtype=float)

    def __len__(self) -> int:
        return len(self.ratios)

    def __getitem__(self, index: int) -> float:
        return self.ratios[index]


def total_ratio(primary_ratio: float, gear_ratio: float, final_drive_ratio: float) -> float:
    """Overall reduction between crankshaft and wheel."""
    return primary_ratio * gear_ratio * final_drive_ratio


def rpm_from_velocity(velocity: float, overall_ratio: float, wheel_radius: float) -> float:
    """
    Calculate engine speed from road speed.

    Args:
        velocity: Vehicle speed in m/s
        overall_ratio: Total drivetrain ratio
        wheel_radius: Loaded wheel radius in m

    Returns:
        Engine speed in RPM
    """
    return velocity * overall_ratio / (wheel_radius * RPM_TO_RAD_S)


def velocity_from_rpm(rpm: float, overall_ratio: float, wheel_radius: float) -> float:
    """
    Calculate road speed from engine speed.

    Args:
        rpm: Engine speed in RPM
        overall_ratio: Total drivetrain ratio
        wheel_radius: Loaded wheel radius in m

    Returns:
        Vehicle speed in m/s
    """
    if overall_ratio <= 0.0:
        return 0.0
    return rpm * RPM_TO_RAD_S * wheel_radius / overall_ratio


def wheel_force(engine_torque: float, overall_ratio: float, efficiency: float, wheel_radius: float) -> float:
    """Tractive force at the contact patch for a given engine torque."""
    return engine_torque * overall_ratio * efficiency / wheel_radius


def gear_efficiency(efficiency_per_gear: Sequence[float], gear_index: int, default: float) -> float:
    """Efficiency for a zero-based gear index, falling back to the drivetrain value."""
    if 0 <= gear_index < len(efficiency_per_gear):
        return efficiency_per_gear[gear_index]
    return default


def generate_tractive_curves(dataset, gear_set: Optional[GearSet] = None,
                             rpm_step: float = TRACTIVE_CURVE_RPM_STEP) -> pd.DataFrame:
    """
    Generate full-throttle tractive force vs. road speed for every gear.

    Args:
        dataset: ConfigurationDataset supplying engine, gearbox and tire data
        gear_set: Optional gear set overriding the dataset's gears
        rpm_step: RPM spacing between samples

    Returns:
        DataFrame with columns gear, rpm, speed_kmh, engine_torque_nm, force_n
    """
    engine_map = EngineMap.from_dataset(dataset)
    gearbox = dataset.gearbox
    ratios = gear_set.ratios if gear_set is not None else gearbox.gears
    radius = dataset.tire.wheel_radius_m

    rpm_points = np.arange(dataset.engine.idle_rpm, dataset.engine.redline_rpm + 1e-9, rpm_step)
    rows: List[dict] = []

    for index, ratio in enumerate(ratios):
        overall = total_ratio(gearbox.primary_ratio, ratio, gearbox.final_drive_ratio)
        efficiency = gear_efficiency(gearbox.constraints.efficiency_per_gear, index,
                                     dataset.vehicle.drivetrain_efficiency)
        for rpm in rpm_points:
            torque = engine_map.full_load_torque(rpm)
            rows.append({
                'gear': index + 1,
                'rpm': float(rpm),
                'speed_kmh': velocity_from_rpm(rpm, overall, radius) * MS_TO_KMH,
                'engine_torque_nm': torque,
                'force_n': wheel_force(torque, overall, efficiency, radius),
            })

    logger.debug(f"Generated tractive curves for {len(ratios)} gears")
    return pd.DataFrame(rows, columns=['gear', 'rpm', 'speed_kmh', 'engine_torque_nm', 'force_n'])
