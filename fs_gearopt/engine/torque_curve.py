"""
Torque curve module for the Formula Student gear ratio optimizer.

This module turns the tabulated engine data of a configuration dataset into
lookup functions used by the forward dynamics simulator:

- A 1-D full-load torque curve (torque vs. RPM)
- A 2-D part-load map (torque vs. RPM x throttle position)

All lookups clamp their inputs to the table range first, so values at or
beyond the first/last breakpoint return the boundary value and nothing is
ever extrapolated.
"""

from typing import Sequence, Tuple
import logging

import numpy as np
from scipy.interpolate import RegularGridInterpolator, interp1d

from ..utils.constants import RPM_TO_RAD_S

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Engine_Map")


class EngineMap:
    """
    Engine torque lookups built from tabulated dyno data.

    The full-load curve and the throttle map are independent tables; the
    simulator uses the throttle map, the tractive curve generator uses the
    full-load curve.
    """

    def __init__(self,
                 curve_rpm: Sequence[float],
                 curve_torque: Sequence[float],
                 map_rpm: Sequence[float],
                 map_throttle_pct: Sequence[float],
                 map_torque: Sequence[Sequence[float]]):
        """
        Initialize the engine map.

        Args:
            curve_rpm: RPM breakpoints of the full-load torque curve
            curve_torque: Torque in Nm at each curve breakpoint
            map_rpm: RPM breakpoints of the throttle map
            map_throttle_pct: Throttle breakpoints in percent (e.g. 20..100)
            map_torque: Torque in Nm, one row per map RPM, one column per throttle
        """
        curve_rpm = np.asarray(curve_rpm, dtype=float)
        curve_torque = np.asarray(curve_torque, dtype=float)
        if curve_rpm.size == 0 or curve_rpm.size != curve_torque.size:
            raise ValueError("Torque curve needs matching, non-empty RPM and torque arrays")

        # Sort data by RPM (in case it's not already sorted)
        idx = np.argsort(curve_rpm)
        self.curve_rpm = curve_rpm[idx]
        self.curve_torque = curve_torque[idx]

        map_rpm = np.asarray(map_rpm, dtype=float)
        map_torque = np.asarray(map_torque, dtype=float)
        if map_rpm.size == 0:
            raise ValueError("Throttle map needs at least one RPM row")
        map_idx = np.argsort(map_rpm)
        self.map_rpm = map_rpm[map_idx]
        self.map_torque = map_torque[map_idx] if map_torque.ndim == 2 else map_torque
        self.map_throttle_pct = np.asarray(map_throttle_pct, dtype=float)
        if self.map_torque.shape != (self.map_rpm.size, self.map_throttle_pct.size):
            raise ValueError(
                f"Throttle map shape {self.map_torque.shape} does not match "
                f"{self.map_rpm.size} RPM x {self.map_throttle_pct.size} throttle breakpoints"
            )

        self._create_interpolation_functions()

    @classmethod
    def from_dataset(cls, dataset) -> 'EngineMap':
        """Build the engine map from a ConfigurationDataset."""
        engine = dataset.engine
        return cls(
            curve_rpm=[p.rpm for p in engine.torque_curve],
            curve_torque=[p.torque_nm for p in engine.torque_curve],
            map_rpm=[row.rpm for row in engine.throttle_map],
            map_throttle_pct=engine.throttle_positions_pct,
            map_torque=[row.torque_nm for row in engine.throttle_map],
        )

    def _create_interpolation_functions(self):
        """Create interpolation functions for the torque curve and throttle map."""
        if self.curve_rpm.size > 1:
            self.torque_function = interp1d(
                self.curve_rpm, self.curve_torque,
                kind='linear',
                bounds_error=False,
                fill_value=(self.curve_torque[0], self.curve_torque[-1])
            )
        else:
            constant = float(self.curve_torque[0])
            self.torque_function = lambda rpm: np.full_like(np.asarray(rpm, dtype=float), constant)

        # Grid interpolation needs at least two breakpoints per axis
        if self.map_rpm.size > 1 and self.map_throttle_pct.size > 1:
            self.map_function = RegularGridInterpolator(
                (self.map_rpm, self.map_throttle_pct), self.map_torque, method='linear'
            )
        else:
            self.map_function = None

    def full_load_torque(self, rpm: float) -> float:
        """
        Get the full-load torque at the given engine speed.

        Args:
            rpm: Engine speed in RPM

        Returns:
            Torque in Nm (boundary value outside the curve)
        """
        rpm = float(np.clip(rpm, self.curve_rpm[0], self.curve_rpm[-1]))
        return float(self.torque_function(rpm))

    def part_load_torque(self, rpm: float, throttle: float) -> float:
        """
        Get the torque from the throttle map.

        Args:
            rpm: Engine speed in RPM
            throttle: Throttle position as a fraction (0-1)

        Returns:
            Torque in Nm
        """
        return float(self.torque_slice(throttle, np.array([rpm]))[0])

    def torque_slice(self, throttle: float, rpm_points: np.ndarray) -> np.ndarray:
        """
        Evaluate the throttle map at a fixed throttle for several engine speeds.

        Args:
            throttle: Throttle position as a fraction (0-1)
            rpm_points: Engine speeds in RPM

        Returns:
            Array of torque values in Nm
        """
        rpm_points = np.clip(np.asarray(rpm_points, dtype=float), self.map_rpm[0], self.map_rpm[-1])
        throttle_pct = float(np.clip(throttle * 100.0, self.map_throttle_pct[0], self.map_throttle_pct[-1]))

        if self.map_function is not None:
            query = np.column_stack([rpm_points, np.full(rpm_points.shape, throttle_pct)])
            return self.map_function(query)

        # Degenerate map: interpolate along whichever axis has breakpoints
        if self.map_rpm.size > 1:
            column = self.map_torque[:, 0]
            return np.interp(rpm_points, self.map_rpm, column)
        row = self.map_torque[0, :]
        if self.map_throttle_pct.size > 1:
            return np.full(rpm_points.shape, np.interp(throttle_pct, self.map_throttle_pct, row))
        return np.full(rpm_points.shape, row[0])

    def throttle_curve(self, throttle: float) -> Tuple[np.ndarray, np.ndarray]:
        """
        Reduce the throttle map to a 1-D torque curve at a fixed throttle.

        Returns:
            Tuple of (rpm breakpoints, torque in Nm)
        """
        return self.map_rpm.copy(), self.torque_slice(throttle, self.map_rpm)

    def find_peak_torque(self) -> Tuple[float, float]:
        """
        Find the peak of the full-load torque curve.

        Returns:
            Tuple of (rpm, torque)
        """
        idx = int(np.argmax(self.curve_torque))
        return float(self.curve_rpm[idx]), float(self.curve_torque[idx])

    def find_peak_power(self) -> Tuple[float, float]:
        """
        Find the peak of the full-load power curve.

        Returns:
            Tuple of (rpm, power in kW)
        """
        power_kw = self.curve_torque * self.curve_rpm * RPM_TO_RAD_S / 1000.0
        idx = int(np.argmax(power_kw))
        return float(self.curve_rpm[idx]), float(power_kw[idx])
