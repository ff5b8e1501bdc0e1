"""
Forward dynamics simulator for the Formula Student gear ratio optimizer.

This module advances a vehicle state through time on a straight line. Each
run starts from a launch condition (launch RPM projected through first gear)
and integrates with a fine forward Euler step until the target distance or
the 20 second cutoff is reached. The model includes:

1. Automatic upshifts at the driver's shift RPM, costing shift time but no distance
2. Engine torque from the RPM x throttle map, clamped to idle/redline
3. Drag and downforce from the speed-indexed aero table
4. Rear-axle traction limit including longitudinal weight transfer and rear downforce

Runs are recomputed from scratch on every call; the simulator holds no state
between calls.
"""

from dataclasses import dataclass
from typing import List, Optional
import logging

import numpy as np

from ..engine.torque_curve import EngineMap
from ..transmission.gearing import (
    gear_efficiency, rpm_from_velocity, total_ratio, velocity_from_rpm, wheel_force
)
from ..utils.constants import (
    GRAVITY, SIM_CUTOFF_TIME, SIM_SAMPLE_INTERVAL, SIM_TIME_STEP
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Forward_Dynamics")


@dataclass(frozen=True)
class SimPoint:
    """
    One sampled instant of a straight-line run.

    Attributes:
        time: Simulated time in s
        distance: Distance travelled in m
        velocity: Vehicle speed in m/s
        longitudinal_accel: Longitudinal acceleration in m/s²
        lateral_accel: Lateral acceleration in m/s² (zero on a straight)
        gear: Active gear, 1-based
        rpm: Engine speed in RPM after clamping to idle/redline
        net_force: Traction-limited wheel force minus drag in N
        throttle: Throttle position (0-1)
        brake: Brake position (0-1)
        front_load: Dynamic front axle normal load in N
        rear_load: Dynamic rear axle normal load in N
        drag: Aerodynamic drag in N
        downforce: Total aerodynamic downforce in N
    """

    time: float
    distance: float
    velocity: float
    longitudinal_accel: float
    lateral_accel: float
    gear: int
    rpm: float
    net_force: float
    throttle: float
    brake: float
    front_load: float
    rear_load: float
    drag: float
    downforce: float


class ForwardDynamicsSimulator:
    """
    Straight-line longitudinal dynamics simulator.

    The simulator is built for one dataset; all lookup tables are prepared in
    the constructor and ``run`` can be called any number of times with
    identical results for identical arguments.
    """

    def __init__(self,
                 dataset,
                 time_step: float = SIM_TIME_STEP,
                 sample_interval: float = SIM_SAMPLE_INTERVAL,
                 max_time: float = SIM_CUTOFF_TIME):
        """
        Initialize the simulator.

        Args:
            dataset: ConfigurationDataset to simulate
            time_step: Internal integration step in s
            sample_interval: Output cadence of SimPoint samples in s
            max_time: Cutoff time for a run in s
        """
        self.dataset = dataset
        self.time_step = time_step
        self.sample_interval = sample_interval
        self.max_time = max_time

        engine = dataset.engine
        gearbox = dataset.gearbox

        # Throttle is constant during a run, so the 2-D map reduces to one curve
        self.throttle = dataset.driver.throttle_aggression
        engine_map = EngineMap.from_dataset(dataset)
        self._torque_rpm, self._torque_values = engine_map.throttle_curve(self.throttle)

        speed_map = dataset.aero.speed_map
        self._aero_speed = np.array([s.speed_mps for s in speed_map], dtype=float)
        self._aero_drag = np.array([s.drag_n for s in speed_map], dtype=float)
        self._aero_df_front = np.array([s.df_front_n for s in speed_map], dtype=float)
        self._aero_df_rear = np.array([s.df_rear_n for s in speed_map], dtype=float)
        order = np.argsort(self._aero_speed)
        self._aero_speed = self._aero_speed[order]
        self._aero_drag = self._aero_drag[order]
        self._aero_df_front = self._aero_df_front[order]
        self._aero_df_rear = self._aero_df_rear[order]

        self.total_ratios = [
            total_ratio(gearbox.primary_ratio, g, gearbox.final_drive_ratio) for g in gearbox.gears
        ]
        self.efficiencies = [
            gear_efficiency(gearbox.constraints.efficiency_per_gear, i, dataset.vehicle.drivetrain_efficiency)
            for i in range(len(gearbox.gears))
        ]
        self.idle_rpm = engine.idle_rpm
        self.redline_rpm = engine.redline_rpm

    def engine_torque(self, rpm: float) -> float:
        """Torque at the driver's throttle, with RPM clamped to the map range."""
        rpm = min(max(rpm, self._torque_rpm[0]), self._torque_rpm[-1])
        return float(np.interp(rpm, self._torque_rpm, self._torque_values))

    def aero_loads(self, velocity: float):
        """
        Interpolate aero loads at the given speed (clamped at the table ends).

        Returns:
            Tuple of (drag, front downforce, rear downforce) in N
        """
        return (
            float(np.interp(velocity, self._aero_speed, self._aero_drag)),
            float(np.interp(velocity, self._aero_speed, self._aero_df_front)),
            float(np.interp(velocity, self._aero_speed, self._aero_df_rear)),
        )

    def launch_velocity(self) -> float:
        """Road speed at launch RPM in first gear."""
        return velocity_from_rpm(self.dataset.driver.launch_rpm, self.total_ratios[0],
                                 self.dataset.tire.wheel_radius_m)

    def select_gear(self, velocity: float) -> int:
        """Lowest gear index whose RPM at this speed stays at or below the shift point."""
        radius = self.dataset.tire.wheel_radius_m
        shift_rpm = self.dataset.driver.shift_rpm
        for index, ratio in enumerate(self.total_ratios):
            if rpm_from_velocity(velocity, ratio, radius) <= shift_rpm:
                return index
        return len(self.total_ratios) - 1

    def run(self, target_distance: float, initial_velocity: Optional[float] = None) -> List[SimPoint]:
        """
        Simulate a straight-line run.

        Args:
            target_distance: Distance to cover in m
            initial_velocity: Optional entry speed in m/s; defaults to the launch condition

        Returns:
            Time-ordered list of SimPoint samples (empty for degenerate input)
        """
        points: List[SimPoint] = []
        if not target_distance > 0.0:
            return points

        vehicle = self.dataset.vehicle
        tire = self.dataset.tire
        mass = vehicle.mass_kg
        effective_mass = mass * vehicle.rotational_inertia_factor
        radius = tire.wheel_radius_m
        mu = tire.mu_longitudinal
        shift_rpm = self.dataset.driver.shift_rpm
        shift_time = self.dataset.engine.gear_shift_time_s
        static_front = mass * GRAVITY * vehicle.weight_distribution_front
        static_rear = mass * GRAVITY * vehicle.weight_distribution_rear
        transfer_gain = mass * vehicle.cg_height_m / vehicle.wheelbase_m
        dt = self.time_step
        num_gears = len(self.total_ratios)

        if initial_velocity is None:
            v = self.launch_velocity()
            gear = 0
        else:
            v = max(float(initial_velocity), 0.0)
            gear = self.select_gear(v)

        t = 0.0
        d = 0.0
        a_prev = 0.0
        next_sample = 0.0
        last = None

        while d < target_distance and t < self.max_time:
            rpm = rpm_from_velocity(v, self.total_ratios[gear], radius)

            # Upshift: time passes, the car does not move and no force is applied
            if rpm > shift_rpm and gear < num_gears - 1:
                gear += 1
                t += shift_time
                if last is not None:
                    # The terminal sample must carry the post-shift time
                    last = (t, d, v, 0.0, gear + 1) + last[5:]
                continue

            rpm = min(max(rpm, self.idle_rpm), self.redline_rpm)
            torque = self.engine_torque(rpm)
            force = wheel_force(torque, self.total_ratios[gear], self.efficiencies[gear], radius)

            drag, df_front, df_rear = self.aero_loads(v)

            transfer = transfer_gain * a_prev
            rear_load = static_rear + transfer + df_rear
            front_load = static_front - transfer + df_front
            force = min(force, max(rear_load, 0.0) * mu)

            net_force = force - drag
            a = net_force / effective_mass
            loads = (gear + 1, rpm, net_force, front_load, rear_load, drag, df_front + df_rear)

            if t >= next_sample:
                points.append(self._sample(t, d, v, a, *loads))
                while next_sample <= t:
                    next_sample += self.sample_interval

            v += a * dt
            d += v * dt
            t += dt
            a_prev = a
            last = (t, d, v, a) + loads

        # Terminal sample at the state that ended the run
        if last is not None and (not points or last[0] > points[-1].time):
            points.append(self._sample(*last))

        if points and points[-1].distance < target_distance:
            logger.warning(f"Run hit the {self.max_time:.1f}s cutoff at {points[-1].distance:.1f}m "
                           f"of {target_distance:.1f}m")

        return points

    def _sample(self, t, d, v, a, gear, rpm, net_force, front_load, rear_load, drag, downforce) -> SimPoint:
        return SimPoint(
            time=t,
            distance=d,
            velocity=v,
            longitudinal_accel=a,
            lateral_accel=0.0,
            gear=gear,
            rpm=rpm,
            net_force=net_force,
            throttle=self.throttle,
            brake=0.0,
            front_load=front_load,
            rear_load=rear_load,
            drag=drag,
            downforce=downforce,
        )


def simulate_acceleration(dataset, target_distance: float = 75.0,
                          initial_velocity: Optional[float] = None) -> List[SimPoint]:
    """
    Simulate a straight-line run for a dataset.

    Args:
        dataset: ConfigurationDataset to simulate
        target_distance: Distance to cover in m
        initial_velocity: Optional entry speed in m/s

    Returns:
        Time-ordered list of SimPoint samples
    """
    return ForwardDynamicsSimulator(dataset).run(target_distance, initial_velocity=initial_velocity)
