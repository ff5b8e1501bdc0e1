"""
Validation utilities for the Formula Student gear ratio optimizer.

This module checks configurations and simulation results for plausibility:
inputs against typical Formula Student ranges, event times against expected
event results, and simulated traces against the dataset's limits. Checks only
report; they never change a configuration or stop a simulation.
"""

from typing import Dict, List, Optional, Sequence, Tuple
import logging
import math

from ..utils.constants import GRAVITY

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Validation")


# Expected ranges for Formula Student vehicles
FS_PERFORMANCE_RANGES = {
    # Event times
    'acceleration_time': (3.5, 6.0),    # 75m acceleration time (s)
    'skidpad_time': (8.0, 14.0),        # Two timed skidpad laps (s)
    'time_to_100kph': (2.8, 5.2),       # 0-100 km/h time (s)

    # Speed metrics
    'speed_at_end_of_accel': (80.0, 130.0),  # Speed at end of acceleration event (km/h)

    # Lateral acceleration
    'lateral_acceleration': (1.2, 2.2),  # Skidpad lateral acceleration (g)

    # Vehicle metrics
    'power_to_weight': (0.15, 0.3),     # Power-to-weight ratio (kW/kg)
    'vehicle_mass': (180.0, 320.0),     # Vehicle mass incl. driver (kg)
    'weight_distribution': (0.4, 0.5),  # Front weight distribution (fraction)
}

# Relative error thresholds
VALIDATION_THRESHOLDS = {
    'critical_error': 0.25,
    'warning': 0.15,
    'acceptable': 0.05,
}

_STATUS_ORDER = ('critical_error', 'warning', 'acceptable', 'good', 'valid')


def validate_in_range(value: float, metric_name: str,
                      custom_range: Optional[Tuple[float, float]] = None) -> Dict:
    """
    Validate if a value is within expected range for a metric.

    Args:
        value: Value to validate
        metric_name: Name of the metric to check
        custom_range: Optional custom range override

    Returns:
        Dictionary with validation results
    """
    if custom_range:
        expected_range = custom_range
    elif metric_name in FS_PERFORMANCE_RANGES:
        expected_range = FS_PERFORMANCE_RANGES[metric_name]
    else:
        logger.warning(f"No expected range found for metric: {metric_name}")
        return {
            'status': 'unknown',
            'metric': metric_name,
            'value': value,
            'expected_range': None,
            'message': f"No expected range defined for {metric_name}"
        }

    min_value, max_value = expected_range

    if not math.isfinite(value):
        return {
            'status': 'critical_error',
            'metric': metric_name,
            'value': value,
            'expected_range': expected_range,
            'relative_error': math.inf,
            'message': f"{metric_name} is not finite"
        }

    if value < min_value:
        relative_error = (min_value - value) / min_value if min_value else math.inf
        message = f"{metric_name} ({value:.3f}) is below expected minimum ({min_value:.3f})"
    elif value > max_value:
        relative_error = (value - max_value) / max_value if max_value else math.inf
        message = f"{metric_name} ({value:.3f}) is above expected maximum ({max_value:.3f})"
    else:
        return {
            'status': 'valid',
            'metric': metric_name,
            'value': value,
            'expected_range': expected_range,
            'relative_error': 0.0,
            'message': f"{metric_name} ({value:.3f}) is within expected range ({min_value:.3f} - {max_value:.3f})"
        }

    return {
        'status': _determine_validation_status(relative_error),
        'metric': metric_name,
        'value': value,
        'expected_range': expected_range,
        'relative_error': relative_error,
        'message': message
    }


def _determine_validation_status(relative_error: float) -> str:
    if relative_error >= VALIDATION_THRESHOLDS['critical_error']:
        return 'critical_error'
    elif relative_error >= VALIDATION_THRESHOLDS['warning']:
        return 'warning'
    elif relative_error >= VALIDATION_THRESHOLDS['acceptable']:
        return 'acceptable'
    else:
        return 'good'


def _overall_status(results: Dict[str, Dict]) -> str:
    statuses = {r['status'] for r in results.values()}
    for status in _STATUS_ORDER:
        if status in statuses:
            return status
    return 'valid'


def validate_dataset(dataset) -> Dict:
    """
    Check a configuration dataset against typical Formula Student values.

    Besides the range checks, a configuration whose downforce overwhelms its
    mass on the skidpad circle is flagged, since its skidpad time is infinite.

    Args:
        dataset: ConfigurationDataset to check

    Returns:
        Dictionary with overall status, per-metric results and warnings
    """
    # Imported here; the performance package itself depends on utils
    from ..performance.skidpad import skidpad_velocity

    vehicle = dataset.vehicle
    results = {
        'vehicle_mass': validate_in_range(vehicle.mass_kg, 'vehicle_mass'),
        'weight_distribution': validate_in_range(vehicle.weight_distribution_front, 'weight_distribution'),
    }
    if vehicle.mass_kg > 0:
        results['power_to_weight'] = validate_in_range(
            dataset.engine.max_power_kw / vehicle.mass_kg, 'power_to_weight')

    warnings: List[str] = []

    if skidpad_velocity(dataset) <= 0.0:
        warnings.append("Downforce exceeds the skidpad inertial term; skidpad time is infinite")

    launch_rpm = dataset.driver.launch_rpm
    if launch_rpm < dataset.engine.idle_rpm or launch_rpm > dataset.engine.redline_rpm:
        warnings.append(f"Launch RPM {launch_rpm:.0f} is outside idle/redline and will be clamped")

    if dataset.driver.shift_rpm > dataset.engine.redline_rpm:
        warnings.append(f"Shift RPM {dataset.driver.shift_rpm:.0f} is above redline "
                        f"{dataset.engine.redline_rpm:.0f}")

    if dataset.limits.max_rpm < dataset.driver.shift_rpm:
        warnings.append(f"Shift RPM {dataset.driver.shift_rpm:.0f} exceeds the RPM limit "
                        f"{dataset.limits.max_rpm:.0f}")

    for warning in warnings:
        logger.warning(warning)

    status = _overall_status(results)
    if warnings and status in ('valid', 'good', 'acceptable'):
        status = 'warning'

    return {
        'status': status,
        'metric_validations': results,
        'warnings': warnings,
        'message': f"Dataset '{dataset.name}' validation overall status: {status}"
    }


def validate_event_times(times) -> Dict:
    """
    Compare event times with typical Formula Student results.

    Args:
        times: EventTimes of one configuration

    Returns:
        Dictionary with overall status and per-event results
    """
    results = {
        'acceleration_time': validate_in_range(times.acceleration, 'acceleration_time'),
        'skidpad_time': validate_in_range(times.skidpad, 'skidpad_time'),
    }
    status = _overall_status(results)
    return {
        'status': status,
        'metric_validations': results,
        'message': f"Event time validation overall status: {status}"
    }


def check_trace_limits(dataset, points: Sequence) -> Dict:
    """
    Check a simulated trace against the dataset's plausibility limits.

    Wheel torque is estimated from the traction-limited force (net force plus
    drag) times the wheel radius.

    Args:
        dataset: ConfigurationDataset that produced the trace
        points: SimPoint samples of one run

    Returns:
        Dictionary with the peak values, the violated limits and a flag
    """
    limits = dataset.limits
    radius = dataset.tire.wheel_radius_m

    if not points:
        return {'within_limits': True, 'peaks': {}, 'violations': []}

    peaks = {
        'rpm': max(p.rpm for p in points),
        'longitudinal_g': max(abs(p.longitudinal_accel) for p in points) / GRAVITY,
        'lateral_g': max(abs(p.lateral_accel) for p in points) / GRAVITY,
        'wheel_torque_nm': max((p.net_force + p.drag) * radius for p in points),
    }
    caps = {
        'rpm': limits.max_rpm,
        'longitudinal_g': limits.max_longitudinal_g,
        'lateral_g': limits.max_lateral_g,
        'wheel_torque_nm': limits.max_wheel_torque_nm,
    }

    violations = []
    for name, peak in peaks.items():
        if peak > caps[name]:
            violations.append({'metric': name, 'peak': peak, 'limit': caps[name]})
            logger.warning(f"Trace exceeds {name} limit: {peak:.2f} > {caps[name]:.2f}")

    return {
        'within_limits': not violations,
        'peaks': peaks,
        'violations': violations,
    }
