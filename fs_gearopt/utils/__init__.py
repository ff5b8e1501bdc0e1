"""
Utility modules for the Formula Student gear ratio optimizer.

This package provides constants, plausibility validation and export helpers
used throughout the project.
"""

# Import key constants
from .constants import (
    # Physical constants
    GRAVITY,

    # Unit conversion factors
    MS_TO_KMH, DEG_TO_RAD, RPM_TO_RAD_S,

    # Formula Student event values
    FS_ACCELERATION_LENGTH, FS_SKIDPAD_RADIUS, FS_SKIDPAD_LAPS,

    # Simulation settings
    SIM_TIME_STEP, SIM_SAMPLE_INTERVAL, SIM_CUTOFF_TIME,
    EVENT_FALLBACK_TIME, OPTIMIZER_FALLBACK_TIME,

    EventType
)

# Import validation functions
from .validation import (
    FS_PERFORMANCE_RANGES, VALIDATION_THRESHOLDS,
    validate_in_range, validate_dataset, validate_event_times, check_trace_limits
)

# Import export functions
from .export import (
    trace_to_dataframe, steps_to_dataframe, particles_to_dataframe, result_to_dict,
    save_trace_csv, save_steps_csv, save_result_json
)

# Define public API
__all__ = [
    # Constants
    'GRAVITY',
    'MS_TO_KMH', 'DEG_TO_RAD', 'RPM_TO_RAD_S',
    'FS_ACCELERATION_LENGTH', 'FS_SKIDPAD_RADIUS', 'FS_SKIDPAD_LAPS',
    'SIM_TIME_STEP', 'SIM_SAMPLE_INTERVAL', 'SIM_CUTOFF_TIME',
    'EVENT_FALLBACK_TIME', 'OPTIMIZER_FALLBACK_TIME', 'EventType',

    # Validation
    'FS_PERFORMANCE_RANGES', 'VALIDATION_THRESHOLDS',
    'validate_in_range', 'validate_dataset', 'validate_event_times', 'check_trace_limits',

    # Export
    'trace_to_dataframe', 'steps_to_dataframe', 'particles_to_dataframe', 'result_to_dict',
    'save_trace_csv', 'save_steps_csv', 'save_result_json'
]
