"""
Constants module for the Formula Student gear ratio optimizer.

This module provides physical constants, unit conversion factors, simulation
settings and event reference values used throughout the gear optimizer.
"""

import numpy as np
from enum import Enum, auto

# Physical constants
GRAVITY = 9.81  # m/s², standard gravity

# Unit conversion factors
MS_TO_KMH = 3.6  # Convert m/s to km/h
DEG_TO_RAD = np.pi / 180.0  # Convert degrees to radians
RPM_TO_RAD_S = 2.0 * np.pi / 60.0  # Convert rev/min to rad/s

# Formula Student reference values
FS_ACCELERATION_LENGTH = 75.0  # m, standard acceleration event distance
FS_SKIDPAD_RADIUS = 8.0  # m, steady-state skidpad circle radius
FS_SKIDPAD_LAPS = 2  # timed laps in the skidpad evaluation

# Forward dynamics integration settings
SIM_TIME_STEP = 0.005  # s, internal forward Euler step
SIM_SAMPLE_INTERVAL = 0.05  # s, output cadence of SimPoint samples
SIM_CUTOFF_TIME = 20.0  # s, hard stop for a straight-line run

# Fallback times for runs that produce no samples
EVENT_FALLBACK_TIME = SIM_CUTOFF_TIME  # s, used by event evaluators
OPTIMIZER_FALLBACK_TIME = 99.0  # s, used for the optimizer's derived acceleration time

# Fitness settings
FITNESS_SCALE = 10.0  # multiplier applied to the weighted inverse event times
MIN_EVENT_TIME = 1e-6  # s, event times at or below this are treated as invalid

# Tractive curve sampling
TRACTIVE_CURVE_RPM_STEP = 200  # RPM between tractive curve samples


class EventType(Enum):
    """Formula Student events that contribute to the composite fitness."""
    ACCELERATION = auto()
    SKIDPAD = auto()
    AUTOCROSS = auto()
