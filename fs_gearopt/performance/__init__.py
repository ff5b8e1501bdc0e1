"""
Performance module for the Formula Student gear ratio optimizer.

This module provides the event models and the composite fitness built on them:
1. Acceleration: 75 m straight-line run through the forward dynamics simulator
2. Skidpad: closed-form steady-state cornering on an 8 m circle
3. Autocross: straight and corner segments, summed
4. Fitness: weighted sum of inverse event times
"""

# Import acceleration event
from .acceleration import (
    acceleration_time,
    derived_acceleration_time,
    analyze_acceleration,
    final_time,
    run_completed
)

# Import skidpad event
from .skidpad import (
    skidpad_velocity,
    skidpad_time,
    skidpad_lateral_g
)

# Import autocross event
from .autocross import (
    StraightSegment,
    CornerSegment,
    DEFAULT_COURSE,
    corner_speed,
    corner_time,
    autocross_breakdown,
    autocross_time,
    straights_completed
)

# Import fitness function
from .fitness import (
    EventTimes,
    evaluate_event_times,
    fitness_from_times,
    evaluate_fitness
)

# Define public API
__all__ = [
    # Acceleration
    'acceleration_time', 'derived_acceleration_time', 'analyze_acceleration', 'final_time', 'run_completed',

    # Skidpad
    'skidpad_velocity', 'skidpad_time', 'skidpad_lateral_g',

    # Autocross
    'StraightSegment', 'CornerSegment', 'DEFAULT_COURSE', 'corner_speed',
    'corner_time', 'autocross_breakdown', 'autocross_time', 'straights_completed',

    # Fitness
    'EventTimes', 'evaluate_event_times', 'fitness_from_times', 'evaluate_fitness'
]
