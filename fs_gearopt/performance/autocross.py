"""
Autocross event module for the Formula Student gear ratio optimizer.

An autocross course is modelled as alternating straight and corner segments.
Straights are run through the forward dynamics simulator with the segment
length as target distance; corners are taken at the lateral-grip-limited
speed v = sqrt(mu * g * r) over their arc length r * angle.

By default every straight starts from the launch condition. With
``carry_exit_speed`` the straight is entered at the preceding corner's speed.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple, Union
import logging
import math

from ..core.simulator import ForwardDynamicsSimulator
from ..utils.constants import DEG_TO_RAD, EVENT_FALLBACK_TIME, GRAVITY
from .acceleration import final_time, run_completed

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Autocross_Performance")


@dataclass(frozen=True)
class StraightSegment:
    length_m: float


@dataclass(frozen=True)
class CornerSegment:
    angle_deg: float
    radius_m: float

    @property
    def arc_length_m(self) -> float:
        return self.radius_m * self.angle_deg * DEG_TO_RAD


Segment = Union[StraightSegment, CornerSegment]

DEFAULT_COURSE: Tuple[Segment, ...] = (
    StraightSegment(60.0),
    CornerSegment(90.0, 15.0),
    StraightSegment(40.0),
    CornerSegment(120.0, 10.0),
    StraightSegment(70.0),
)


def corner_speed(dataset, radius: float) -> float:
    """Lateral-grip-limited speed through a corner of the given radius, in m/s."""
    return math.sqrt(max(0.0, dataset.tire.mu_lateral * GRAVITY * radius))


def corner_time(dataset, segment: CornerSegment) -> float:
    """Time to traverse a corner segment (math.inf without lateral grip)."""
    speed = corner_speed(dataset, segment.radius_m)
    if speed <= 0.0:
        return math.inf
    return segment.arc_length_m / speed


def autocross_breakdown(dataset, course: Sequence[Segment] = DEFAULT_COURSE,
                        carry_exit_speed: bool = False) -> List[Dict]:
    """
    Evaluate every segment of an autocross course.

    Args:
        dataset: ConfigurationDataset to simulate
        course: Ordered straight and corner segments
        carry_exit_speed: Enter straights at the previous corner's speed

    Returns:
        List of dictionaries with segment type, length and time
    """
    simulator = ForwardDynamicsSimulator(dataset)
    entry_speed = None
    breakdown = []

    for index, segment in enumerate(course):
        if isinstance(segment, StraightSegment):
            points = simulator.run(segment.length_m,
                                   initial_velocity=entry_speed if carry_exit_speed else None)
            segment_time = final_time(points, EVENT_FALLBACK_TIME)
            breakdown.append({
                'index': index,
                'type': 'straight',
                'length_m': segment.length_m,
                'time': segment_time,
                'exit_speed': points[-1].velocity if points else 0.0,
                'completed': run_completed(points, segment.length_m),
            })
        elif isinstance(segment, CornerSegment):
            entry_speed = corner_speed(dataset, segment.radius_m)
            breakdown.append({
                'index': index,
                'type': 'corner',
                'length_m': segment.arc_length_m,
                'time': corner_time(dataset, segment),
                'exit_speed': entry_speed,
            })
        else:
            raise TypeError(f"Unknown course segment: {segment!r}")

    return breakdown


def autocross_time(dataset, course: Sequence[Segment] = DEFAULT_COURSE,
                   carry_exit_speed: bool = False) -> float:
    """
    Total autocross time as the sum of all segment times.

    Args:
        dataset: ConfigurationDataset to simulate
        course: Ordered straight and corner segments
        carry_exit_speed: Enter straights at the previous corner's speed

    Returns:
        Course time in s
    """
    return sum(s['time'] for s in autocross_breakdown(dataset, course, carry_exit_speed))


def straights_completed(breakdown: Sequence[Dict]) -> bool:
    """True when every straight segment covered its full length."""
    return all(s['completed'] for s in breakdown if s['type'] == 'straight')
