"""
Engine module for the Formula Student gear ratio optimizer.

Provides the EngineMap, which answers full-load and part-load torque queries
from the dataset's torque curve and RPM x throttle map.
"""

from .torque_curve import EngineMap

__all__ = ['EngineMap']
