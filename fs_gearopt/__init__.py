"""
Formula Student gear ratio optimizer.

This package simulates a Formula Student car in the acceleration, skidpad and
autocross events and searches the gear ratio space for the configuration with
the best composite event fitness. It is organised in sub-packages:

1. core: configuration dataset and forward dynamics simulator
2. engine: torque curve and throttle map lookups
3. transmission: gear set value type and drivetrain relations
4. performance: event models and the composite fitness function
5. optimization: random search, simulated annealing, particle swarm and genetic algorithm
6. utils: constants, validation and export helpers
"""

__version__ = "0.1.0"
