"""
Core module for the Formula Student gear ratio optimizer.

This module provides the configuration dataset that describes a car, and the
forward dynamics simulator that drives it down a straight.
"""

# Import configuration dataset components
from .dataset import (
    VehicleParams,
    TorqueCurvePoint,
    ThrottleMapRow,
    EngineParams,
    GearboxConstraints,
    GearboxParams,
    PacejkaCoefficients,
    TireParams,
    AeroSample,
    AeroParams,
    SuspensionParams,
    EnvironmentParams,
    LimitsParams,
    FitnessWeights,
    DriverParams,
    ConfigurationDataset,
    create_default_dataset,
    dataset_from_dict,
    dataset_to_dict,
    load_dataset,
    save_dataset
)

# Import simulator components
from .simulator import (
    SimPoint,
    ForwardDynamicsSimulator,
    simulate_acceleration
)

# Define public API
__all__ = [
    # Dataset sections
    'VehicleParams', 'TorqueCurvePoint', 'ThrottleMapRow', 'EngineParams',
    'GearboxConstraints', 'GearboxParams', 'PacejkaCoefficients', 'TireParams',
    'AeroSample', 'AeroParams', 'SuspensionParams', 'EnvironmentParams',
    'LimitsParams', 'FitnessWeights', 'DriverParams', 'ConfigurationDataset',

    # Dataset functions
    'create_default_dataset', 'dataset_from_dict', 'dataset_to_dict',
    'load_dataset', 'save_dataset',

    # Simulator
    'SimPoint', 'ForwardDynamicsSimulator', 'simulate_acceleration'
]
