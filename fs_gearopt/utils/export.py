"""
Export utilities for simulation traces, optimizer progress and results.

Traces and progress steps are flattened into pandas DataFrames (gear tuples
become one column per gear) and written as CSV; results are written as JSON.
"""

from dataclasses import asdict, fields, is_dataclass
from typing import Dict, Iterable, List, Sequence
import json
import logging
import os

import pandas as pd

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Export")

# Step fields holding gear ratio tuples, with their column prefixes
_GEAR_FIELDS = {
    'gear_ratios': 'gear',
    'best_gear_ratios': 'best_gear',
    'generation_best_gears': 'generation_best_gear',
    'global_best': 'best_gear',
}


def _expand_gears(row: Dict, key: str, prefix: str) -> None:
    ratios = row.pop(key, None)
    if ratios is None:
        return
    for index, ratio in enumerate(ratios, start=1):
        row[f'{prefix}_{index}'] = ratio


def trace_to_dataframe(points: Sequence) -> pd.DataFrame:
    """
    Convert SimPoint samples into a DataFrame, one row per sample.

    Args:
        points: SimPoint samples of one run

    Returns:
        DataFrame with one column per SimPoint field plus speed in km/h
    """
    # Imported here; the core package itself depends on utils
    from ..core.simulator import SimPoint
    from .constants import MS_TO_KMH

    columns = [f.name for f in fields(SimPoint)]
    df = pd.DataFrame([asdict(p) for p in points], columns=columns)
    df['speed_kmh'] = df['velocity'] * MS_TO_KMH
    return df


def step_to_row(step) -> Dict:
    """Flatten one progress step record into a flat dictionary."""
    if not is_dataclass(step):
        raise TypeError(f"Not a progress step record: {step!r}")

    row = {'step_type': type(step).__name__}
    for f in fields(step):
        if f.name == 'particles':
            continue
        row[f.name] = getattr(step, f.name)

    particles = getattr(step, 'particles', None)
    if particles is not None:
        row['best_fitness'] = step.best_fitness
        row['particle_count'] = len(particles)
        row['mean_particle_fitness'] = (
            sum(p.fitness for p in particles) / len(particles) if particles else 0.0
        )
        row.pop('global_best_fitness', None)

    for key, prefix in _GEAR_FIELDS.items():
        _expand_gears(row, key, prefix)
    return row


def steps_to_dataframe(steps: Iterable) -> pd.DataFrame:
    """
    Convert progress step records into a DataFrame, one row per step.

    Swarm steps are summarised (particle count and mean fitness); use
    particles_to_dataframe for the individual particle positions.
    """
    return pd.DataFrame([step_to_row(step) for step in steps])


def particles_to_dataframe(steps: Iterable) -> pd.DataFrame:
    """
    Convert swarm steps into a long DataFrame, one row per particle and iteration.

    Args:
        steps: SwarmStep records

    Returns:
        DataFrame with columns iteration, particle, fitness, gear_1 .. gear_n
    """
    rows: List[Dict] = []
    for step in steps:
        for index, particle in enumerate(step.particles):
            row = {'iteration': step.iteration, 'particle': index, 'fitness': particle.fitness}
            for gear, ratio in enumerate(particle.position, start=1):
                row[f'gear_{gear}'] = ratio
            rows.append(row)
    return pd.DataFrame(rows)


def result_to_dict(result) -> Dict:
    """Convert an OptimizationResult into JSON-compatible types."""
    return {
        'strategy': result.strategy,
        'gear_ratios': [float(r) for r in result.gear_ratios],
        'fitness': float(result.fitness),
        'accel_time': float(result.accel_time),
        'generation': result.generation,
        'evaluations': int(result.evaluations),
        'termination': result.termination,
    }


def _prepare_path(file_path: str) -> None:
    directory = os.path.dirname(file_path)
    if directory:
        os.makedirs(directory, exist_ok=True)


def save_trace_csv(points: Sequence, file_path: str) -> pd.DataFrame:
    """
    Save a simulated trace to a CSV file.

    Args:
        points: SimPoint samples of one run
        file_path: Path to output CSV file

    Returns:
        The exported DataFrame
    """
    _prepare_path(file_path)
    df = trace_to_dataframe(points)
    df.to_csv(file_path, index=False)
    logger.info(f"Trace with {len(df)} samples saved to {file_path}")
    return df


def save_steps_csv(steps: Iterable, file_path: str) -> pd.DataFrame:
    """
    Save optimizer progress steps to a CSV file.

    Args:
        steps: Progress step records in emission order
        file_path: Path to output CSV file

    Returns:
        The exported DataFrame
    """
    _prepare_path(file_path)
    df = steps_to_dataframe(steps)
    df.to_csv(file_path, index=False)
    logger.info(f"{len(df)} progress steps saved to {file_path}")
    return df


def save_result_json(result, file_path: str) -> Dict:
    """
    Save an optimization result to a JSON file.

    Args:
        result: OptimizationResult to save
        file_path: Path to output JSON file

    Returns:
        The exported dictionary
    """
    _prepare_path(file_path)
    data = result_to_dict(result)
    with open(file_path, 'w') as f:
        json.dump(data, f, indent=2)
    logger.info(f"Result of '{result.strategy}' saved to {file_path}")
    return data
