"""
Configuration dataset for the Formula Student gear ratio optimizer.

This module defines the immutable configuration snapshot consumed by every
simulation and optimization run. The dataset is split into sections that
mirror the YAML configuration schema:

- vehicle: mass, weight distribution, geometry, drivetrain losses
- engine: RPM limits, torque curve, RPM x throttle map, shift timing
- gearbox: primary/final drive ratios, gear set and ratio constraints
- tire, aero, suspension, environment, limits
- fitness_weights and driver behaviour

Snapshots are frozen dataclasses holding tuples; a modified configuration is
always a new snapshot created with ``with_gear_ratios`` or ``replace``.
"""

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Optional, Sequence, Tuple
import logging
import os

import yaml

from ..transmission.gearing import GearSet, is_normalized, normalize_ratios

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Configuration_Dataset")

THROTTLE_COLUMN_PREFIX = 't'


@dataclass(frozen=True)
class VehicleParams:
    """Chassis mass properties and geometry."""

    mass_kg: float
    weight_distribution_front: float
    wheelbase_m: float
    front_track_m: float
    rear_track_m: float
    cg_height_m: float
    drivetrain_efficiency: float
    rotational_inertia_factor: float

    def __post_init__(self) -> None:
        if self.mass_kg <= 0.0:
            raise ValueError("mass_kg must be > 0.0.")
        if not 0.0 <= self.weight_distribution_front <= 1.0:
            raise ValueError("weight_distribution_front must be between 0.0 and 1.0.")
        if self.wheelbase_m <= 0.0:
            raise ValueError("wheelbase_m must be > 0.0.")
        if self.cg_height_m < 0.0:
            raise ValueError("cg_height_m must be >= 0.0.")
        if not 0.0 < self.drivetrain_efficiency <= 1.0:
            raise ValueError("drivetrain_efficiency must be in (0.0, 1.0].")
        if self.rotational_inertia_factor < 1.0:
            raise ValueError("rotational_inertia_factor must be >= 1.0.")

    @property
    def weight_distribution_rear(self) -> float:
        return 1.0 - self.weight_distribution_front


@dataclass(frozen=True)
class TorqueCurvePoint:
    """One dyno sample of the full-load curve."""

    rpm: float
    torque_nm: float
    power_kw: float = 0.0
    bsfc_g_per_kwh: float = 0.0


@dataclass(frozen=True)
class ThrottleMapRow:
    """Torque at one RPM for each throttle breakpoint."""

    rpm: float
    torque_nm: Tuple[float, ...]


@dataclass(frozen=True)
class EngineParams:
    """Engine limits, torque data and shift timing."""

    redline_rpm: float
    idle_rpm: float
    max_power_kw: float
    gear_shift_time_s: float
    engine_braking_factor: float
    torque_curve: Tuple[TorqueCurvePoint, ...]
    throttle_positions_pct: Tuple[float, ...]
    throttle_map: Tuple[ThrottleMapRow, ...]

    def __post_init__(self) -> None:
        if self.idle_rpm <= 0.0 or self.redline_rpm <= self.idle_rpm:
            raise ValueError("engine RPM limits must satisfy 0 < idle_rpm < redline_rpm.")
        if self.gear_shift_time_s < 0.0:
            raise ValueError("gear_shift_time_s must be >= 0.0.")
        if not self.torque_curve:
            raise ValueError("torque_curve must not be empty.")
        if not self.throttle_map or not self.throttle_positions_pct:
            raise ValueError("throttle_map must not be empty.")
        for row in self.throttle_map:
            if len(row.torque_nm) != len(self.throttle_positions_pct):
                raise ValueError(f"throttle_map row at {row.rpm} RPM has the wrong number of columns.")


@dataclass(frozen=True)
class GearboxConstraints:
    """Ratio bounds and per-gear efficiency."""

    min_ratio: float
    max_ratio: float
    ratio_step: float = 0.01
    max_torque_nm: float = 0.0
    max_shaft_speed_rpm: float = 0.0
    efficiency_per_gear: Tuple[float, ...] = ()

    def __post_init__(self) -> None:
        if self.min_ratio <= 0.0 or self.min_ratio > self.max_ratio:
            raise ValueError("gear ratio constraints must satisfy 0 < min_ratio <= max_ratio.")
        if any(not 0.0 < e <= 1.0 for e in self.efficiency_per_gear):
            raise ValueError("efficiency_per_gear values must be in (0.0, 1.0].")


@dataclass(frozen=True)
class GearboxParams:
    """Primary/final drive ratios and the active gear set."""

    primary_ratio: float
    final_drive_ratio: float
    gears: Tuple[float, ...]
    constraints: GearboxConstraints

    def __post_init__(self) -> None:
        if self.primary_ratio <= 0.0 or self.final_drive_ratio <= 0.0:
            raise ValueError("primary_ratio and final_drive_ratio must be > 0.0.")
        if not self.gears:
            raise ValueError("gears must not be empty.")
        c = self.constraints
        if not is_normalized(self.gears, c.min_ratio, c.max_ratio):
            normalized = normalize_ratios(self.gears, c.min_ratio, c.max_ratio)
            logger.warning(f"Gear ratios {list(self.gears)} normalized to {list(normalized)}")
            object.__setattr__(self, 'gears', normalized)
        else:
            object.__setattr__(self, 'gears', tuple(float(g) for g in self.gears))

    @property
    def max_gears(self) -> int:
        return len(self.gears)

    @property
    def gear_set(self) -> GearSet:
        """The active gears as an immutable GearSet."""
        return GearSet.from_values(self.gears, self.constraints.min_ratio, self.constraints.max_ratio)


@dataclass(frozen=True)
class PacejkaCoefficients:
    B: float
    C: float
    D: float
    E: float


@dataclass(frozen=True)
class TireParams:
    """Wheel radius, friction and slip characteristics."""

    wheel_radius_m: float
    mu_longitudinal: float
    mu_lateral: float
    rolling_resistance_coeff: float
    pacejka: PacejkaCoefficients
    longitudinal_slip_curve: Tuple[Tuple[float, float], ...] = ()
    lateral_slip_curve: Tuple[Tuple[float, float], ...] = ()

    def __post_init__(self) -> None:
        if self.wheel_radius_m <= 0.0:
            raise ValueError("wheel_radius_m must be > 0.0.")
        if self.mu_longitudinal < 0.0 or self.mu_lateral < 0.0:
            raise ValueError("friction coefficients must be >= 0.0.")


@dataclass(frozen=True)
class AeroSample:
    """Measured aero loads at one speed."""

    speed_mps: float
    drag_n: float
    df_front_n: float
    df_rear_n: float


@dataclass(frozen=True)
class AeroParams:
    """Aerodynamic coefficients and the speed-indexed load table."""

    drag_coefficient: float
    frontal_area_m2: float
    air_density: float
    downforce_coefficient: float
    aero_balance_front: float
    speed_map: Tuple[AeroSample, ...]

    def __post_init__(self) -> None:
        if not self.speed_map:
            raise ValueError("aero speed_map must not be empty.")
        if not 0.0 <= self.aero_balance_front <= 1.0:
            raise ValueError("aero_balance_front must be between 0.0 and 1.0.")

    @property
    def downforce_term(self) -> float:
        """Downforce per unit speed squared, 0.5 * rho * Cl * A (N·s²/m²)."""
        return 0.5 * self.air_density * self.downforce_coefficient * self.frontal_area_m2


@dataclass(frozen=True)
class SuspensionParams:
    front_spring_rate: float
    rear_spring_rate: float
    front_roll_stiffness: float
    rear_roll_stiffness: float
    anti_squat: float
    anti_dive: float


@dataclass(frozen=True)
class EnvironmentParams:
    """Ambient conditions and the track temperature to grip table."""

    air_temp_c: float
    track_temp_c: float
    wind_speed_mps: float
    air_density_adjustment: float
    grip_map: Tuple[Tuple[float, float], ...] = ()


@dataclass(frozen=True)
class LimitsParams:
    """Plausibility caps; reported by validation, never enforced by the simulator."""

    max_rpm: float
    max_wheel_torque_nm: float
    max_lateral_g: float
    max_longitudinal_g: float
    max_chain_load_n: float
    max_gearbox_temp_c: float


@dataclass(frozen=True)
class FitnessWeights:
    """Non-negative event weights; they need not sum to one."""

    acceleration: float
    skidpad: float
    autocross: float

    def __post_init__(self) -> None:
        if min(self.acceleration, self.skidpad, self.autocross) < 0.0:
            raise ValueError("fitness weights must be >= 0.0.")


@dataclass(frozen=True)
class DriverParams:
    throttle_aggression: float
    shift_rpm: float
    launch_rpm: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.throttle_aggression <= 1.0:
            raise ValueError("throttle_aggression must be between 0.0 and 1.0.")
        if self.shift_rpm <= 0.0 or self.launch_rpm < 0.0:
            raise ValueError("shift_rpm must be > 0.0 and launch_rpm >= 0.0.")


@dataclass(frozen=True)
class ConfigurationDataset:
    """
    Immutable snapshot of every input to the simulator and optimizers.

    Attributes:
        vehicle: Chassis mass properties and geometry
        engine: Engine limits and torque tables
        gearbox: Ratios and ratio constraints
        tire: Wheel radius and friction
        aero: Aerodynamic coefficients and load table
        suspension: Spring and roll stiffness (informational)
        environment: Ambient conditions
        limits: Plausibility caps
        fitness_weights: Event weights for the composite fitness
        driver: Throttle, shift and launch behaviour
        name: Label used in logs and exports
    """

    vehicle: VehicleParams
    engine: EngineParams
    gearbox: GearboxParams
    tire: TireParams
    aero: AeroParams
    suspension: SuspensionParams
    environment: EnvironmentParams
    limits: LimitsParams
    fitness_weights: FitnessWeights
    driver: DriverParams
    name: str = field(default='FSAE baseline')

    @property
    def gear_set(self) -> GearSet:
        return self.gearbox.gear_set

    def with_gear_ratios(self, ratios: Sequence[float]) -> 'ConfigurationDataset':
        """Return a new snapshot using the given gear ratios."""
        return replace(self, gearbox=replace(self.gearbox, gears=tuple(ratios)))

    def with_changes(self, **sections: Any) -> 'ConfigurationDataset':
        """Return a new snapshot with whole sections replaced."""
        return replace(self, **sections)


def _table(rows: Sequence[Dict], keys: Sequence[str]) -> Tuple[Tuple[float, ...], ...]:
    return tuple(tuple(float(row[k]) for k in keys) for row in rows)


def _throttle_columns(row: Dict) -> Tuple[float, ...]:
    """Throttle breakpoints from the t20..t100 column names of a map row."""
    columns = [k for k in row if k.startswith(THROTTLE_COLUMN_PREFIX) and k[1:].isdigit()]
    return tuple(sorted(float(k[1:]) for k in columns))


def dataset_from_dict(config: Dict[str, Any], base: Optional[ConfigurationDataset] = None) -> ConfigurationDataset:
    """
    Build a dataset from a configuration dictionary.

    Missing sections or keys fall back to ``base`` (the default dataset when
    not given).

    Args:
        config: Parsed configuration (YAML schema)
        base: Dataset supplying defaults for missing values

    Returns:
        New ConfigurationDataset
    """
    base = base if base is not None else create_default_dataset()
    defaults = dataset_to_dict(base)

    def section(name: str) -> Dict[str, Any]:
        merged = dict(defaults[name])
        merged.update(config.get(name) or {})
        return merged

    vehicle = VehicleParams(**{k: float(v) for k, v in section('vehicle').items()})

    engine_cfg = section('engine')
    throttle_rows = engine_cfg['throttle_map']
    positions = _throttle_columns(throttle_rows[0]) if throttle_rows else ()
    engine = EngineParams(
        redline_rpm=float(engine_cfg['redline_rpm']),
        idle_rpm=float(engine_cfg['idle_rpm']),
        max_power_kw=float(engine_cfg['max_power_kw']),
        gear_shift_time_s=float(engine_cfg['gear_shift_time_s']),
        engine_braking_factor=float(engine_cfg['engine_braking_factor']),
        torque_curve=tuple(
            TorqueCurvePoint(
                rpm=float(p['rpm']),
                torque_nm=float(p['torque_nm']),
                power_kw=float(p.get('power_kw', 0.0)),
                bsfc_g_per_kwh=float(p.get('bsfc_g_per_kwh', 0.0)),
            )
            for p in engine_cfg['torque_curve']
        ),
        throttle_positions_pct=positions,
        throttle_map=tuple(
            ThrottleMapRow(
                rpm=float(row['rpm']),
                torque_nm=tuple(float(row[f"{THROTTLE_COLUMN_PREFIX}{int(t)}"]) for t in positions),
            )
            for row in throttle_rows
        ),
    )

    gearbox_cfg = section('gearbox')
    constraints_cfg = dict(defaults['gearbox']['constraints'])
    constraints_cfg.update((config.get('gearbox') or {}).get('constraints') or {})
    efficiency_map = {int(k): float(v) for k, v in (constraints_cfg.get('efficiency_per_gear') or {}).items()}
    constraints = GearboxConstraints(
        min_ratio=float(constraints_cfg['min_ratio']),
        max_ratio=float(constraints_cfg['max_ratio']),
        ratio_step=float(constraints_cfg.get('ratio_step', 0.01)),
        max_torque_nm=float(constraints_cfg.get('max_torque_nm', 0.0)),
        max_shaft_speed_rpm=float(constraints_cfg.get('max_shaft_speed_rpm', 0.0)),
        efficiency_per_gear=tuple(efficiency_map[g] for g in sorted(efficiency_map)),
    )
    gears = tuple(float(g) for g in gearbox_cfg['gears'])
    max_gears = int((config.get('gearbox') or {}).get('max_gears', len(gears)))
    if max_gears != len(gears):
        raise ValueError(f"max_gears is {max_gears} but {len(gears)} gear ratios were given.")
    gearbox = GearboxParams(
        primary_ratio=float(gearbox_cfg['primary_ratio']),
        final_drive_ratio=float(gearbox_cfg['final_drive_ratio']),
        gears=gears,
        constraints=constraints,
    )

    tire_cfg = section('tire')
    slip_curves = tire_cfg.get('slip_curves') or {}
    tire = TireParams(
        wheel_radius_m=float(tire_cfg['wheel_radius_m']),
        mu_longitudinal=float(tire_cfg['mu_longitudinal']),
        mu_lateral=float(tire_cfg['mu_lateral']),
        rolling_resistance_coeff=float(tire_cfg['rolling_resistance_coeff']),
        pacejka=PacejkaCoefficients(**{k: float(v) for k, v in tire_cfg['pacejka'].items()}),
        longitudinal_slip_curve=_table(slip_curves.get('longitudinal', []), ('slip_ratio', 'force_coeff')),
        lateral_slip_curve=_table(slip_curves.get('lateral', []), ('slip_angle_deg', 'force_coeff')),
    )

    aero_cfg = section('aero')
    aero = AeroParams(
        drag_coefficient=float(aero_cfg['drag_coefficient']),
        frontal_area_m2=float(aero_cfg['frontal_area_m2']),
        air_density=float(aero_cfg['air_density']),
        downforce_coefficient=float(aero_cfg['downforce_coefficient']),
        aero_balance_front=float(aero_cfg['aero_balance_front']),
        speed_map=tuple(
            AeroSample(**{k: float(row[k]) for k in ('speed_mps', 'drag_n', 'df_front_n', 'df_rear_n')})
            for row in aero_cfg['speed_map']
        ),
    )

    env_cfg = section('environment')
    environment = EnvironmentParams(
        air_temp_c=float(env_cfg['air_temp_c']),
        track_temp_c=float(env_cfg['track_temp_c']),
        wind_speed_mps=float(env_cfg['wind_speed_mps']),
        air_density_adjustment=float(env_cfg['air_density_adjustment']),
        grip_map=_table(env_cfg.get('grip_map', []), ('temp_c', 'mu')),
    )

    return ConfigurationDataset(
        vehicle=vehicle,
        engine=engine,
        gearbox=gearbox,
        tire=tire,
        aero=aero,
        suspension=SuspensionParams(**{k: float(v) for k, v in section('suspension').items()}),
        environment=environment,
        limits=LimitsParams(**{k: float(v) for k, v in section('limits').items()}),
        fitness_weights=FitnessWeights(**{k: float(v) for k, v in section('fitness_weights').items()}),
        driver=DriverParams(**{k: float(v) for k, v in section('driver').items()}),
        name=str(config.get('name', base.name)),
    )


def dataset_to_dict(dataset: ConfigurationDataset) -> Dict[str, Any]:
    """
    Convert a dataset to the YAML configuration schema.

    Args:
        dataset: Dataset to convert

    Returns:
        Plain dictionary (lists and floats only)
    """
    engine = dataset.engine
    gearbox = dataset.gearbox
    tire = dataset.tire
    return {
        'name': dataset.name,
        'vehicle': asdict(dataset.vehicle),
        'engine': {
            'redline_rpm': engine.redline_rpm,
            'idle_rpm': engine.idle_rpm,
            'max_power_kw': engine.max_power_kw,
            'gear_shift_time_s': engine.gear_shift_time_s,
            'engine_braking_factor': engine.engine_braking_factor,
            'torque_curve': [asdict(p) for p in engine.torque_curve],
            'throttle_map': [
                dict({'rpm': row.rpm},
                     **{f"{THROTTLE_COLUMN_PREFIX}{int(t)}": v
                        for t, v in zip(engine.throttle_positions_pct, row.torque_nm)})
                for row in engine.throttle_map
            ],
        },
        'gearbox': {
            'primary_ratio': gearbox.primary_ratio,
            'final_drive_ratio': gearbox.final_drive_ratio,
            'gears': list(gearbox.gears),
            'max_gears': gearbox.max_gears,
            'constraints': {
                'min_ratio': gearbox.constraints.min_ratio,
                'max_ratio': gearbox.constraints.max_ratio,
                'ratio_step': gearbox.constraints.ratio_step,
                'max_torque_nm': gearbox.constraints.max_torque_nm,
                'max_shaft_speed_rpm': gearbox.constraints.max_shaft_speed_rpm,
                'efficiency_per_gear': {
                    i + 1: e for i, e in enumerate(gearbox.constraints.efficiency_per_gear)
                },
            },
        },
        'tire': {
            'wheel_radius_m': tire.wheel_radius_m,
            'mu_longitudinal': tire.mu_longitudinal,
            'mu_lateral': tire.mu_lateral,
            'rolling_resistance_coeff': tire.rolling_resistance_coeff,
            'pacejka': asdict(tire.pacejka),
            'slip_curves': {
                'longitudinal': [{'slip_ratio': s, 'force_coeff': f} for s, f in tire.longitudinal_slip_curve],
                'lateral': [{'slip_angle_deg': s, 'force_coeff': f} for s, f in tire.lateral_slip_curve],
            },
        },
        'aero': {
            'drag_coefficient': dataset.aero.drag_coefficient,
            'frontal_area_m2': dataset.aero.frontal_area_m2,
            'air_density': dataset.aero.air_density,
            'downforce_coefficient': dataset.aero.downforce_coefficient,
            'aero_balance_front': dataset.aero.aero_balance_front,
            'speed_map': [asdict(s) for s in dataset.aero.speed_map],
        },
        'suspension': asdict(dataset.suspension),
        'environment': {
            'air_temp_c': dataset.environment.air_temp_c,
            'track_temp_c': dataset.environment.track_temp_c,
            'wind_speed_mps': dataset.environment.wind_speed_mps,
            'air_density_adjustment': dataset.environment.air_density_adjustment,
            'grip_map': [{'temp_c': t, 'mu': mu} for t, mu in dataset.environment.grip_map],
        },
        'limits': asdict(dataset.limits),
        'fitness_weights': asdict(dataset.fitness_weights),
        'driver': asdict(dataset.driver),
    }


def load_dataset(config_path: str, base: Optional[ConfigurationDataset] = None) -> ConfigurationDataset:
    """
    Load a dataset from a YAML file.

    Args:
        config_path: Path to the YAML configuration file
        base: Dataset supplying defaults for missing values

    Returns:
        New ConfigurationDataset
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}

    dataset = dataset_from_dict(config, base=base)
    logger.info(f"Configuration '{dataset.name}' loaded from {config_path}")
    return dataset


def save_dataset(dataset: ConfigurationDataset, config_path: str):
    """
    Save a dataset as YAML.

    Args:
        dataset: Dataset to save
        config_path: Destination file path
    """
    directory = os.path.dirname(config_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(config_path, 'w') as f:
        yaml.safe_dump(dataset_to_dict(dataset), f, sort_keys=False)

    logger.info(f"Configuration '{dataset.name}' saved to {config_path}")


def create_default_dataset() -> ConfigurationDataset:
    """
    Create the baseline FSAE configuration (600cc single-cylinder class car).

    A fresh snapshot is built on every call.

    Returns:
        ConfigurationDataset with default values
    """
    torque_curve = (
        (2000, 32, 6.7, 380), (2500, 38, 9.9, 360), (3000, 45, 14.1, 340),
        (3500, 52, 19.1, 320), (4000, 58, 24.3, 305), (4500, 63, 29.7, 295),
        (5000, 67, 35.1, 288), (5500, 70, 40.3, 282), (6000, 72, 45.2, 278),
        (6500, 71, 48.3, 280), (7000, 69, 50.6, 285), (7500, 65, 51.0, 295),
        (8000, 60, 50.2, 310), (8500, 52, 46.3, 330), (9000, 45, 42.4, 360),
    )
    throttle_map = (
        (2000, (10, 18, 25, 30, 32)),
        (3000, (15, 28, 38, 44, 45)),
        (4000, (22, 40, 50, 56, 58)),
        (5000, (28, 50, 60, 65, 67)),
        (6000, (32, 55, 65, 70, 72)),
        (7000, (30, 52, 60, 66, 69)),
        (8000, (25, 45, 52, 57, 60)),
        (9000, (18, 32, 40, 43, 45)),
    )
    speed_map = (
        (0, 0, 0, 0), (10, 50, 70, 80), (20, 200, 280, 320), (30, 450, 600, 700),
        (40, 800, 1100, 1300), (50, 1250, 1800, 2200), (60, 1800, 2600, 3100),
    )

    return ConfigurationDataset(
        vehicle=VehicleParams(
            mass_kg=300.0,
            weight_distribution_front=0.48,
            wheelbase_m=1.6,
            front_track_m=1.2,
            rear_track_m=1.15,
            cg_height_m=0.28,
            drivetrain_efficiency=0.92,
            rotational_inertia_factor=1.08,
        ),
        engine=EngineParams(
            redline_rpm=9000.0,
            idle_rpm=2000.0,
            max_power_kw=60.0,
            gear_shift_time_s=0.18,
            engine_braking_factor=0.08,
            torque_curve=tuple(TorqueCurvePoint(float(r), float(t), float(p), float(b))
                               for r, t, p, b in torque_curve),
            throttle_positions_pct=(20.0, 40.0, 60.0, 80.0, 100.0),
            throttle_map=tuple(ThrottleMapRow(float(r), tuple(float(v) for v in row))
                               for r, row in throttle_map),
        ),
        gearbox=GearboxParams(
            primary_ratio=1.9,
            final_drive_ratio=3.8,
            gears=(3.1, 2.4, 1.9, 1.55, 1.3, 1.1),
            constraints=GearboxConstraints(
                min_ratio=0.9,
                max_ratio=3.5,
                ratio_step=0.01,
                max_torque_nm=80.0,
                max_shaft_speed_rpm=11000.0,
                efficiency_per_gear=(0.90, 0.91, 0.92, 0.93, 0.94, 0.94),
            ),
        ),
        tire=TireParams(
            wheel_radius_m=0.228,
            mu_longitudinal=1.6,
            mu_lateral=1.8,
            rolling_resistance_coeff=0.015,
            pacejka=PacejkaCoefficients(B=10.0, C=1.9, D=1.8, E=0.97),
            longitudinal_slip_curve=((0.00, 0.0), (0.02, 0.8), (0.05, 1.2), (0.08, 1.5),
                                     (0.10, 1.6), (0.15, 1.5), (0.20, 1.3), (0.30, 1.0)),
            lateral_slip_curve=((0.0, 0.0), (2.0, 0.9), (4.0, 1.4), (6.0, 1.7),
                                (8.0, 1.8), (10.0, 1.75), (12.0, 1.6), (15.0, 1.2)),
        ),
        aero=AeroParams(
            drag_coefficient=0.9,
            frontal_area_m2=1.1,
            air_density=1.225,
            downforce_coefficient=2.8,
            aero_balance_front=0.52,
            speed_map=tuple(AeroSample(float(s), float(d), float(f), float(r)) for s, d, f, r in speed_map),
        ),
        suspension=SuspensionParams(
            front_spring_rate=28.0,
            rear_spring_rate=32.0,
            front_roll_stiffness=950.0,
            rear_roll_stiffness=1100.0,
            anti_squat=35.0,
            anti_dive=20.0,
        ),
        environment=EnvironmentParams(
            air_temp_c=32.0,
            track_temp_c=45.0,
            wind_speed_mps=3.0,
            air_density_adjustment=0.97,
            grip_map=((20.0, 1.45), (30.0, 1.55), (40.0, 1.60), (50.0, 1.52), (60.0, 1.40)),
        ),
        limits=LimitsParams(
            max_rpm=9200.0,
            max_wheel_torque_nm=1400.0,
            max_lateral_g=2.2,
            max_longitudinal_g=2.0,
            max_chain_load_n=9000.0,
            max_gearbox_temp_c=135.0,
        ),
        fitness_weights=FitnessWeights(acceleration=0.4, skidpad=0.2, autocross=0.4),
        driver=DriverParams(throttle_aggression=1.0, shift_rpm=8800.0, launch_rpm=4500.0),
    )
