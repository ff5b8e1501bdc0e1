"""
Command line interface for the Formula Student gear ratio optimizer.

Subcommands:
    simulate   Run the three events for a configuration
    optimize   Search for better gear ratios with one strategy
    compare    Run every strategy and tabulate the results
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .core.dataset import create_default_dataset, load_dataset
from .core.simulator import simulate_acceleration
from .optimization.base import LoggingObserver, ObserverGroup, StepRecorder
from .optimization.runner import QUICK_BUDGETS, STRATEGIES, compare_strategies, run_optimizer
from .performance.acceleration import analyze_acceleration
from .performance.fitness import evaluate_event_times, fitness_from_times
from .transmission.gearing import generate_tractive_curves
from .utils.constants import EventType, FS_ACCELERATION_LENGTH
from .utils.export import save_result_json, save_steps_csv, save_trace_csv
from .utils.validation import check_trace_limits, validate_dataset

logger = logging.getLogger("FS_GearOpt_CLI")

# Keyword argument carrying the budget of each strategy
_BUDGET_ARGUMENT = {
    'random': 'iterations',
    'annealing': 'max_iterations',
    'swarm': 'max_iterations',
    'genetic': 'max_generations',
}


def _load(config_path: Optional[str]):
    if config_path:
        return load_dataset(config_path)
    return create_default_dataset()


def _print_gears(label: str, ratios) -> None:
    print(f"  {label}: {', '.join(f'{r:.3f}' for r in ratios)}")


def cmd_simulate(args) -> int:
    dataset = _load(args.config)

    print("Formula Student Event Simulation")
    print("================================")
    print(f"Configuration: {dataset.name}")
    _print_gears("Gear Ratios", dataset.gearbox.gears)

    validation = validate_dataset(dataset)
    print(f"  Validation: {validation['status']}")
    for warning in validation['warnings']:
        print(f"  Warning: {warning}")

    times = evaluate_event_times(dataset, carry_exit_speed=args.carry_exit_speed)
    fitness = fitness_from_times(times, dataset.fitness_weights)

    print("\nEvent Times:")
    print(f"  {EventType.ACCELERATION.name.title()}: {times.acceleration:.3f} s")
    print(f"  {EventType.SKIDPAD.name.title()}: {times.skidpad:.3f} s")
    print(f"  {EventType.AUTOCROSS.name.title()}: {times.autocross:.3f} s")
    print(f"  Fitness: {fitness:.4f}")

    points = simulate_acceleration(dataset, FS_ACCELERATION_LENGTH)
    metrics = analyze_acceleration(points, FS_ACCELERATION_LENGTH)
    print("\nAcceleration Run:")
    print(f"  Final Speed: {metrics['final_speed_kmh']:.1f} km/h")
    print(f"  Peak Acceleration: {metrics['peak_accel_g']:.2f} g")
    print(f"  Top Gear Used: {metrics['top_gear_used']}")
    if metrics['time_to_100kph'] is not None:
        print(f"  0-100 km/h: {metrics['time_to_100kph']:.3f} s")

    limits = check_trace_limits(dataset, points)
    if not limits['within_limits']:
        for violation in limits['violations']:
            print(f"  Limit exceeded: {violation['metric']} {violation['peak']:.2f} > {violation['limit']:.2f}")

    if args.output_dir:
        os.makedirs(args.output_dir, exist_ok=True)
        trace_path = os.path.join(args.output_dir, "acceleration_trace.csv")
        save_trace_csv(points, trace_path)
        curves_path = os.path.join(args.output_dir, "tractive_curves.csv")
        generate_tractive_curves(dataset).to_csv(curves_path, index=False)
        print(f"\nAcceleration trace exported to: {trace_path}")
        print(f"Tractive curves exported to: {curves_path}")

    return 0


def cmd_optimize(args) -> int:
    dataset = _load(args.config)

    params = {'carry_exit_speed': args.carry_exit_speed}
    if args.budget is not None:
        params[_BUDGET_ARGUMENT[args.strategy]] = args.budget
    if args.population is not None:
        if args.strategy == 'swarm':
            params['num_particles'] = args.population
        elif args.strategy == 'genetic':
            params['population_size'] = args.population

    print("Formula Student Gear Ratio Optimization")
    print("=======================================")
    print(f"Configuration: {dataset.name}")
    print(f"Strategy: {args.strategy}")
    print(f"Seed: {args.seed}")
    _print_gears("Initial Gear Ratios", dataset.gearbox.gears)

    recorder = StepRecorder()
    observer = ObserverGroup(recorder, LoggingObserver(every=args.log_every))

    result = run_optimizer(args.strategy, dataset, observer=observer, seed=args.seed, **params)

    print("\nOptimization Result:")
    _print_gears("Best Gear Ratios", result.gear_ratios)
    print(f"  Fitness: {result.fitness:.4f}")
    print(f"  Acceleration Time: {result.accel_time:.3f} s")
    print(f"  Evaluations: {result.evaluations}")
    print(f"  Termination: {result.termination}")
    if result.generation is not None:
        print(f"  Generations: {result.generation}")

    if args.output_dir:
        steps_path = os.path.join(args.output_dir, f"{args.strategy}_progress.csv")
        result_path = os.path.join(args.output_dir, f"{args.strategy}_result.json")
        save_steps_csv(recorder.steps, steps_path)
        save_result_json(result, result_path)
        print(f"\nProgress exported to: {steps_path}")
        print(f"Result exported to: {result_path}")

    return 0


def cmd_compare(args) -> int:
    dataset = _load(args.config)
    base_budgets = QUICK_BUDGETS if args.quick else {}
    budgets = {name: dict(base_budgets.get(name, {}), carry_exit_speed=args.carry_exit_speed)
               for name in STRATEGIES}

    print("Formula Student Strategy Comparison")
    print("===================================")
    print(f"Configuration: {dataset.name}")
    print(f"Budgets: {'quick' if args.quick else 'default'}")
    print()

    df = compare_strategies(dataset, seed=args.seed, budgets=budgets, parallel=args.parallel)
    print(df.to_string(index=False))

    if args.output_dir:
        os.makedirs(args.output_dir, exist_ok=True)
        csv_path = os.path.join(args.output_dir, "strategy_comparison.csv")
        df.to_csv(csv_path, index=False)
        print(f"\nComparison exported to: {csv_path}")

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fs-gearopt",
        description="Formula Student gear ratio simulation and optimization"
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="YAML configuration file (default: built-in FSAE baseline)"
    )
    parser.add_argument(
        "--output-dir", "-o",
        type=str,
        default=None,
        help="Directory for exported CSV/JSON files"
    )
    parser.add_argument(
        "--carry-exit-speed",
        action="store_true",
        help="Enter autocross straights at the previous corner's speed"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("simulate", help="Run the three events for a configuration")

    optimize = subparsers.add_parser("optimize", help="Optimize gear ratios with one strategy")
    optimize.add_argument(
        "--strategy", "-s",
        choices=sorted(STRATEGIES),
        default="genetic",
        help="Search strategy (default: genetic)"
    )
    optimize.add_argument(
        "--budget", "-b",
        type=int,
        default=None,
        help="Iterations (or generations for the genetic algorithm)"
    )
    optimize.add_argument(
        "--population", "-p",
        type=int,
        default=None,
        help="Swarm size or genetic population size"
    )
    optimize.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    optimize.add_argument(
        "--log-every",
        type=int,
        default=10,
        help="Log every n-th progress step (default: 10)"
    )

    compare = subparsers.add_parser("compare", help="Run every strategy and compare")
    compare.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    compare.add_argument("--quick", action="store_true", help="Use reduced budgets")
    compare.add_argument("--parallel", action="store_true", help="Run strategies on a thread pool")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    commands = {
        'simulate': cmd_simulate,
        'optimize': cmd_optimize,
        'compare': cmd_compare,
    }

    try:
        return commands[args.command](args)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
