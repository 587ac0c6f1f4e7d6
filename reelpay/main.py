# reelpay/main.py
import os
import sys
import logging
import argparse

from reelpay.infrastructure.config.loaders.yaml_loader import YamlConfigLoader, ConfigError
from reelpay.infrastructure.config.validators.schema_validator import SchemaValidator
from reelpay.infrastructure.logging.log_manager import initialize_logging
from reelpay.infrastructure.rng.rng_provider import RNGProvider

from reelpay.domain.machine.exceptions import MachineConfigurationError
from reelpay.domain.machine.factories.machine_factory import (
    DEFAULT_SCHEMA_PATH,
    MachineFactory,
    machine_id_for,
)

from reelpay.application.simulation.spin_simulator import SpinSimulator
from reelpay.application.analysis.report_generator import ReportGenerator


DEFAULT_MACHINE = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "application", "config", "machines", "classic_5x3.yaml"
)


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Slot machine payout simulator")

    parser.add_argument(
        "-c", "--config",
        default=DEFAULT_MACHINE,
        help="Path to machine configuration file"
    )
    parser.add_argument(
        "-n", "--spins",
        type=int,
        default=10000,
        help="Number of spins to simulate"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="RNG seed (overrides the machine's rng.seed)"
    )
    parser.add_argument(
        "--rng",
        choices=RNGProvider.get_available_strategies(),
        default=None,
        help="RNG strategy (overrides the machine's rng.strategy)"
    )
    parser.add_argument(
        "--bet-level",
        default=None,
        help="Bet level name; defaults to the first configured level"
    )
    parser.add_argument(
        "--report-dir",
        default=None,
        help="Write a JSON summary report to this directory"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar"
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point for the payout simulator."""
    args = parse_arguments(argv)

    config_loader = YamlConfigLoader(SchemaValidator())
    factory = MachineFactory(RNGProvider())

    try:
        config = config_loader.load_file(args.config, DEFAULT_SCHEMA_PATH)
    except ConfigError as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    initialize_logging(config.get("logging"), verbose=args.verbose)
    logger = logging.getLogger("main")
    logger.info("Payout simulator starting")

    try:
        machine = factory.create_machine(
            machine_id_for(config, args.config), config, rng_strategy_name=args.rng, seed=args.seed
        )
        credit_cost = machine.get_credit_cost(args.bet_level)
    except MachineConfigurationError as e:
        logger.error(f"Invalid machine configuration: {e}")
        return 1
    except KeyError as e:
        logger.error(f"Unknown bet level: {e}")
        return 1

    try:
        stats = SpinSimulator(machine).run(args.spins, credit_cost=credit_cost, show_progress=args.progress)
    except KeyboardInterrupt:
        logger.warning("Simulation interrupted")
        return 130

    if args.report_dir:
        report_path = ReportGenerator(args.report_dir).generate_summary_report(stats, machine.get_info())
        logger.info(f"Report written to {report_path}")

    print("\nSimulation Summary:")
    print(f"- Machine: {machine.id}")
    print(f"- Spins: {stats.total_spins:,}")
    print(f"- Credit cost: {credit_cost}")
    print(f"- Total bet: {stats.total_bet:,}")
    print(f"- Total win: {stats.total_win:,}")
    print(f"- RTP: {stats.return_to_player:.4%}")
    print(f"- Hit rate: {stats.hit_rate:.4%}")
    print(f"- Max win: {stats.max_win:,}")
    print(f"- Duration: {stats.duration:.2f}s")

    return 0


if __name__ == "__main__":
    sys.exit(main())
