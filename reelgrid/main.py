# reelgrid/main.py
import os
import sys
import logging
import argparse
import time

from reelgrid.infrastructure.config.loaders.yaml_loader import YamlConfigLoader, ConfigError
from reelgrid.infrastructure.config.validators.schema_validator import SchemaValidator
from reelgrid.infrastructure.logging.log_manager import initialize_logging
from reelgrid.infrastructure.rng.rng_provider import RNGProvider

from reelgrid.domain.events.event_dispatcher import EventDispatcher
from reelgrid.domain.events.session_events import SessionEventType
from reelgrid.domain.machine.errors import EngineError
from reelgrid.domain.machine.factories.engine_factory import EngineFactory, PACKAGE_ROOT
from reelgrid.domain.session.entities.game_session import GameSession

from reelgrid.application.simulation.session_runner import SessionRunner
from reelgrid.application.analysis.report_generator import ReportGenerator


DEFAULT_CONFIG_PATH = os.path.join(PACKAGE_ROOT, "application", "config", "simulation", "default_simulation.yaml")
SIMULATION_SCHEMA_PATH = os.path.join(PACKAGE_ROOT, "application", "config", "schemas", "simulation_schema.json")


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Reel grid payout simulator")

    parser.add_argument(
        "-c", "--config",
        default=DEFAULT_CONFIG_PATH,
        help="Path to simulation configuration file"
    )

    parser.add_argument(
        "--engine",
        default=None,
        help="Engine config file, or the name of a shipped preset (three_reel, grid_12x8)"
    )

    parser.add_argument("--rounds", type=int, default=None, help="Number of rounds to play")
    parser.add_argument("--bet", type=int, default=None, help="Fixed bet per round")
    parser.add_argument("--balance", type=int, default=None, help="Initial balance")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed")

    parser.add_argument(
        "--rng",
        choices=sorted(RNGProvider.get_available_strategies()),
        default=None,
        help="RNG strategy"
    )

    parser.add_argument("--output", default=None, help="Write JSON/CSV reports to this directory")

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


def resolve_engine_path(engine_ref: str, config_path: str) -> str:
    """
    Resolve an engine reference. Bare preset names map to the shipped
    presets, relative paths are taken from the simulation config's directory.
    """
    if os.path.isabs(engine_ref):
        return engine_ref

    if not engine_ref.endswith((".yaml", ".yml")) and os.sep not in engine_ref and "/" not in engine_ref:
        return EngineFactory.preset_path(engine_ref)

    if os.path.isfile(engine_ref):
        return os.path.abspath(engine_ref)

    return os.path.normpath(os.path.join(os.path.dirname(os.path.abspath(config_path)), engine_ref))


def apply_overrides(config, args):
    """
    Fold command line flags into the loaded simulation config.

    Raises:
        ConfigError: The config or one of its sections is not a mapping
    """
    if not isinstance(config, dict):
        raise ConfigError(f"Simulation config must be a mapping, got {type(config).__name__}")

    for section in ("session", "rng", "output"):
        if config.get(section) is None:
            config[section] = {}
        elif not isinstance(config[section], dict):
            raise ConfigError(f"Section '{section}' must be a mapping, got {type(config[section]).__name__}")

    session_config = config["session"]
    rng_config = config["rng"]
    output_config = config["output"]

    if args.rounds is not None:
        session_config["max_rounds"] = args.rounds
    if args.bet is not None:
        session_config["bet"] = args.bet
    if args.balance is not None:
        session_config["initial_balance"] = args.balance
    if args.seed is not None:
        rng_config["seed"] = args.seed
    if args.rng is not None:
        rng_config["strategy"] = args.rng
    if args.output is not None:
        output_config["enabled"] = True
        output_config["directory"] = args.output
    if args.progress:
        session_config["show_progress"] = True

    if args.verbose:
        log_config = config.get("logging") or {}
        log_config["level"] = "DEBUG"
        log_config["console_level"] = "DEBUG"
        log_config["loggers"] = {}
        config["logging"] = log_config

    return config


def print_summary(summary):
    print("\nSimulation Summary:")
    print(f"- Engine: {summary['engine_id']}")
    print(f"- Rounds: {summary['total_rounds']} ({summary['end_reason']})")
    print(f"- Total Bet: {summary['total_bet']}")
    print(f"- Total Win: {summary['total_win']}")
    print(f"- RTP: {summary['return_to_player']:.2%}")
    if summary.get("expected_rtp") is not None:
        print(f"- Expected RTP: {summary['expected_rtp']:.2%}")
    print(f"- Hit Rate: {summary['hit_rate']:.2%}")
    print(f"- Top-ups: {summary['total_top_up']}")
    print(f"- Final Balance: {summary['final_balance']}")

    print("\nOutcomes:")
    for outcome, count in summary["outcome_counts"].items():
        share = count / summary["total_rounds"] if summary["total_rounds"] else 0
        print(f"  {outcome:<12} {count:>8} ({share:.2%})")


def main(argv=None):
    """Main entry point for the reel grid simulator."""
    args = parse_arguments(argv)
    start_time = time.time()

    config_loader = YamlConfigLoader(SchemaValidator())

    try:
        config = config_loader.load_file(args.config, schema_path=SIMULATION_SCHEMA_PATH) or {}
        config = apply_overrides(config, args)
        print(f"Loaded configuration from {args.config}")
    except ConfigError as e:
        print(f"Error loading configuration: {str(e)}")
        return 1

    initialize_logging(config.get("logging") or None)
    logger = logging.getLogger("main")
    logger.info("Reel grid simulator starting")

    try:
        engine_ref = args.engine or config.get("engine_config", "grid_12x8")
        engine_path = resolve_engine_path(engine_ref, args.config)

        rng_config = config["rng"]
        engine_factory = EngineFactory(RNGProvider())
        engine = engine_factory.create_engine_from_file(
            config_loader,
            engine_path,
            rng_strategy_name=rng_config.get("strategy", "mersenne"),
            rng_seed=rng_config.get("seed")
        )

        event_dispatcher = EventDispatcher()
        event_dispatcher.register(
            SessionEventType.JACKPOT_WIN,
            lambda event: logger.info(f"Jackpot: won {event.data['win_amount']}")
        )

        session_config = config["session"]
        session = GameSession(
            f"{engine.id}_{int(start_time)}",
            engine,
            initial_balance=session_config.get("initial_balance", 999),
            event_dispatcher=event_dispatcher,
            history_size=session_config.get("history_size", 50)
        )

        output_config = config["output"]
        runner_config = dict(session_config)
        runner_config["record_rounds"] = output_config.get("enabled", False) and output_config.get("record_rounds", True)

        runner = SessionRunner(session, runner_config)
        logger.info("Starting simulation")
        summary = runner.run()
        logger.info("Simulation completed")

        if output_config.get("enabled", False):
            report_generator = ReportGenerator(output_config.get("directory", "results"))
            summary_path = report_generator.generate_summary_report(summary, engine.get_info())
            print(f"\nSummary report: {summary_path}")
            if runner.rounds:
                rounds_path = report_generator.generate_rounds_report(runner.rounds)
                print(f"Rounds report: {rounds_path}")

        print_summary(summary)

        elapsed_time = time.time() - start_time
        print(f"\nTotal execution time: {elapsed_time:.2f} seconds")

        return 0

    except KeyboardInterrupt:
        logger.info("Simulation interrupted by user")
        return 130
    except (ConfigError, EngineError, ValueError) as e:
        logger.error(f"Simulation failed: {str(e)}")
        print(f"Error: {str(e)}")
        return 1
    except Exception as e:
        logger.exception(f"Error during simulation: {str(e)}")
        return 1
    finally:
        logging.shutdown()


if __name__ == "__main__":
    sys.exit(main())
