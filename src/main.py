"""
Pity Roll - Main Entry Point

A command-line decision helper: named yes/no probabilities that get more
generous after every failure, plus a plain dice roller.

This module provides the argument parser, the runtime configuration and the
RollCLI command surface that wires the stores and engines together.
"""

import sys
from pathlib import Path

# Add the project root to the Python path for module discovery
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import argparse
import logging
import os
from dataclasses import dataclass, field
from typing import Callable, Optional

from src.data_models import (
    Configuration,
    NotFoundError,
    PersistenceError,
    RollError,
    RollReport,
    RollState,
    ValidationError,
)
from src.dice import DiceEngine, DICE_TYPES
from src.oracle import DecisionEngine, RandomSource, SystemRandomSource
from src.storage import ConfigStore, StateStore, STATE_DB_NAME


# Configure logging
def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

DATA_DIR_ENV = "ROLL_HOME"


def default_data_dir() -> Path:
    """Per-user tool directory, overridable with $ROLL_HOME."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".roll"


@dataclass
class AppConfig:
    """Runtime configuration for one invocation."""

    data_dir: Path = field(default_factory=default_data_dir)
    seed: Optional[int] = None
    verbose: bool = False

    def __post_init__(self):
        """Ensure paths are Path objects."""
        if isinstance(self.data_dir, str):
            self.data_dir = Path(self.data_dir).expanduser()

    @property
    def state_db_path(self) -> Path:
        return self.data_dir / STATE_DB_NAME


def prepare_data_dir(data_dir: Path) -> Path:
    """
    Create the data directory if needed.

    Raises:
        PersistenceError: If the directory cannot be created
    """
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PersistenceError(f"Failed to create data directory {data_dir}: {e}") from e
    return data_dir


# =============================================================================
# COMMAND SURFACE
# =============================================================================


class RollCLI:
    """
    Command handlers for the roll tool.

    Stores and the random source are passed in, never looked up globally, so
    tests can drive every command against a temporary directory and a
    scripted random source.
    """

    def __init__(
        self,
        config_store: ConfigStore,
        state_store: StateStore,
        rng: Optional[RandomSource] = None,
    ):
        self.config_store = config_store
        self.state_store = state_store
        rng = rng or SystemRandomSource()
        self.engine = DecisionEngine(rng=rng)
        self.dice = DiceEngine(rng=rng)
        self.commands: dict[str, Callable[[argparse.Namespace], None]] = {
            "create": self.cmd_create,
            "roll": self.cmd_roll,
            "list": self.cmd_list,
            "show": self.cmd_show,
            "delete": self.cmd_delete,
            "dice": self.cmd_dice,
        }

    def process_command(self, args: argparse.Namespace) -> None:
        """Dispatch parsed arguments to the matching handler."""
        self.commands[args.command](args)

    def cmd_create(self, args: argparse.Namespace) -> None:
        """Create a configuration and its zeroed state."""
        config = Configuration(
            name=args.name,
            chance=args.chance,
            grace=args.grace,
            pity=args.pity,
            variance=args.variance,
        ).validate()

        if self.config_store.exists(config.name):
            raise ValidationError(
                f"Configuration '{config.name}' already exists; delete it before creating it again"
            )

        # State goes first so a config file never exists without its state row.
        # A leftover record from a hand-deleted config file must not carry over.
        self.state_store.delete(config.name)
        self.state_store.initialize(config.name)
        try:
            config_path = self.config_store.save(config)
        except PersistenceError:
            self.state_store.delete(config.name)
            raise

        print(f"Created roll configuration '{config.name}' with:")
        print(f"  Chance: {config.chance}%")
        print(f"  Grace: {config.grace}%")
        print(f"  Pity: {config.pity} rolls")
        print(f"  Variance: 1-{config.variance} chance of adding grace ({config.grace}%)")
        print(f"\nConfig saved to: {config_path}")

    def roll(self, name: str) -> tuple[RollState, RollReport]:
        """
        Roll a named configuration and persist the new state.

        The engine runs inside the state store transaction, so the state it
        sees is exactly the state it replaces.
        """
        config = self.config_store.load(name)
        reports: list[RollReport] = []

        def apply(state: RollState) -> RollState:
            new_state, report = self.engine.roll(config, state)
            reports.append(report)
            return new_state

        new_state = self.state_store.transact(name, apply)
        return new_state, reports[-1]

    def cmd_roll(self, args: argparse.Namespace) -> None:
        """Roll using a configuration."""
        _, report = self.roll(args.name)

        print(f"\n🎲 Rolling '{args.name}'...")
        print(f"Base chance: {report.base_chance}%")
        print(f"Pity counter: {report.pity_counter}")
        print(f"Grace bonus: {report.grace_bonus}%")
        if report.variance_triggered:
            print("Variance bonus: applied")
        print(f"Effective chance: {report.effective_chance}%")
        print(f"Roll: {report.roll}")

        if report.success:
            print("\n✅ SUCCESS! 🎉")
        else:
            print("\n❌ FAILED")

    def cmd_list(self, args: argparse.Namespace) -> None:
        """List all configurations with their current pity."""
        print("Available configurations:")
        for name in self.config_store.list_names():
            try:
                config = self.config_store.load(name)
            except (NotFoundError, PersistenceError) as e:
                logger.warning(f"Skipping configuration {name}: {e}")
                continue

            try:
                state = self.state_store.read(name)
            except NotFoundError:
                state = RollState()

            print(f"\n  {name}:")
            print(
                f"    Chance: {config.chance}% | Grace: {config.grace}% | "
                f"Pity: {config.pity} | Variance: 1-{config.variance} chance"
            )
            print(f"    Current pity: {state.pity_counter}")

    def cmd_show(self, args: argparse.Namespace) -> None:
        """Show a configuration, its state and the pity-only current chance."""
        config = self.config_store.load(args.name)
        state = self.state_store.read(args.name)

        print(f"Configuration '{config.name}':")
        print(f"  Base chance: {config.chance}%")
        print(f"  Grace: {config.grace}% per fail")
        print(f"  Max pity: {config.pity} rolls")
        print(f"  Variance: 1-{config.variance} chance of adding grace ({config.grace}%)")
        print("\nCurrent state:")
        print(f"  Pity counter: {state.pity_counter}")
        print(f"  Current chance: {self.engine.current_chance(config, state)}%")
        print(f"  Last roll: {state.last_roll}")
        print(f"\nConfig file: {self.config_store.path_for(config.name)}")

    def cmd_delete(self, args: argparse.Namespace) -> None:
        """Delete a configuration and its state."""
        self.config_store.delete(args.name)
        self.state_store.delete(args.name)
        print(f"Deleted configuration '{args.name}'")

    def cmd_dice(self, args: argparse.Namespace) -> None:
        """Roll a single die with an optional shift."""
        report = self.dice.roll_named(args.type, shift=args.shift)

        print(f"\n🎲 Rolling {report.label}...")
        print(f"Roll: {report.roll}")

        if report.shift != 0:
            print(f"Shifted result: {report.shifted_result} (roll + {report.shift})")
            print(f"\nRange for {report.label} with shift: {report.range_low}-{report.range_high}")
        else:
            print(f"\nStandard range for {report.label}: 1-{report.sides}")


# =============================================================================
# ARGUMENT PARSING
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="roll",
        description="A probability-based roll system with pity mechanics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  roll create coffee 30 10 5 3     # 30% base, +10% per fail, max 5 pity, variance 3
  roll roll coffee                 # Roll it
  roll show coffee                 # Inspect config and current pity
  roll dice d20 --shift 2          # Roll a d20 and add 2
        """
    )

    # General options
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help=f"Directory for configs and state (default: ${DATA_DIR_ENV} or ~/.roll)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed the random source for reproducible rolls",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    create = subparsers.add_parser("create", help="Create a new roll configuration")
    create.add_argument("name", help="Configuration name")
    create.add_argument("chance", type=int, help="Base success chance, 0-100")
    create.add_argument("grace", type=int, help="Percentage points added per failure")
    create.add_argument("pity", type=int, help="Maximum pity counter")
    create.add_argument("variance", type=int, help="Variance bound, 0 disables")

    roll = subparsers.add_parser("roll", help="Roll using a configuration")
    roll.add_argument("name", help="Configuration name")

    subparsers.add_parser("list", help="List all roll configurations")

    show = subparsers.add_parser("show", help="Show details of a roll configuration")
    show.add_argument("name", help="Configuration name")

    delete = subparsers.add_parser("delete", help="Delete a roll configuration")
    delete.add_argument("name", help="Configuration name")

    dice = subparsers.add_parser(
        "dice",
        help=f"Roll dice ({', '.join(DICE_TYPES)})",
    )
    dice.add_argument("type", help="Dice type, e.g. d6 or D20")
    dice.add_argument(
        "-s", "--shift",
        type=int,
        default=0,
        help="Shift the dice result by this amount",
    )

    return parser


def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)


def create_config_from_args(args: argparse.Namespace) -> AppConfig:
    """Create AppConfig from parsed arguments."""
    config = AppConfig(seed=args.seed, verbose=args.verbose)
    if args.data_dir is not None:
        config.data_dir = Path(args.data_dir).expanduser()
    return config


def create_cli(config: AppConfig, rng: Optional[RandomSource] = None) -> RollCLI:
    """Open the stores under the configured data directory."""
    data_dir = prepare_data_dir(config.data_dir)
    return RollCLI(
        config_store=ConfigStore(data_dir),
        state_store=StateStore(config.state_db_path),
        rng=rng or SystemRandomSource(seed=config.seed),
    )


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[list[str]] = None, rng: Optional[RandomSource] = None) -> int:
    """
    Main entry point for CLI usage.

    Returns:
        Process exit code: 0 on success, 1 on any reported error
    """
    args = parse_arguments(argv)
    setup_logging(args.verbose)
    config = create_config_from_args(args)

    try:
        cli = create_cli(config, rng=rng)
        cli.process_command(args)
    except RollError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
