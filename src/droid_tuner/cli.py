"""Command-line interface for droid-tuner.

Sub-commands:
  tui     interactive editor (default)
  list    print the droid table
  models  print the model catalog
  set     assign a model to one droid or all droids and save
"""

import argparse
import logging
import sys

from . import __version__
from .catalog import CatalogLoader, ModelCatalog
from .config import TunerConfig, config_from_env
from .droids import DroidParseError, DroidRecord, DroidRepository
from .logging import JSONLLogger


def _event_log(config: TunerConfig) -> JSONLLogger | None:
    """Open the event log, or run without one if the directory is unusable."""
    assert config.log_dir is not None
    try:
        return JSONLLogger(config.log_dir)
    except OSError as e:
        logging.getLogger(__name__).warning("Event log disabled: %s", e)
        return None


def _get_repository(config: TunerConfig, event_log: JSONLLogger | None = None) -> DroidRepository:
    assert config.droids_dir is not None
    return DroidRepository(config.droids_dir, event_log=event_log)


def _format_reasoning(droid: DroidRecord) -> str:
    return droid.reasoning_effort or "-"


def cmd_tui(args: argparse.Namespace, config: TunerConfig) -> int:
    """Run the interactive editor."""
    from .session import EditSession
    from .tui import TunerApp

    event_log = _event_log(config)
    catalog = CatalogLoader(config, event_log=event_log).load()
    session = EditSession(
        _get_repository(config, event_log),
        catalog,
        message_ttl=config.message_ttl,
        event_log=event_log,
    )
    TunerApp(session).run()
    return 0


def cmd_list(args: argparse.Namespace, config: TunerConfig) -> int:
    """List all droids with their model assignments."""
    droids = _get_repository(config).discover()

    if not droids:
        print(f"No droids found in {config.droids_dir}")
        return 0

    print(f"\n{'Name':<30} {'Model':<30} {'Reasoning':<10} Location")
    print("-" * 82)

    for droid in droids:
        print(
            f"{droid.name:<30} {droid.model:<30} "
            f"{_format_reasoning(droid):<10} {droid.location}"
        )

    print(f"\nTotal: {len(droids)} droid(s)")
    return 0


def _print_models(title: str, models: list[str], catalog: ModelCatalog) -> None:
    print(f"\n{title}")
    print("-" * 40)
    for model in models:
        info = catalog.reasoning_for(model)
        if info is None:
            print(f"  {model}")
            continue
        levels = ", ".join(info.supported)
        default = f", default: {info.default}" if info.default else ""
        print(f"  {model}  [reasoning: {levels}{default}]")


def cmd_models(args: argparse.Namespace, config: TunerConfig) -> int:
    """Show the available model catalog."""
    catalog = CatalogLoader(config).load()

    _print_models("Factory Models", catalog.factory, catalog)
    if catalog.byok:
        _print_models("BYOK Custom", catalog.byok, catalog)

    return 0


def cmd_set(args: argparse.Namespace, config: TunerConfig) -> int:
    """Assign a model to droids and save immediately."""
    if args.all == bool(args.name):
        print("Error: give a droid name or --all, not both.")
        return 1

    catalog = CatalogLoader(config).load()
    if args.model not in catalog.all_models():
        print(f"Warning: '{args.model}' is not in the model catalog.")

    info = catalog.reasoning_for(args.model)
    if args.reasoning and info is not None and args.reasoning not in info.supported:
        print(f"Error: '{args.model}' supports reasoning {', '.join(info.supported)}.")
        return 1

    event_log = _event_log(config)
    repo = _get_repository(config, event_log)
    droids = repo.discover()

    if not args.all:
        droids = [d for d in droids if d.name == args.name]
        if not droids:
            print(f"Error: Droid '{args.name}' not found.")
            return 1

    failed = 0
    for droid in droids:
        droid.model = args.model
        if args.no_reasoning:
            droid.reasoning_effort = None
        elif args.reasoning:
            droid.reasoning_effort = args.reasoning

        if not droid.is_modified:
            continue

        try:
            repo.save(droid)
        except (OSError, DroidParseError) as e:
            print(f"Error: Failed to save {droid.name}: {e}")
            if event_log is not None:
                event_log.log_save_failed(droid.name, str(e))
            failed += 1
            continue
        print(f"Set {droid.name} to '{droid.model}'")

    return 1 if failed else 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the droid-tuner CLI."""
    parser = argparse.ArgumentParser(
        prog="droid-tuner",
        description="Browse droids and reassign their models",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log diagnostics to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Sub-command help")

    subparsers.add_parser("tui", help="Interactive model editor (default)")
    subparsers.add_parser("list", help="List droids and their models")
    subparsers.add_parser("models", help="List available models")

    set_parser = subparsers.add_parser("set", help="Set the model of a droid")
    set_parser.add_argument("name", nargs="?", help="Name of the droid")
    set_parser.add_argument("model", help="Model id, or 'inherit'")
    set_parser.add_argument(
        "--all",
        action="store_true",
        help="Apply to every droid",
    )
    reasoning = set_parser.add_mutually_exclusive_group()
    reasoning.add_argument("--reasoning", help="Reasoning effort level")
    reasoning.add_argument(
        "--no-reasoning",
        action="store_true",
        help="Remove the reasoning effort setting",
    )

    return parser


def run_cli(argv: list[str] | None = None, config: TunerConfig | None = None) -> int:
    """Run the CLI with given arguments.

    Args:
        argv: Command-line arguments. Uses sys.argv[1:] if None.
        config: Configuration. Built from the environment if None.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if config is None:
        config = config_from_env()

    commands = {
        None: cmd_tui,
        "tui": cmd_tui,
        "list": cmd_list,
        "models": cmd_models,
        "set": cmd_set,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    return handler(args, config)


if __name__ == "__main__":
    sys.exit(run_cli())
