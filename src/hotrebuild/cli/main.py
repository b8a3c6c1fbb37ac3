"""
Command-line interface for hotrebuild.

This module provides the main CLI entry point: it refuses to run inside an
already supervised process, turns command-line flags into the overlay
configuration layer, resolves it against the config file, and runs the
watch/rebuild/restart loop until interrupted.
"""

import argparse
import logging
import os
import shlex
import sys
import threading
from pathlib import Path
from typing import List, Optional

from ..config import (
    SUPERVISED_ENV_VAR,
    files_mode_config,
    find_default_config,
    load_config_file,
    resolve_config,
)
from ..models.config import RawConfig
from ..orchestration import (
    BuildRunSupervisor,
    SignalHandler,
    is_already_supervised,
)
from ..validation import ConfigError, SupervisorError, handle_cli_error
from ..watching import EventGate, FileWatcher, PathFilter

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    # stderr keeps supervisor logs apart from the managed app's stdout.
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    if lowered in ("false", "0", "no", "off"):
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got '{value}'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hotrebuild",
        description="Rebuild and restart a Cargo project whenever its sources change.",
    )
    parser.add_argument(
        "files", nargs="*", type=Path,
        help="Rust files to compile with rustc and run (files mode; the config file is not used)",
    )
    parser.add_argument("--config", type=Path, help="Config file path (default: .hotrebuild.toml if present)")

    watching = parser.add_argument_group("watching")
    watching.add_argument("--watch", action="append", help="Path to watch (repeatable)")
    watching.add_argument("--ignore", action="append", help="Ignore glob (repeatable)")
    watching.add_argument("--include-ext", action="append",
                          help="File extension that triggers a rebuild (repeatable). Default: rs,toml")
    watching.add_argument("--exclude-ext", action="append", help="File extension to never react to (repeatable)")
    watching.add_argument("--debounce-ms", type=int, help="Minimum milliseconds between rebuilds")
    watching.add_argument("--clear", type=_parse_bool, metavar="{true,false}",
                          help="Clear the screen before each restart")

    commands = parser.add_argument_group("commands")
    commands.add_argument("--build", type=shlex.split, metavar="COMMAND",
                          help="Explicit build command, e.g. --build 'cargo build --release'")
    commands.add_argument("--run", type=shlex.split, metavar="COMMAND",
                          help="Explicit run command; default runs the built binary")

    cargo = parser.add_argument_group("cargo")
    cargo.add_argument("--manifest-path", help="Path to Cargo.toml")
    cargo.add_argument("-p", "--package", help="Package to build (workspace)")
    cargo.add_argument("--bin", help="Binary target to build and run")
    cargo.add_argument("--features", action="append", help="Cargo feature to enable (repeatable)")
    # default=None: an absent flag must not mask a value from the config file.
    cargo.add_argument("--all-features", action="store_true", default=None)
    cargo.add_argument("--no-default-features", action="store_true", default=None)
    cargo.add_argument("--workspace", action="store_true", default=None)
    cargo.add_argument("--release", action="store_true", default=None)

    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level")
    return parser


def args_to_config(args: argparse.Namespace) -> RawConfig:
    """Build the command-line configuration layer from parsed arguments."""
    if args.files:
        return files_mode_config(args.files)

    return RawConfig(
        watch=args.watch,
        ignore=args.ignore,
        include_ext=args.include_ext,
        exclude_ext=args.exclude_ext,
        debounce_ms=args.debounce_ms,
        clear=args.clear,
        build=args.build or None,
        run=args.run or None,
        manifest_path=args.manifest_path,
        package=args.package,
        bin=args.bin,
        features=args.features,
        all_features=args.all_features,
        no_default_features=args.no_default_features,
        workspace=args.workspace,
        release=args.release,
    )


def load_base_config(args: argparse.Namespace) -> Optional[RawConfig]:
    """
    Load the config-file layer, unless running in files mode.

    Raises:
        ConfigError: If the config file cannot be read or is invalid
    """
    if args.files:
        return None
    path = args.config or find_default_config()
    if path is None:
        logger.debug("No config file found; using command line and defaults")
        return None
    return load_config_file(path)


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for hotrebuild.

    Raises:
        SystemExit: When run inside a supervised process, on configuration
            errors, and on fatal supervisor errors.
    """
    # A supervised child must never start a supervisor of its own.
    if is_already_supervised(os.environ):
        configure_logging()
        logger.error("hotrebuild is already supervising this process "
                     f"({SUPERVISED_ENV_VAR} is set)")
        logger.error("Hint: hotrebuild cannot watch itself; this prevents infinite recursion")
        sys.exit(1)

    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        overlay = args_to_config(args)
        base = load_base_config(args)
        config = resolve_config(overlay, base)
    except ConfigError as e:
        handle_cli_error(error=e, context="configuration loading", exit_code=1, logger=logger)

    shutdown_event = threading.Event()
    supervisor = BuildRunSupervisor(config, shutdown_event=shutdown_event)
    gate = EventGate(config.debounce, PathFilter.from_config(config))
    watcher = FileWatcher(config.watch)

    with SignalHandler(shutdown_event):
        try:
            with watcher:
                supervisor.watch(watcher, gate)
        except SupervisorError as e:
            handle_cli_error(error=e, context="supervisor", exit_code=1,
                             include_traceback=True, logger=logger)
        finally:
            logger.info("Stopping managed process...")
            supervisor.shutdown()

    logger.info("hotrebuild stopped.")


if __name__ == "__main__":
    main_cli()
