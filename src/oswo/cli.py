"""
Command-line interface for oswo.

Usage:
    oswo [options] [command] [args]

Commands:
    show          Show connected outputs (default)
    set NAME...   Enable the named outputs left to right, disable the rest
    use PROFILE   Apply a stored profile
    auto          Apply the best matching profile once
    profiles      List stored profiles
    save PROFILE  Store the enabled outputs as a profile
    daemon        Re-apply the best profile whenever outputs change
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import Config, CONFIG_FILENAME
from .exceptions import (
    OswoError,
    ConfigError,
    ConfigValidationError,
    ProfileError,
    PlanError,
    TransportError,
    CommandFailedError,
    CompositorNotFoundError,
    TransportFatalError,
)
from .commands import (
    show_outputs,
    set_outputs,
    use_profile,
    auto_profile,
    run_daemon,
    list_profiles,
    save_profile,
)
from .transport import SwayTransport


def setup_logging(level: str = "INFO") -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help=f"Path to config file (default: $XDG_CONFIG_HOME/{CONFIG_FILENAME})"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Show all modes; repeat for debug logging"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oswo",
        description="Organise sway outputs with named layout profiles"
    )
    _add_global_options(parser)

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("show", help="Show connected outputs (default)")

    set_parser = subparsers.add_parser("set", help="Enable outputs by name, left to right")
    set_parser.add_argument("names", nargs="+", help="Output names, e.g. eDP-1 HDMI-A-1")

    use_parser = subparsers.add_parser("use", help="Apply a stored profile")
    use_parser.add_argument("profile", help="Profile name")

    subparsers.add_parser("auto", help="Apply the best matching profile once")
    subparsers.add_parser("profiles", help="List stored profiles")

    save_parser = subparsers.add_parser("save", help="Store the enabled outputs as a profile")
    save_parser.add_argument("profile", help="Profile name")
    save_parser.add_argument("--force", action="store_true", help="Replace an existing profile")

    subparsers.add_parser("daemon", help="Re-apply the best profile on output changes")

    return parser


def _log_level(args: argparse.Namespace, config: Config) -> str:
    if args.log_level:
        return args.log_level
    if args.verbose >= 2:
        return "DEBUG"
    return config.logging.level


def run(args: argparse.Namespace) -> int:
    """Execute parsed arguments and map errors to exit codes."""
    logger = logging.getLogger(__name__)

    try:
        config = Config.load(config_file=args.config)
        setup_logging(_log_level(args, config))

        transport = SwayTransport.from_config(config.sway)
        command = args.command or "show"

        if command == "show":
            show_outputs(transport, verbose=args.verbose >= 1)
        elif command == "set":
            set_outputs(transport, args.names)
        elif command == "use":
            use_profile(config, transport, args.profile)
        elif command == "auto":
            auto_profile(config, transport)
        elif command == "profiles":
            list_profiles(config, transport)
        elif command == "save":
            # Never write to the system-wide file
            target = args.config or (Config.get_config_dir() / CONFIG_FILENAME)
            save_profile(config, transport, args.profile, config_file=target, force=args.force)
        elif command == "daemon":
            run_daemon(config, transport)
        else:
            print(f"Unknown command: {command}", file=sys.stderr)
            return 1

        return 0

    # Handle specific error types with appropriate exit codes and messages
    except KeyboardInterrupt:
        print("\nCancelled by user", file=sys.stderr)
        return 130

    except ConfigValidationError as e:
        print(f"\n❌ Configuration Validation Error: {e}", file=sys.stderr)
        return 78  # EX_CONFIG

    except ConfigError as e:
        print(f"\n❌ Configuration Error: {e}", file=sys.stderr)
        return 78  # EX_CONFIG

    except (ProfileError, PlanError) as e:
        print(f"\n❌ Cannot Plan Layout: {e}", file=sys.stderr)
        print("\nNo output was changed.", file=sys.stderr)
        return 65  # EX_DATAERR

    except CommandFailedError as e:
        print(f"\n❌ Layout Partially Applied\n", file=sys.stderr)
        print(str(e), file=sys.stderr)
        return 70  # EX_SOFTWARE

    except CompositorNotFoundError as e:
        print(f"\n❌ Compositor Not Found\n", file=sys.stderr)
        print(str(e), file=sys.stderr)
        return 69  # EX_UNAVAILABLE

    except TransportFatalError as e:
        print(f"\n❌ Lost Connection to Compositor: {e}", file=sys.stderr)
        return 69  # EX_UNAVAILABLE

    except TransportError as e:
        print(f"\n❌ Compositor Error: {e}", file=sys.stderr)
        return 69  # EX_UNAVAILABLE

    except OswoError as e:
        # Catch-all for any other oswo errors
        print(f"\n❌ Error: {e}", file=sys.stderr)
        logger.error(str(e))
        if args.verbose >= 2:
            raise
        return 1

    except Exception as e:
        # Unexpected errors - show full traceback in debug mode
        print(f"\n❌ Unexpected Error: {type(e).__name__}: {e}", file=sys.stderr)
        logger.error(f"Unexpected error: {type(e).__name__}: {e}")
        if args.verbose >= 2:
            raise
        print("\nRun with -vv for full traceback.", file=sys.stderr)
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    return run(args)


def daemon_main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the oswod daemon."""
    parser = argparse.ArgumentParser(
        prog="oswod",
        description="Re-apply the best matching output profile whenever outputs change"
    )
    _add_global_options(parser)
    args = parser.parse_args(argv)
    args.command = "daemon"
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
