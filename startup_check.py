#!/usr/bin/env python3
"""Startup check utility for the Pickleball Club backend.

Builds the application's full component graph for a configuration profile and
reports whether it could be constructed.

Usage:
    python startup_check.py [command] [options]

Commands:
    check             Build every component and release it again (default)
    components        List components in construction order without building them

Examples:
    python startup_check.py                         # Check the "test" profile
    python startup_check.py check --profile dev     # Check another profile
    python startup_check.py check --env-dir ./conf  # Read profile files from ./conf
    python startup_check.py components
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from pickleball_club.bootstrap import TEST_PROFILE, build_container, check_startup  # noqa: E402
from pickleball_club.config import configure_logging  # noqa: E402
from pickleball_club.exceptions import InitializationFault  # noqa: E402


def cmd_check(args: argparse.Namespace) -> int:
    """Build the graph for the profile and report the outcome."""
    print(f"Checking startup for profile '{args.profile}'...")
    report = check_startup(args.profile, env_dir=args.env_dir)
    if report.ok:
        print(f"OK: application context for profile '{report.profile}' initialized.")
        return 0

    fault = report.fault
    print(f"FAILED: {type(fault).__name__} in component '{fault.component}': {fault}")
    if fault.__cause__ is not None:
        print(f"Caused by: {type(fault.__cause__).__name__}: {fault.__cause__}")
    return 1


def cmd_components(args: argparse.Namespace) -> int:
    """List components in the order they would be constructed."""
    container = build_container(args.profile, env_dir=args.env_dir)
    try:
        order = container.resolution_order()
    except InitializationFault as e:
        print(f"ERROR: {e}")
        return 1

    for position, name in enumerate(order, start=1):
        print(f"{position:>3}. {name}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Startup check for the Pickleball Club backend",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="check",
        choices=["check", "components"],
        help="Command to run (default: check)",
    )
    parser.add_argument("--profile", default=TEST_PROFILE, help=f"Configuration profile (default: {TEST_PROFILE})")
    parser.add_argument("--env-dir", type=Path, default=None, help="Directory holding the profile env files")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level for the check (default: WARNING)",
    )

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    command_map = {
        "check": cmd_check,
        "components": cmd_components,
    }
    return command_map[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
