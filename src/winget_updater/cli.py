#!/usr/bin/env python3
"""
winget-updater CLI

Checks for application updates through WinGet and applies them.
"""

import argparse
import logging
import sys
from pathlib import Path

from common.exceptions import ConfigError
from common.logging_config import setup_logging

from .config import UpdaterSettings
from .orchestrator import UpdateRun
from .report import write_json_report

logger = logging.getLogger(__name__)


def _settings_from_args(args) -> UpdaterSettings:
    return UpdaterSettings.from_env(
        log_dir=args.log_dir,
        powershell=args.powershell,
        timeout=args.timeout,
        log_level=logging.DEBUG if args.verbose else logging.INFO,
    )


def _finish(args, report) -> int:
    if args.json:
        write_json_report(report, args.json)

    if report.aborted:
        return 1
    if args.strict and report.failed:
        return 1
    return 0


def cmd_check(args):
    """List applications with pending updates."""
    report = UpdateRun(_settings_from_args(args)).execute(check_only=True)
    return _finish(args, report)


def cmd_update(args):
    """Update every application with a pending update."""
    report = UpdateRun(_settings_from_args(args)).execute()
    return _finish(args, report)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="winget-updater",
        description="Update applications installed through WinGet",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  winget-updater                         # Update everything (same as 'update')
  winget-updater check                   # List pending updates only
  winget-updater update --json out.json  # Also write a JSON summary
  winget-updater --log-dir D:\\logs       # Write the transcript elsewhere
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--log-dir", type=Path, help="Directory for the run transcript")
    parser.add_argument("--powershell", help="PowerShell executable to use")
    parser.add_argument("--timeout", type=float, help="Per-command timeout in seconds")
    parser.add_argument("--json", type=Path, metavar="PATH", help="Write a JSON summary to PATH")
    parser.add_argument("--strict", action="store_true",
                        help="Exit non-zero if any application failed to update")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    check_parser = subparsers.add_parser("check", help="List pending updates")
    check_parser.set_defaults(func=cmd_check)

    update_parser = subparsers.add_parser("update", help="Install pending updates")
    update_parser.set_defaults(func=cmd_update)

    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    setup_logging(level=level)

    try:
        if args.command is None:
            # No arguments runs the full workflow
            return cmd_update(args)
        return args.func(args)
    except ConfigError as e:
        logger.error(str(e))
        return 2
    except OSError as e:
        # Unwritable log directory or JSON summary path
        logger.error(f"Cannot write run output: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
