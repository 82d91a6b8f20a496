from __future__ import annotations

import argparse
import importlib
import logging
import sys
from typing import Optional, Sequence, Tuple, Type

from app_config.errors import FileLoadError
from app_config.groups import SettingsGroup, registered_groups
from app_config.logging import init_logging
from app_config.models import LoggingSettings
from app_config.sources.file_source import FileConfigurationSource
from app_config.verification import verify_groups

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="app-config", description="Typed application settings tools")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    # Command: check
    check_parser = subparsers.add_parser("check", help="Verify settings groups against a settings file")
    check_parser.add_argument(
        "--settings",
        required=True,
        help="Path to the settings file to verify against",
    )
    check_parser.add_argument(
        "--common",
        action="append",
        default=[],
        help="Path to a linked common settings file (repeatable)",
    )
    check_parser.add_argument(
        "--module",
        action="append",
        default=[],
        help="Module declaring the settings groups to check (repeatable, default: every registered group)",
    )

    return parser


def _groups_for_module(module_name: str) -> Tuple[Type[SettingsGroup], ...]:
    """Groups the module registers on import, re-exports, or declares in its submodules."""
    before = set(registered_groups())
    module = importlib.import_module(module_name)
    exported = {value for value in vars(module).values() if isinstance(value, type)}
    prefix = f"{module_name}."
    return tuple(
        group
        for group in registered_groups()
        if group not in before
        or group in exported
        or group.__module__ == module_name
        or group.__module__.startswith(prefix)
    )


def _check(args: argparse.Namespace) -> int:
    if args.module:
        selected: dict[Type[SettingsGroup], None] = {}
        for module_name in args.module:
            selected.update(dict.fromkeys(_groups_for_module(module_name)))
        groups = tuple(selected)
    else:
        groups = registered_groups()

    try:
        source = FileConfigurationSource.from_file(args.settings, args.common)
    except FileLoadError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    report = verify_groups(groups, source=source)
    print(report.format())
    if report.checked == 0:
        print("error: no settings groups found to check", file=sys.stderr)
        return 1
    return 0 if report.ok else 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    init_logging(LoggingSettings(level=args.log_level))

    if args.command == "check":
        return _check(args)
    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
