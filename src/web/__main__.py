from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Optional, Sequence

from app_config.common import CommonAppSettings
from app_config.logging import init_logging
from app_config.models import LoggingSettings, SettingsFileRequest
from app_config.sources.registry import configure_production
from web.settings import AppSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StartupSettings:
    title: str
    port: int
    welcome_message: str


def application_start() -> StartupSettings:
    """Read the settings the application needs at startup."""
    startup = StartupSettings(
        title=CommonAppSettings.Title,
        port=CommonAppSettings.Port,
        welcome_message=AppSettings.WelcomeMessage,
    )
    logger.info(
        "web.started settings=%s",
        ",".join(a.qualified_name for a in (*CommonAppSettings.accessors(), *AppSettings.accessors())),
    )
    return startup


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="web", description="Web application startup")
    parser.add_argument(
        "--settings",
        default="data/config/app.env",
        help="Path to the application settings file (default: data/config/app.env)",
    )
    parser.add_argument(
        "--common",
        action="append",
        default=None,
        help="Path to a linked common settings file (repeatable, default: data/config/common.env)",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    init_logging(LoggingSettings(level=args.log_level))

    common = tuple(args.common) if args.common is not None else SettingsFileRequest().common_paths
    configure_production(SettingsFileRequest(path=args.settings, common_paths=common))
    application_start()
    return 0


if __name__ == "__main__":
    sys.exit(main())
