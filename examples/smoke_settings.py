from __future__ import annotations

import logging
from pathlib import Path

from app_config import CommonAppSettings, verify_groups
from app_config.logging import init_logging
from app_config.models import LoggingSettings
from app_config.sources import FileConfigurationSource, override
from web.settings import AppSettings

FIXTURES = Path(__file__).resolve().parent.parent / "tests" / "fixtures"


def main() -> None:
    init_logging(LoggingSettings(level="DEBUG"))
    logger = logging.getLogger("smoke")

    source = FileConfigurationSource.from_file(FIXTURES / "web.env", [FIXTURES / "common.env"])
    with override(source):
        CommonAppSettings.snapshot()
        AppSettings.snapshot()
        logger.info("Settings resolved source=%s", source.name)
        report = verify_groups([AppSettings, CommonAppSettings])
    logger.info("Settings verified ok=%s checked=%d", report.ok, report.checked)


if __name__ == "__main__":
    main()
