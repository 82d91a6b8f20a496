"""unittest support for checking settings groups against a fixture settings file."""

from __future__ import annotations

from contextlib import ExitStack
from pathlib import Path
from typing import ClassVar, Optional, Sequence, Type

from app_config.groups import SettingsGroup
from app_config.sources.file_source import FileConfigurationSource
from app_config.sources.registry import override
from app_config.verification import verify_groups


class SettingsFixtureMixin:
    """
    Installs a fixture settings file as the process-wide override for each test.

    Mix into a `unittest.TestCase`:

        class WebSettingsTests(SettingsFixtureMixin, unittest.TestCase):
            settings_file = FIXTURES / "web.env"
            common_settings_files = (FIXTURES / "common.env",)
            settings_groups = (AppSettings, CommonAppSettings)

            def test_settings_are_configured(self) -> None:
                self.assertSettingsResolve()
    """

    settings_file: ClassVar[Optional[Path | str]] = None
    common_settings_files: ClassVar[Sequence[Path | str]] = ()
    settings_groups: ClassVar[Optional[Sequence[Type[SettingsGroup]]]] = None

    settings_source: FileConfigurationSource

    def setUp(self) -> None:
        super().setUp()  # type: ignore[misc]
        if self.settings_file is None:
            raise ValueError(f"{type(self).__name__}.settings_file must be set")
        self.settings_source = FileConfigurationSource.from_file(self.settings_file, self.common_settings_files)

        stack = ExitStack()
        stack.enter_context(override(self.settings_source))
        self.addCleanup(stack.close)  # type: ignore[attr-defined]

    def assertSettingsResolve(self) -> None:
        report = verify_groups(self.settings_groups)
        if not report.ok:
            self.fail(report.format())  # type: ignore[attr-defined]
