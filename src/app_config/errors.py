from __future__ import annotations

from pathlib import Path
from typing import Optional


class SettingsError(Exception):
    """Base class for every configuration resolution error."""


class KeyNotFound(SettingsError, KeyError):
    """Raised when a key is absent from the effective configuration source."""

    def __init__(self, key: str, source: Optional[str] = None, group: Optional[str] = None) -> None:
        super().__init__(key)
        self.key = key
        self.source = source
        self.group = group

    @property
    def setting_name(self) -> str:
        return f"{self.group}.{self.key}" if self.group else self.key

    def __str__(self) -> str:
        if self.source:
            return f"Setting '{self.setting_name}' not found in {self.source}"
        return f"Setting '{self.setting_name}' not found"


class FormatError(SettingsError, ValueError):
    """Raised when a raw value cannot be parsed into the accessor's declared type."""

    def __init__(
        self,
        key: str,
        raw_value: str,
        expected: str,
        detail: str = "",
        group: Optional[str] = None,
    ) -> None:
        self.key = key
        self.raw_value = raw_value
        self.expected = expected
        self.detail = detail
        self.group = group
        name = f"{group}.{key}" if group else key
        message = f"Setting '{name}' value {raw_value!r} is not a valid {expected}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class FileLoadError(SettingsError, OSError):
    """Raised when a settings file is missing, unreadable or malformed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot load settings file {self.path}: {reason}")

    def __str__(self) -> str:
        return f"Cannot load settings file {self.path}: {self.reason}"


class KeyCollisionError(FileLoadError):
    """Raised when a linked common file redefines a key with a different value."""

    def __init__(self, path: Path | str, key: str) -> None:
        self.key = key
        super().__init__(path, f"key '{key}' conflicts with a different value in the primary file")


class SettingsVerificationError(SettingsError, AssertionError):
    """Raised by the verification harness with every failing accessor listed."""
