from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable


@runtime_checkable
class ConfigurationSource(Protocol):
    """
    A flat, read-only mapping of setting keys to raw string values.

    Keys are case-sensitive and must match accessor names exactly.
    """

    @property
    def name(self) -> str:
        """Human-readable origin used in error messages and logs."""

    def get(self, key: str) -> str:
        """Return the raw value for `key` or raise KeyNotFound."""

    def keys(self) -> Iterable[str]:
        """Return every key this source defines."""
