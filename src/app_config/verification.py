"""
Verification harness for settings groups.

Every accessor of every group is resolved, in declaration order, and every
failure is collected. A single missing or malformed key never hides the
others.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Tuple, Type

from app_config.errors import FormatError, KeyNotFound, SettingsError, SettingsVerificationError
from app_config.groups import SettingsGroup, registered_groups
from app_config.sources.interfaces import ConfigurationSource
from app_config.sources.registry import effective_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AccessorFailure:
    group: str
    accessor: str
    error: SettingsError

    def describe(self) -> str:
        return f"{self.group}.{self.accessor}: {type(self.error).__name__}: {self.error}"


@dataclass(frozen=True, slots=True)
class VerificationReport:
    checked: int
    failures: Tuple[AccessorFailure, ...] = field(default_factory=tuple)
    source_name: str = ""

    @property
    def ok(self) -> bool:
        return not self.failures

    def format(self) -> str:
        header = f"{self.checked} settings checked against {self.source_name}, {len(self.failures)} failed"
        if self.ok:
            return header
        return "\n".join([header, *(f"  - {failure.describe()}" for failure in self.failures)])

    def raise_for_failures(self) -> None:
        if not self.ok:
            raise SettingsVerificationError(self.format())


def verify_groups(
    groups: Optional[Iterable[Type[SettingsGroup]]] = None,
    source: Optional[ConfigurationSource] = None,
) -> VerificationReport:
    """
    Resolve every accessor of `groups` (all registered groups by default).

    `source` binds the run to an explicit source; otherwise the effective
    process-wide source is used. Only KeyNotFound and FormatError count as
    failures; any other exception propagates.
    """
    selected: Sequence[Type[SettingsGroup]] = tuple(groups) if groups is not None else registered_groups()
    resolved = source if source is not None else effective_source()

    checked = 0
    failures: list[AccessorFailure] = []
    for group in selected:
        for accessor in group.accessors():
            checked += 1
            try:
                accessor.resolve(resolved)
            except (KeyNotFound, FormatError) as e:
                failures.append(AccessorFailure(group=group.__name__, accessor=accessor.name, error=e))

    report = VerificationReport(checked=checked, failures=tuple(failures), source_name=resolved.name)
    if report.ok:
        logger.info("settings.verified groups=%d checked=%d source=%s", len(selected), checked, resolved.name)
    else:
        for failure in report.failures:
            logger.error(
                "settings.verification_failed setting=%s.%s error=%s",
                failure.group,
                failure.accessor,
                type(failure.error).__name__,
            )
    return report
