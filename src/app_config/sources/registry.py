"""
Process-wide resolution of the effective configuration source.

Resolution order: an installed override is used exclusively; otherwise the
production source is loaded once from the configured settings file and reused
for the lifetime of the process.
"""

from __future__ import annotations

import logging
import os
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from app_config.errors import SettingsError
from app_config.models import SettingsFileRequest
from app_config.sources.file_source import FileConfigurationSource
from app_config.sources.interfaces import ConfigurationSource

logger = logging.getLogger(__name__)

_production_request = SettingsFileRequest()
_production: Optional[ConfigurationSource] = None
_production_lock = threading.Lock()

# Test-only slot. Held for the whole body of `override()`.
_override: Optional[ConfigurationSource] = None
_override_lock = threading.RLock()


def configure_production(request: SettingsFileRequest) -> None:
    """Change where the production source is read from. Only valid before first use."""
    global _production_request
    with _production_lock:
        if _production is not None:
            raise SettingsError("Production settings were already loaded; configure them before first use.")
        _production_request = request


def _load_production(request: SettingsFileRequest) -> ConfigurationSource:
    path = request.path
    if request.path_env_var:
        path = os.environ.get(request.path_env_var) or path
    return FileConfigurationSource.from_file(path, request.common_paths)


def production_source() -> ConfigurationSource:
    """Return the production source, loading it on first use."""
    global _production
    source = _production
    if source is not None:
        return source
    with _production_lock:
        if _production is None:
            # A failed load is not cached; the next call retries and fails the same way.
            _production = _load_production(_production_request)
            logger.info("settings.production_loaded source=%s", _production.name)
        return _production


def reset_production() -> None:
    """Forget the cached production source. Intended for tests only."""
    global _production
    with _production_lock:
        _production = None


def install_override(source: ConfigurationSource) -> None:
    """Make `source` the effective source for every settings group until cleared."""
    global _override
    with _override_lock:
        if _override is not None and _override is not source:
            logger.warning(
                "settings.override_replaced previous=%s current=%s",
                _override.name,
                source.name,
            )
        _override = source
        logger.debug("settings.override_installed source=%s", source.name)


def clear_override() -> None:
    global _override
    with _override_lock:
        if _override is not None:
            logger.debug("settings.override_cleared source=%s", _override.name)
        _override = None


def get_override() -> Optional[ConfigurationSource]:
    return _override


def effective_source() -> ConfigurationSource:
    source = _override
    if source is not None:
        return source
    return production_source()


@contextmanager
def override(source: ConfigurationSource) -> Iterator[ConfigurationSource]:
    """
    Install `source` for the duration of the block.

    The block holds the override lock, so concurrent users of this context
    manager run one after another. The previously installed override (if any)
    is restored on exit.
    """
    global _override
    with _override_lock:
        previous = _override
        install_override(source)
        try:
            yield source
        finally:
            _override = previous
            logger.debug("settings.override_restored source=%s", previous.name if previous else None)
