"""Configuration sources and the process-wide effective source."""

from app_config.sources.file_source import (
    FileConfigurationSource,
    MappingConfigurationSource,
    read_settings_file,
)
from app_config.sources.interfaces import ConfigurationSource
from app_config.sources.registry import (
    clear_override,
    configure_production,
    effective_source,
    get_override,
    install_override,
    override,
    production_source,
    reset_production,
)

__all__ = [
    "ConfigurationSource",
    "FileConfigurationSource",
    "MappingConfigurationSource",
    "clear_override",
    "configure_production",
    "effective_source",
    "get_override",
    "install_override",
    "override",
    "production_source",
    "read_settings_file",
    "reset_production",
]
