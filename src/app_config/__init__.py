"""Typed, name-keyed access to application settings files."""

from app_config.common import CommonAppSettings
from app_config.errors import (
    FileLoadError,
    FormatError,
    KeyCollisionError,
    KeyNotFound,
    SettingsError,
    SettingsVerificationError,
)
from app_config.groups import Accessor, SettingsGroup, registered_groups, setting
from app_config.verification import AccessorFailure, VerificationReport, verify_groups

__all__ = [
    "Accessor",
    "AccessorFailure",
    "CommonAppSettings",
    "FileLoadError",
    "FormatError",
    "KeyCollisionError",
    "KeyNotFound",
    "SettingsError",
    "SettingsGroup",
    "SettingsVerificationError",
    "VerificationReport",
    "registered_groups",
    "setting",
    "verify_groups",
]
