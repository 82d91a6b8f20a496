from __future__ import annotations

from app_config.groups import SettingsGroup, setting


class CommonAppSettings(SettingsGroup):
    """Settings shared by every project; read from the linked common settings file."""

    Title: str = setting()
    Port: int = setting()
