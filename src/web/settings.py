from __future__ import annotations

from app_config.groups import SettingsGroup, setting


class AppSettings(SettingsGroup):
    """Settings owned by the web project."""

    WelcomeMessage: str = setting()
