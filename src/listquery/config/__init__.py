"""Config – list-query defaults and their loaders."""
from listquery.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    ListQuerySettings,
    Settings,
    SettingsLoader,
)
from listquery.config.validation import (
    ConfigurationError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigurationError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "ListQuerySettings",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
