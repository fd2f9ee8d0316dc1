"""Config settings – 12-factor env-based configuration."""
from listquery.config.settings.base import ListQuerySettings, Settings
from listquery.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "ListQuerySettings", "Settings", "SettingsLoader"]
