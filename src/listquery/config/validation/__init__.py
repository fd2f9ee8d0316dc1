"""Config validation errors."""
from listquery.config.validation.errors import (
    InvalidSettingValueError,
    MissingRequiredSettingError,
)
from listquery.kernel.errors import ConfigurationError

__all__ = ["ConfigurationError", "InvalidSettingValueError", "MissingRequiredSettingError"]
