"""Config settings – Settings base class and ListQuerySettings."""
from __future__ import annotations

import dataclasses

from listquery.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings."""

    _prefix: dataclasses.ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


@dataclasses.dataclass
class ListQuerySettings(Settings):
    """Defaults shared by every list view; read from ``LIST_QUERY_*``."""

    _prefix: dataclasses.ClassVar[str] = "LIST_QUERY"

    debounce_time_ms: int = 500
    page_size: int = 10
    max_page_size: int = 1000

    def _validate(self) -> None:
        if self.debounce_time_ms < 0:
            raise InvalidSettingValueError("debounce_time_ms", self.debounce_time_ms, "must be >= 0")
        if self.max_page_size < 1:
            raise InvalidSettingValueError("max_page_size", self.max_page_size, "must be >= 1")
        if not 1 <= self.page_size <= self.max_page_size:
            raise InvalidSettingValueError(
                "page_size", self.page_size, f"must be between 1 and {self.max_page_size}"
            )


__all__ = ["ListQuerySettings", "Settings"]
