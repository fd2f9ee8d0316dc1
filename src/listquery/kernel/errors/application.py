"""Application-layer errors — programmer and configuration mistakes."""

from __future__ import annotations

from listquery.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class ConfigurationError(ApplicationError):
    """Static configuration is invalid.

    Raised at definition time (filter fields, data types, settings), never
    while a query is running.
    """

    default_code = "configuration_error"


__all__ = ["ApplicationError", "ConfigurationError"]
