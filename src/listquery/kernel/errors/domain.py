"""Domain errors — caller input that breaks a list-view rule."""

from __future__ import annotations

from typing import Any

from listquery.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a list-view rule is violated."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Input does not meet validation rules (e.g. page < 1).

    ``errors`` is a list of field-level validation failures.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


__all__ = ["DomainError", "ValidationError"]
