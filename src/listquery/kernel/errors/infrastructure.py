"""Infrastructure errors — failures of the caller-supplied fetch functions."""

from __future__ import annotations

from typing import Any

from listquery.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """I/O failure that is not a list-view rule violation."""

    default_code = "infrastructure_error"


class FetchError(InfrastructureError):
    """A main or probe fetch rejected."""

    default_code = "fetch_error"

    def __init__(
        self,
        message: str,
        *,
        query: str = "main",
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.query = query

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["query"] = self.query
        return payload


class AmbiguousEmptyStateError(FetchError):
    """Main page came back empty and the existence probe failed.

    The view cannot tell "no records" from "no matches", so it is neither.
    """

    default_code = "ambiguous_empty_state"

    def __init__(self, message: str = "Probe failed after an empty page", **kwargs: Any) -> None:
        super().__init__(message, query="probe", **kwargs)


class TimeoutError(InfrastructureError):  # noqa: A001
    """An I/O operation exceeded its deadline."""

    default_code = "infrastructure_timeout"


class SerializationError(InfrastructureError):
    """Failed to decode a page payload."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


class ExternalServiceError(InfrastructureError):
    """The list endpoint returned an unexpected response."""

    default_code = "external_service_error"

    def __init__(
        self,
        service: str,
        message: str | None = None,
        *,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"External service '{service}' error", **kwargs)
        self.service = service
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["service"] = self.service
        if self.status_code is not None:
            payload["status_code"] = self.status_code
        return payload


__all__ = [
    "AmbiguousEmptyStateError",
    "ExternalServiceError",
    "FetchError",
    "InfrastructureError",
    "SerializationError",
    "TimeoutError",
]
