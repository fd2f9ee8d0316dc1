"""Root error class for the listquery error hierarchy.

An error raised inside a query cycle is tagged with that cycle's request
key. ``to_dict()`` exposes only the key digest and resource, so an error can
be matched to its ``fetch_started`` log line without leaking filter values.
"""

from __future__ import annotations

from typing import Any


class BaseError(Exception):
    """Root of the error hierarchy.

    Args:
        message: Human-readable description.
        code: Machine-readable slug (defaults to ``default_code``).
        detail: Extra context; must be serialisable and free of filter values.
        cause: Exception that triggered this error.
        request_key: Key of the query cycle the error belongs to, if any.
    """

    default_code: str = "list_query_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
        request_key: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        self.cause = cause
        self.request_key = request_key
        if cause is not None:
            self.__cause__ = cause

    def for_request(self, key: Any) -> "BaseError":
        """Tag the error with *key* unless it already belongs to a cycle."""
        if self.request_key is None:
            self.request_key = key
        return self

    @property
    def key_digest(self) -> str | None:
        if self.request_key is None:
            return None
        return getattr(self.request_key, "digest", str(self.request_key))

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        key = f", key={self.key_digest!r}" if self.request_key is not None else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{key})"

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form for logs and API error bodies."""
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.detail:
            payload["detail"] = self.detail
        if self.request_key is not None:
            payload["key"] = self.key_digest
            resource = getattr(self.request_key, "resource", None)
            if resource is not None:
                payload["resource"] = resource
        if self.cause is not None:
            payload["cause"] = type(self.cause).__name__
        return payload


__all__ = ["BaseError"]
