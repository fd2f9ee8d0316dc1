"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog


class RequestKeyProcessor:
    """structlog processor that flattens a bound ``request_key`` to its digest.

    Keeps serialised criteria (which may carry user-entered values) out of
    log lines while still letting lines of one cycle be correlated.

    Usage::

        structlog.configure(processors=[RequestKeyProcessor(), ...])
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        key = event_dict.pop("request_key", None)
        if key is not None:
            event_dict.setdefault("key", getattr(key, "digest", str(key)))
            resource = getattr(key, "resource", None)
            if resource is not None:
                event_dict.setdefault("resource", resource)
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["RequestKeyProcessor", "get_logger"]
