"""Query – list state machine as a pure reducer over named events.

Events are applied one at a time in arrival order. An event whose key is
not the snapshot's current key is stale and leaves the snapshot untouched.
"""
from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any, Union

from listquery.kernel.errors import AmbiguousEmptyStateError
from listquery.pagination import QueryResult
from listquery.query.keys import RequestKey


class ListState(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    TRUE_EMPTY = "true_empty"
    FILTERED_EMPTY = "filtered_empty"
    POPULATED = "populated"

    @property
    def is_terminal(self) -> bool:
        return self is not ListState.LOADING


@dataclasses.dataclass(frozen=True)
class QuerySnapshot:
    """Visible state of one list view for the current request key."""

    key: RequestKey | None = None
    status: ListState = ListState.LOADING
    main: QueryResult[Any] | None = None
    probe: QueryResult[Any] | None = None
    probe_pending: bool = False
    error: BaseException | None = None

    @property
    def items(self) -> list[Any]:
        return list(self.main.items) if self.main is not None else []

    @property
    def total(self) -> int:
        return self.main.total if self.main is not None else 0


@dataclasses.dataclass(frozen=True)
class CriteriaChanged:
    """A new request key became current (criteria, page or refetch)."""
    key: RequestKey | None
    reason: str = "criteria"


@dataclasses.dataclass(frozen=True)
class MainSettled:
    key: RequestKey
    result: QueryResult[Any] | None = None
    error: BaseException | None = None
    probing: bool = False


@dataclasses.dataclass(frozen=True)
class ProbeSettled:
    key: RequestKey
    result: QueryResult[Any] | None = None
    error: BaseException | None = None


ListEvent = Union[CriteriaChanged, MainSettled, ProbeSettled]


def classify(
    main: QueryResult[Any],
    probe_issued: bool,
    probe: QueryResult[Any] | None = None,
    probe_failed: bool = False,
) -> ListState:
    """Resolve the terminal state of a cycle whose main fetch succeeded."""
    if not main.is_empty:
        return ListState.POPULATED
    if not probe_issued:
        return ListState.FILTERED_EMPTY
    if probe_failed or probe is None:
        return ListState.ERROR
    return ListState.TRUE_EMPTY if probe.is_empty else ListState.FILTERED_EMPTY


def reduce(snapshot: QuerySnapshot, event: ListEvent) -> QuerySnapshot:
    """Apply *event*; returns *snapshot* itself when the event is ignored."""
    match event:
        case CriteriaChanged(key=key):
            return QuerySnapshot(key=key)
        case MainSettled():
            if event.key != snapshot.key or snapshot.status.is_terminal or snapshot.main is not None:
                return snapshot
            if event.error is not None or event.result is None:
                return dataclasses.replace(snapshot, status=ListState.ERROR, error=event.error)
            if event.probing:
                return dataclasses.replace(snapshot, main=event.result, probe_pending=True)
            return dataclasses.replace(
                snapshot,
                main=event.result,
                status=classify(event.result, probe_issued=False),
            )
        case ProbeSettled():
            if event.key != snapshot.key or not snapshot.probe_pending or snapshot.main is None:
                return snapshot
            failed = event.error is not None or event.result is None
            status = classify(snapshot.main, True, event.result, probe_failed=failed)
            error: BaseException | None = None
            if status is ListState.ERROR:
                error = AmbiguousEmptyStateError(cause=event.error, request_key=event.key)
            return dataclasses.replace(
                snapshot,
                probe=event.result,
                probe_pending=False,
                status=status,
                error=error,
            )
    return snapshot


__all__ = [
    "CriteriaChanged",
    "ListEvent",
    "ListState",
    "MainSettled",
    "ProbeSettled",
    "QuerySnapshot",
    "classify",
    "reduce",
]
