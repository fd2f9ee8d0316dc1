"""Debounce – live vs. committed filter/sort state."""
from __future__ import annotations

from typing import Callable, Iterable, Literal

from listquery.criteria import (
    FilterCriterion,
    FilterField,
    SortCriterion,
    sanitize_filters,
    sanitize_sorts,
    validate_filter_fields,
)
from listquery.debounce.timer import DebounceTimer
from listquery.observability.logging import get_logger

CriteriaKind = Literal["filters", "sorts"]
CommitListener = Callable[[CriteriaKind], None]

_log = get_logger(__name__)


class DebouncedCriteria:
    """Owns the live and committed slots for filters and sorts.

    Live state follows every ``set_*`` call synchronously. Committed state is
    the sanitised projection of live state, published once the slot has been
    quiet for ``debounce_time`` milliseconds. Each slot has its own timer, so
    a sort edit never delays a pending filter commit.

    Initial criteria are committed immediately, without waiting a window.
    """

    def __init__(
        self,
        fields: Iterable[FilterField] = (),
        *,
        initial_filters: Iterable[FilterCriterion] = (),
        initial_sorts: Iterable[SortCriterion] = (),
        debounce_time: float = 500,
    ) -> None:
        self._fields = validate_filter_fields(fields)
        self._live_filters: tuple[FilterCriterion, ...] = tuple(initial_filters)
        self._live_sorts: tuple[SortCriterion, ...] = tuple(initial_sorts)
        self._committed_filters = tuple(sanitize_filters(self._live_filters, self._fields))
        self._committed_sorts = tuple(sanitize_sorts(self._live_sorts))
        self._filter_timer = DebounceTimer(debounce_time, self._commit_filters)
        self._sort_timer = DebounceTimer(debounce_time, self._commit_sorts)
        self._listeners: list[CommitListener] = []
        self.commit_count = 0

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def fields(self) -> tuple[FilterField, ...]:
        return self._fields

    @property
    def filters(self) -> list[FilterCriterion]:
        return list(self._live_filters)

    @property
    def sorts(self) -> list[SortCriterion]:
        return list(self._live_sorts)

    @property
    def committed_filters(self) -> list[FilterCriterion]:
        return list(self._committed_filters)

    @property
    def committed_sorts(self) -> list[SortCriterion]:
        return list(self._committed_sorts)

    @property
    def debounce_time(self) -> float:
        return self._filter_timer.delay_ms

    @property
    def pending(self) -> bool:
        return self._filter_timer.pending or self._sort_timer.pending

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def set_filters(self, filters: Iterable[FilterCriterion]) -> None:
        """Replace the full live filter set and restart the filter window."""
        self._live_filters = tuple(filters)
        self._filter_timer.schedule()

    def set_sorts(self, sorts: Iterable[SortCriterion]) -> None:
        """Replace the full live sort set and restart the sort window."""
        self._live_sorts = tuple(sorts)
        self._sort_timer.schedule()

    def set_fields(self, fields: Iterable[FilterField]) -> None:
        """Swap the field definitions and re-commit filters right away."""
        self._fields = validate_filter_fields(fields)
        self._filter_timer.cancel()
        self._commit_filters()

    def flush(self) -> None:
        """Commit any pending edits now."""
        self._filter_timer.flush()
        self._sort_timer.flush()

    def subscribe(self, listener: CommitListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def dispose(self) -> None:
        self._filter_timer.dispose()
        self._sort_timer.dispose()
        self._listeners.clear()

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    def _commit_filters(self) -> None:
        self._committed_filters = tuple(sanitize_filters(self._live_filters, self._fields))
        _log.debug(
            "filters_committed",
            live=len(self._live_filters),
            committed=len(self._committed_filters),
        )
        self._publish("filters")

    def _commit_sorts(self) -> None:
        self._committed_sorts = tuple(sanitize_sorts(self._live_sorts))
        _log.debug(
            "sorts_committed",
            live=len(self._live_sorts),
            committed=len(self._committed_sorts),
        )
        self._publish("sorts")

    def _publish(self, kind: CriteriaKind) -> None:
        self.commit_count += 1
        for listener in list(self._listeners):
            listener(kind)


__all__ = ["CommitListener", "CriteriaKind", "DebouncedCriteria"]
