"""Query – ListQuery, the one object a list view talks to.

Side-effect order on a criteria edit::

    set_filters()            live state updated synchronously
      └─ quiet window        DebounceTimer fires
          └─ commit          sanitised criteria published
              └─ reset()     pagination back to page 1
                  └─ main    fetch with offset 0
                      └─ probe (only if should_probe(main))
                          └─ state resolved
"""
from __future__ import annotations

import asyncio
import dataclasses
from typing import Any, Callable, Generic, Iterable, TypeVar

from listquery.config import ListQuerySettings
from listquery.criteria import (
    FilterCriterion,
    FilterField,
    SortCriterion,
    SortOption,
    serialize_criteria,
    validate_filter_fields,
)
from listquery.debounce import CriteriaKind, DebouncedCriteria
from listquery.observability.logging import get_logger
from listquery.pagination import FetchPage, PageParams, PaginationController, QueryResult
from listquery.query.keys import RequestKey
from listquery.query.resolver import EmptyStateResolver, ShouldProbe
from listquery.query.state import (
    CriteriaChanged,
    ListEvent,
    ListState,
    MainSettled,
    ProbeSettled,
    QuerySnapshot,
    reduce,
)

T = TypeVar("T")
SnapshotListener = Callable[[QuerySnapshot], None]


class ListQuery(Generic[T]):
    """Debounced, paginated, empty-state-aware list query for one view.

    The instance exclusively owns its view's transient state; nothing is
    shared between instances. All methods must be called from the event loop
    that runs the fetches.

    Usage::

        async with ListQuery(api.search_transactions, filter_fields=FIELDS) as q:
            q.set_filters([FilterCriterion("status", FilterOperator.EQUALS, "paid")])
            await q.wait_settled()
            render(q.items, q.state)
    """

    def __init__(
        self,
        fetch_page: FetchPage,
        *,
        filter_fields: Iterable[FilterField] = (),
        sort_options: Iterable[SortOption] = (),
        initial_filters: Iterable[FilterCriterion] = (),
        initial_sorts: Iterable[SortCriterion] = (),
        debounce_time: float | None = None,
        limit: int | None = None,
        should_probe: ShouldProbe | None = None,
        probe: FetchPage | None = None,
        resource: str = "list",
        enabled: bool = True,
        settings: ListQuerySettings | None = None,
    ) -> None:
        settings = settings or ListQuerySettings()
        self._resource = resource
        self._sort_options = tuple(sort_options)
        self._criteria = DebouncedCriteria(
            validate_filter_fields(filter_fields),
            initial_filters=initial_filters,
            initial_sorts=initial_sorts,
            debounce_time=settings.debounce_time_ms if debounce_time is None else debounce_time,
        )
        self._pagination = PaginationController(
            limit=settings.page_size if limit is None else limit,
            max_limit=settings.max_page_size,
        )
        self._resolver = EmptyStateResolver(fetch_page, probe=probe, should_probe=should_probe)
        self._snapshot = QuerySnapshot()
        self._signature = self._criteria_signature()
        self._revision = 0
        self._enabled = enabled
        self._mounted = False
        self._disposed = False
        self._listeners: list[SnapshotListener] = []
        self._tasks: set[asyncio.Task[None]] = set()
        self._idle = asyncio.Event()
        self._idle.set()
        self._unsubscribe_commits = self._criteria.subscribe(self._on_commit)
        self._log = get_logger(__name__, resource=resource)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> None:
        """Issue the first fetch with the initial (already committed) criteria."""
        self._ensure_alive()
        if self._mounted:
            return
        self._mounted = True
        self._refresh("mount")

    def enable(self) -> None:
        """Allow fetching for a query created with ``enabled=False``."""
        self._ensure_alive()
        if self._enabled:
            return
        self._enabled = True
        self._refresh("enabled")

    def dispose(self) -> None:
        """Cancel pending timers and in-flight fetches.

        Any response that still lands is stale. The last resolved results
        stay readable.
        """
        if self._disposed:
            return
        self._disposed = True
        self._unsubscribe_commits()
        self._criteria.dispose()
        self._snapshot = dataclasses.replace(self._snapshot, key=None, probe_pending=False)
        self._listeners.clear()
        self._idle.set()
        self._log.info("list_query_disposed", in_flight=len(self._tasks))
        for task in list(self._tasks):
            task.cancel()

    async def __aenter__(self) -> "ListQuery[T]":
        self.mount()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Dispose and wait for cancelled fetches to unwind."""
        self.dispose()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    @property
    def disposed(self) -> bool:
        return self._disposed

    # ------------------------------------------------------------------
    # Criteria
    # ------------------------------------------------------------------

    @property
    def filters(self) -> list[FilterCriterion]:
        return self._criteria.filters

    @property
    def sorts(self) -> list[SortCriterion]:
        return self._criteria.sorts

    @property
    def sanitized_filters(self) -> list[FilterCriterion]:
        return self._criteria.committed_filters

    @property
    def sanitized_sorts(self) -> list[SortCriterion]:
        return self._criteria.committed_sorts

    @property
    def filter_fields(self) -> tuple[FilterField, ...]:
        return self._criteria.fields

    @property
    def sort_options(self) -> tuple[SortOption, ...]:
        return self._sort_options

    def set_filters(self, filters: Iterable[FilterCriterion]) -> None:
        self._ensure_alive()
        self._idle.clear()
        self._criteria.set_filters(filters)

    def set_sorts(self, sorts: Iterable[SortCriterion]) -> None:
        self._ensure_alive()
        self._idle.clear()
        self._criteria.set_sorts(sorts)

    def set_filter_fields(self, fields: Iterable[FilterField]) -> None:
        """Replace the field definitions; live filters are re-sanitised at once."""
        self._ensure_alive()
        self._criteria.set_fields(fields)

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    @property
    def page(self) -> int:
        return self._pagination.page

    @property
    def limit(self) -> int:
        return self._pagination.limit

    @property
    def offset(self) -> int:
        return self._pagination.offset

    @property
    def total_pages(self) -> int:
        return self._pagination.total_pages(self.total)

    @property
    def has_next(self) -> bool:
        return self._pagination.has_next(self.total)

    @property
    def has_previous(self) -> bool:
        return self._pagination.has_previous()

    def set_page(self, page: int) -> None:
        self._ensure_alive()
        if self._pagination.set_page(page):
            self._refresh("page")

    def next_page(self) -> bool:
        if not self.has_next:
            return False
        self.set_page(self.page + 1)
        return True

    def previous_page(self) -> bool:
        if not self.has_previous:
            return False
        self.set_page(self.page - 1)
        return True

    def set_limit(self, limit: int) -> None:
        self._ensure_alive()
        if self._pagination.set_limit(limit):
            self._refresh("limit")

    def reset(self) -> None:
        """Go back to page 1 (re-fetching only if the page moved)."""
        self._ensure_alive()
        if self._pagination.page != 1:
            self._pagination.reset()
            self._refresh("reset")

    def refetch(self) -> None:
        """Re-issue the current query, ignoring responses already in flight."""
        self._ensure_alive()
        self._revision += 1
        self._refresh("refetch")

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> QuerySnapshot:
        return self._snapshot

    @property
    def state(self) -> ListState:
        return self._snapshot.status

    @property
    def is_loading(self) -> bool:
        return self._snapshot.status is ListState.LOADING

    @property
    def items(self) -> list[T]:
        return self._snapshot.items

    @property
    def total(self) -> int:
        return self._snapshot.total

    @property
    def error(self) -> BaseException | None:
        return self._snapshot.error

    @property
    def main_result(self) -> QueryResult[T] | None:
        return self._snapshot.main

    @property
    def probe_result(self) -> QueryResult[T] | None:
        return self._snapshot.probe

    @property
    def show_empty_page(self) -> bool:
        return self._snapshot.status is ListState.TRUE_EMPTY

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call *listener* with every applied snapshot; returns an unsubscribe."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def wait_settled(self) -> QuerySnapshot:
        """Wait until no edit is pending and the current cycle is terminal."""
        await self._idle.wait()
        return self._snapshot

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_alive(self) -> None:
        if self._disposed:
            raise RuntimeError("ListQuery has been disposed")

    def _criteria_signature(self) -> str:
        return (
            serialize_criteria(self._criteria.committed_filters)
            + serialize_criteria(self._criteria.committed_sorts)
        )

    def _on_commit(self, kind: CriteriaKind) -> None:
        signature = self._criteria_signature()
        if signature == self._signature:
            self._log.debug("criteria_unchanged", kind=kind)
            self._update_idle()
            return
        self._signature = signature
        self._log.info(
            "criteria_committed",
            kind=kind,
            filters=len(self._criteria.committed_filters),
            sorts=len(self._criteria.committed_sorts),
        )
        self._pagination.reset()
        self._log.debug("page_reset", page=self._pagination.page)
        self._refresh("criteria")

    def _refresh(self, reason: str) -> None:
        if not (self._mounted and self._enabled) or self._disposed:
            self._update_idle()
            return
        filters = tuple(self._criteria.committed_filters)
        sort = tuple(self._criteria.committed_sorts)
        key = RequestKey.build(
            self._resource,
            offset=self._pagination.offset,
            limit=self._pagination.limit,
            filters=filters,
            sort=sort,
            revision=self._revision,
        )
        params = PageParams(
            limit=self._pagination.limit,
            offset=self._pagination.offset,
            filters=filters,
            sort=sort,
        )
        self._apply(CriteriaChanged(key, reason=reason))
        self._log.info(
            "fetch_started",
            request_key=key,
            reason=reason,
            page=self._pagination.page,
            offset=params.offset,
        )
        task = asyncio.get_running_loop().create_task(self._resolver.run(key, params, self._apply))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _apply(self, event: ListEvent) -> bool:
        updated = reduce(self._snapshot, event)
        if updated is self._snapshot:
            if isinstance(event, (MainSettled, ProbeSettled)):
                self._log.debug(
                    "stale_response_discarded",
                    request_key=event.key,
                    kind=type(event).__name__,
                )
            return False
        self._snapshot = updated
        if updated.status.is_terminal:
            self._log.info(
                "state_resolved",
                request_key=updated.key,
                state=updated.status.value,
                items=len(updated.items),
                total=updated.total,
            )
        for listener in list(self._listeners):
            listener(updated)
        self._update_idle()
        return True

    def _update_idle(self) -> None:
        active = self._mounted and self._enabled and not self._disposed
        busy = self._criteria.pending or (active and not self._snapshot.status.is_terminal)
        if busy:
            self._idle.clear()
        else:
            self._idle.set()

    def __repr__(self) -> str:
        return (
            f"ListQuery(resource={self._resource!r}, state={self.state.value}, "
            f"page={self.page}, limit={self.limit})"
        )


__all__ = ["ListQuery", "SnapshotListener"]
