"""Unit tests for the ListQuery orchestrator."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from listquery.config import ListQuerySettings
from listquery.criteria import (
    DataType,
    FilterCriterion,
    FilterField,
    FilterFieldType,
    FilterOperator,
    SortCriterion,
    SortDirection,
    SortOption,
)
from listquery.kernel.errors import AmbiguousEmptyStateError, ConfigurationError, FetchError
from listquery.pagination import PageInfo, PageParams, QueryResult
from listquery.query import PROBE_PARAMS, ListQuery, ListState, QuerySnapshot
from listquery.testing.fakes import InMemoryPageSource

FIELDS = (
    FilterField(
        "created_by",
        "Created By",
        DataType.ARRAY,
        FilterFieldType.MULTI_SELECT,
        operators=(FilterOperator.IS_ANY_OF, FilterOperator.IS_NOT_ANY_OF),
    ),
    FilterField("status", "Status", DataType.STRING, FilterFieldType.SELECT),
)
SORT_OPTIONS = (SortOption("created_at", "Created At", SortDirection.DESC),)


def _items(n: int) -> list[dict[str, Any]]:
    return [
        {"id": f"t{i:02d}", "status": "paid" if i % 2 else "open", "created_by": f"u{i % 3}"}
        for i in range(n)
    ]


def _status(value: str) -> FilterCriterion:
    return FilterCriterion("status", FilterOperator.EQUALS, value)


# ---------------------------------------------------------------------------
# Mount and resolution
# ---------------------------------------------------------------------------


class TestMount:
    def test_mount_fetches_first_page(self) -> None:
        async def _run() -> None:
            source = InMemoryPageSource(_items(25))
            async with ListQuery(source, filter_fields=FIELDS, limit=10) as q:
                assert q.is_loading
                snap = await q.wait_settled()
                assert snap.status is ListState.POPULATED
                assert q.state is ListState.POPULATED
                assert not q.is_loading
                assert len(q.items) == 10
                assert q.total == 25
                assert source.calls == [PageParams(limit=10, offset=0)]

        asyncio.run(_run())

    def test_initial_criteria_sent_without_debounce(self) -> None:
        async def _run() -> None:
            source = InMemoryPageSource(_items(10))
            q = ListQuery(
                source,
                filter_fields=FIELDS,
                initial_filters=[_status("paid"), _status("")],
                initial_sorts=[SORT_OPTIONS[0].to_criterion()],
                debounce_time=10_000,
            )
            q.mount()
            await q.wait_settled()
            [params] = source.calls
            assert [c.value for c in params.filters] == ["paid"]
            assert params.sort[0].direction is SortDirection.DESC
            assert q.total == 5
            q.dispose()

        asyncio.run(_run())

    def test_mount_is_idempotent(self) -> None:
        async def _run() -> None:
            source = InMemoryPageSource(_items(3))
            async with ListQuery(source, filter_fields=FIELDS) as q:
                q.mount()
                await q.wait_settled()
                assert source.call_count == 1

        asyncio.run(_run())

    def test_invalid_field_set_raises_at_construction(self) -> None:
        with pytest.raises(ConfigurationError):
            ListQuery(InMemoryPageSource(), filter_fields=[FIELDS[1], FIELDS[1]])

    def test_settings_supply_defaults(self) -> None:
        settings = ListQuerySettings(debounce_time_ms=20, page_size=5)
        q = ListQuery(InMemoryPageSource(), settings=settings)
        assert q.limit == 5

    def test_explicit_limit_overrides_settings(self) -> None:
        q = ListQuery(InMemoryPageSource(), limit=50, settings=ListQuerySettings(page_size=5))
        assert q.limit == 50


class TestEmptyStateScenarios:
    def _run(self, main: Any, probe: Any) -> ListQuery:
        async def _go() -> ListQuery:
            async with ListQuery(main, probe=probe, filter_fields=FIELDS) as q:
                await q.wait_settled()
                return q

        return asyncio.run(_go())

    def test_true_empty(self) -> None:
        probe = InMemoryPageSource([])
        q = self._run(InMemoryPageSource([]), probe)
        assert q.state is ListState.TRUE_EMPTY
        assert q.show_empty_page
        assert probe.calls == [PROBE_PARAMS]

    def test_filtered_empty(self) -> None:
        q = self._run(InMemoryPageSource([]), InMemoryPageSource([{"id": "x"}]))
        assert q.state is ListState.FILTERED_EMPTY
        assert not q.show_empty_page
        assert q.probe_result is not None

    def test_populated_without_probe(self) -> None:
        probe = InMemoryPageSource([])
        q = self._run(InMemoryPageSource([{"id": "a"}]), probe)
        assert q.state is ListState.POPULATED
        assert probe.call_count == 0

    def test_probe_failure_is_error(self) -> None:
        q = self._run(InMemoryPageSource([]), InMemoryPageSource(fail_with=OSError("down")))
        assert q.state is ListState.ERROR
        assert isinstance(q.error, AmbiguousEmptyStateError)

    def test_main_failure_is_error(self) -> None:
        probe = InMemoryPageSource([])
        q = self._run(InMemoryPageSource(fail_with=OSError("down")), probe)
        assert q.state is ListState.ERROR
        assert isinstance(q.error, FetchError)
        assert probe.call_count == 0

    def test_filters_that_match_nothing(self) -> None:
        async def _run() -> None:
            source = InMemoryPageSource(_items(6))
            async with ListQuery(source, filter_fields=FIELDS, debounce_time=10) as q:
                await q.wait_settled()
                q.set_filters([_status("refunded")])
                await q.wait_settled()
                assert q.state is ListState.FILTERED_EMPTY
                assert source.calls[-1] == PROBE_PARAMS

        asyncio.run(_run())


# ---------------------------------------------------------------------------
# Debounce and pagination coordination
# ---------------------------------------------------------------------------


class TestCriteriaChanges:
    def test_rapid_edits_issue_one_fetch_with_last_value(self) -> None:
        async def _run() -> None:
            source = InMemoryPageSource(_items(10))
            async with ListQuery(source, filter_fields=FIELDS, debounce_time=500) as q:
                await q.wait_settled()
                q.set_filters([_status("o")])
                await asyncio.sleep(0.03)
                q.set_filters([_status("op")])
                await asyncio.sleep(0.03)
                q.set_filters([_status("open")])
                assert q.filters == [_status("open")]
                assert q.sanitized_filters == []
                await q.wait_settled()
                assert source.call_count == 2
                assert [c.value for c in source.calls[-1].filters] == ["open"]
                assert [c.value for c in q.sanitized_filters] == ["open"]

        asyncio.run(_run())

    def test_commit_resets_page_once_before_fetch(self, monkeypatch: pytest.MonkeyPatch) -> None:
        async def _run() -> None:
            log: list[tuple[Any, ...]] = []

            async def fetch(params: PageParams) -> QueryResult:
                log.append(("fetch", params.offset))
                return QueryResult(items=[{"id": "a"}], pagination=PageInfo(total=100))

            q = ListQuery(fetch, filter_fields=FIELDS, debounce_time=10)
            original_reset = q._pagination.reset

            def _spy() -> None:
                log.append(("reset",))
                original_reset()

            monkeypatch.setattr(q._pagination, "reset", _spy)
            async with q:
                await q.wait_settled()
                q.set_page(3)
                await q.wait_settled()
                assert q.offset == 20
                q.set_filters([_status("paid")])
                await q.wait_settled()

            assert log == [("fetch", 0), ("fetch", 20), ("reset",), ("fetch", 0)]
            assert q.page == 1

        asyncio.run(_run())

    def test_sort_change_resets_and_refetches(self) -> None:
        async def _run() -> None:
            source = InMemoryPageSource(_items(30))
            async with ListQuery(
                source, filter_fields=FIELDS, sort_options=SORT_OPTIONS, debounce_time=10, limit=10
            ) as q:
                await q.wait_settled()
                q.set_page(2)
                await q.wait_settled()
                q.set_sorts([SortCriterion("id", "Id", SortDirection.DESC)])
                await q.wait_settled()
                assert q.page == 1
                assert source.calls[-1].sort[0].field == "id"
                assert q.items[0]["id"] == "t29"

        asyncio.run(_run())

    def test_unchanged_committed_criteria_do_not_refetch(self) -> None:
        async def _run() -> None:
            source = InMemoryPageSource(_items(30))
            async with ListQuery(source, filter_fields=FIELDS, debounce_time=10) as q:
                await q.wait_settled()
                q.set_page(2)
                await q.wait_settled()
                q.set_filters([_status("  ")])
                await q.wait_settled()
                assert source.call_count == 2
                assert q.page == 2

        asyncio.run(_run())

    def test_set_filter_fields_drops_orphaned_criteria(self) -> None:
        async def _run() -> None:
            source = InMemoryPageSource(_items(10))
            async with ListQuery(
                source, filter_fields=FIELDS, initial_filters=[_status("paid")]
            ) as q:
                await q.wait_settled()
                assert q.total == 5
                q.set_filter_fields([FIELDS[0]])
                await q.wait_settled()
                assert q.sanitized_filters == []
                assert q.total == 10
                assert q.filters == [_status("paid")]

        asyncio.run(_run())


class TestPagination:
    def test_page_navigation(self) -> None:
        async def _run() -> None:
            source = InMemoryPageSource(_items(25))
            async with ListQuery(source, filter_fields=FIELDS, limit=10) as q:
                await q.wait_settled()
                assert q.total_pages == 3
                assert q.has_next and not q.has_previous
                assert q.next_page() is True
                await q.wait_settled()
                assert q.next_page() is True
                await q.wait_settled()
                assert q.page == 3
                assert len(q.items) == 5
                assert q.next_page() is False
                assert q.previous_page() is True
                await q.wait_settled()
                assert q.offset == 10

        asyncio.run(_run())

    def test_reset_returns_to_first_page(self) -> None:
        async def _run() -> None:
            source = InMemoryPageSource(_items(25))
            async with ListQuery(source, filter_fields=FIELDS, limit=10) as q:
                await q.wait_settled()
                q.reset()
                assert source.call_count == 1
                q.set_page(3)
                await q.wait_settled()
                q.reset()
                await q.wait_settled()
                assert q.page == 1
                assert source.calls[-1].offset == 0

        asyncio.run(_run())

    def test_set_limit_restarts_from_first_page(self) -> None:
        async def _run() -> None:
            source = InMemoryPageSource(_items(25))
            async with ListQuery(source, filter_fields=FIELDS, limit=10) as q:
                await q.wait_settled()
                q.set_page(2)
                await q.wait_settled()
                q.set_limit(20)
                await q.wait_settled()
                assert (q.page, q.limit, q.offset) == (1, 20, 0)
                assert len(q.items) == 20

        asyncio.run(_run())


# ---------------------------------------------------------------------------
# Stale responses and lifecycle
# ---------------------------------------------------------------------------


class TestStaleResponses:
    def test_out_of_order_response_discarded(self) -> None:
        async def _run() -> None:
            source = InMemoryPageSource(
                _items(15),
                delay_fn=lambda p: 0.15 if p.offset == 0 else 0.0,
            )
            async with ListQuery(source, filter_fields=FIELDS, limit=10) as q:
                q.set_page(2)
                await q.wait_settled()
                assert [i["id"] for i in q.items] == [f"t{i}" for i in range(10, 15)]
                await asyncio.sleep(0.25)
                assert q.page == 2
                assert len(q.items) == 5
                assert q.state is ListState.POPULATED

        asyncio.run(_run())

    def test_refetch_ignores_in_flight_response(self) -> None:
        async def _run() -> None:
            calls = 0

            async def fetch(params: PageParams) -> QueryResult:
                nonlocal calls
                calls += 1
                mine = calls
                await asyncio.sleep(0.1 if mine == 1 else 0.0)
                return QueryResult(items=[{"call": mine}], pagination=PageInfo(total=1))

            async with ListQuery(fetch, filter_fields=FIELDS) as q:
                q.refetch()
                await q.wait_settled()
                assert q.items == [{"call": 2}]
                await asyncio.sleep(0.15)
                assert q.items == [{"call": 2}]

        asyncio.run(_run())

    def test_refetch_picks_up_new_data(self) -> None:
        async def _run() -> None:
            source = InMemoryPageSource([])
            async with ListQuery(source, filter_fields=FIELDS) as q:
                await q.wait_settled()
                assert q.state is ListState.TRUE_EMPTY
                source.items.append({"id": "new"})
                q.refetch()
                await q.wait_settled()
                assert q.state is ListState.POPULATED

        asyncio.run(_run())


class TestLifecycle:
    def test_disabled_query_waits_for_enable(self) -> None:
        async def _run() -> None:
            source = InMemoryPageSource(_items(3))
            async with ListQuery(source, filter_fields=FIELDS, enabled=False) as q:
                await q.wait_settled()
                assert source.call_count == 0
                assert q.state is ListState.LOADING
                q.enable()
                await q.wait_settled()
                assert q.state is ListState.POPULATED

        asyncio.run(_run())

    def test_dispose_invalidates_in_flight_and_timers(self) -> None:
        async def _run() -> None:
            source = InMemoryPageSource(_items(3), delay=0.05)
            q = ListQuery(source, filter_fields=FIELDS, debounce_time=10)
            q.mount()
            q.set_filters([_status("paid")])
            q.dispose()
            await asyncio.sleep(0.1)
            assert q.disposed
            assert q.items == []
            assert source.call_count == 0
            with pytest.raises(RuntimeError):
                q.set_filters([])
            q.dispose()
            assert (await q.wait_settled()).key is None

        asyncio.run(_run())

    def test_exit_cancels_in_flight_fetches(self) -> None:
        async def _run() -> None:
            started = asyncio.Event()
            cancelled = asyncio.Event()

            async def fetch(params: PageParams) -> QueryResult:
                started.set()
                try:
                    await asyncio.sleep(10)
                except asyncio.CancelledError:
                    cancelled.set()
                    raise
                return QueryResult(items=[], pagination=PageInfo(total=0))

            async with ListQuery(fetch, filter_fields=FIELDS) as q:
                await started.wait()
            assert cancelled.is_set()
            assert q.state is ListState.LOADING
            assert not q._tasks

        asyncio.run(_run())

    def test_raising_should_probe_ends_in_error(self) -> None:
        def _broken(result: QueryResult) -> bool:
            raise ValueError("predicate bug")

        async def _run() -> None:
            async with ListQuery(InMemoryPageSource([]), filter_fields=FIELDS, should_probe=_broken) as q:
                snap = await asyncio.wait_for(q.wait_settled(), timeout=1.0)
                assert snap.status is ListState.ERROR
                assert isinstance(q.error, FetchError)
                assert isinstance(q.error.cause, ValueError)

        asyncio.run(_run())

    def test_subscribers_see_each_transition(self) -> None:
        async def _run() -> None:
            seen: list[QuerySnapshot] = []
            q = ListQuery(InMemoryPageSource([]), probe=InMemoryPageSource([{"id": "x"}]), filter_fields=FIELDS)
            unsubscribe = q.subscribe(seen.append)
            async with q:
                await q.wait_settled()
            unsubscribe()
            assert [s.status for s in seen] == [
                ListState.LOADING,
                ListState.LOADING,
                ListState.FILTERED_EMPTY,
            ]
            assert seen[1].probe_pending

        asyncio.run(_run())

    def test_repr(self) -> None:
        q = ListQuery(InMemoryPageSource(), resource="wallet_transactions")
        assert "wallet_transactions" in repr(q)
