"""Query – EmptyStateResolver: main fetch plus the conditional existence probe.

A zero-row page under active filters is ambiguous: either the resource holds
no records at all, or the filters match none of them. When ``should_probe``
accepts the main result, a filter-free ``limit=1`` request settles which.
"""
from __future__ import annotations

from typing import Any, Callable

from listquery.kernel.errors import FetchError, InfrastructureError
from listquery.observability.logging import get_logger
from listquery.pagination import FetchPage, PageParams, QueryResult
from listquery.query.keys import RequestKey
from listquery.query.state import (
    CriteriaChanged,
    ListEvent,
    MainSettled,
    ProbeSettled,
    QuerySnapshot,
    reduce,
)

PROBE_PARAMS = PageParams(limit=1, offset=0, filters=(), sort=())

ShouldProbe = Callable[[QueryResult[Any]], bool]
ApplyEvent = Callable[[ListEvent], bool]

_log = get_logger(__name__)


def default_should_probe(result: QueryResult[Any]) -> bool:
    return result.is_empty


def _as_fetch_error(exc: Exception, query: str, key: RequestKey) -> InfrastructureError:
    if isinstance(exc, InfrastructureError):
        return exc.for_request(key)
    return FetchError(f"{query} fetch failed: {exc!r}", query=query, cause=exc, request_key=key)


class EmptyStateResolver:
    """Runs one query cycle and reports it as events.

    Parameters
    ----------
    fetch_page:
        Main fetch; called with the current :class:`PageParams`.
    probe:
        Existence check with the same signature; called with
        :data:`PROBE_PARAMS`. Defaults to *fetch_page*.
    should_probe:
        Predicate over the main result; defaults to "no items".
    """

    def __init__(
        self,
        fetch_page: FetchPage,
        *,
        probe: FetchPage | None = None,
        should_probe: ShouldProbe | None = None,
    ) -> None:
        self._fetch_page = fetch_page
        self._probe = probe or fetch_page
        self._should_probe = should_probe or default_should_probe

    async def run(self, key: RequestKey, params: PageParams, apply: ApplyEvent) -> None:
        """Fetch main, then probe if needed, handing each outcome to *apply*.

        *apply* returns ``False`` when the event was stale; the probe is then
        skipped since nobody is waiting for it.
        """
        log = _log.bind(request_key=key)
        try:
            main = QueryResult.coerce(await self._fetch_page(params))
        except Exception as exc:  # noqa: BLE001
            error = _as_fetch_error(exc, "main", key)
            log.warning("fetch_failed", query="main", error=repr(exc))
            apply(MainSettled(key, error=error))
            return

        try:
            probing = bool(self._should_probe(main))
        except Exception as exc:  # noqa: BLE001
            log.warning("should_probe_failed", error=repr(exc))
            error = FetchError(
                f"should_probe raised: {exc!r}", query="main", cause=exc, request_key=key
            )
            apply(MainSettled(key, error=error))
            return

        if not apply(MainSettled(key, result=main, probing=probing)) or not probing:
            return

        log.debug("probe_started")
        try:
            probe = QueryResult.coerce(await self._probe(PROBE_PARAMS))
        except Exception as exc:  # noqa: BLE001
            log.warning("fetch_failed", query="probe", error=repr(exc))
            apply(ProbeSettled(key, error=_as_fetch_error(exc, "probe", key)))
            return
        apply(ProbeSettled(key, result=probe))

    async def resolve(self, params: PageParams, key: RequestKey | None = None) -> QuerySnapshot:
        """Run a standalone cycle and return its terminal snapshot."""
        key = key or RequestKey.build(
            "adhoc",
            offset=params.offset,
            limit=params.limit,
            filters=params.filters,
            sort=params.sort,
        )
        snapshot = reduce(QuerySnapshot(), CriteriaChanged(key))

        def _apply(event: ListEvent) -> bool:
            nonlocal snapshot
            updated = reduce(snapshot, event)
            applied = updated is not snapshot
            snapshot = updated
            return applied

        await self.run(key, params, _apply)
        return snapshot


__all__ = ["PROBE_PARAMS", "EmptyStateResolver", "ShouldProbe", "default_should_probe"]
