"""HTTP adapter – HttpxPageFetcher for JSON search endpoints."""
from __future__ import annotations

import json
from typing import Any, Callable, Generic, Mapping, TypeVar

import httpx

from listquery.kernel.errors import ExternalServiceError, SerializationError, TimeoutError as AppTimeoutError
from listquery.pagination import PageParams, QueryResult
from listquery.query import PROBE_PARAMS

T = TypeVar("T")


class HttpxPageFetcher(Generic[T]):
    """Fetch-contract implementation over ``httpx.AsyncClient``.

    Sends ``{limit, offset, filters, sort, **extra}`` as the JSON body of a
    ``POST {path}`` and decodes ``{items, pagination: {total}}``. Pass an
    existing *client* to share a connection pool; otherwise one is created
    and closed by :meth:`aclose` / ``async with``.
    """

    def __init__(
        self,
        path: str,
        *,
        base_url: str = "",
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
        method: str = "POST",
        extra: Mapping[str, Any] | None = None,
        item_factory: Callable[[Any], T] | None = None,
        **client_kwargs: Any,
    ) -> None:
        self._path = path
        self._method = method.upper()
        self._extra = dict(extra or {})
        self._item_factory = item_factory
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout, **client_kwargs)

    async def __aenter__(self) -> "HttpxPageFetcher[T]":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __call__(self, params: PageParams) -> QueryResult[T]:
        body = {**params.to_payload(), **self._extra}
        if self._method == "GET":
            response = await self._request(params=self._query_string(body))
        else:
            response = await self._request(json=body)
        try:
            data = response.json()
        except ValueError as exc:
            raise SerializationError(
                f"Non-JSON response from {self._method} {self._path}",
                payload_type="QueryResult",
                cause=exc,
            ) from exc
        if not isinstance(data, Mapping):
            raise SerializationError(
                f"Expected a JSON object from {self._method} {self._path}",
                payload_type="QueryResult",
            )
        return QueryResult.from_dict(data, self._item_factory)

    async def probe(self, params: PageParams = PROBE_PARAMS) -> QueryResult[T]:
        """Filter-free ``limit=1`` request; usable as ``ListQuery(probe=...)``."""
        return await self(params)

    async def exists(self) -> bool:
        return not (await self.probe()).is_empty

    @staticmethod
    def _query_string(body: Mapping[str, Any]) -> dict[str, Any]:
        return {
            k: json.dumps(v) if isinstance(v, (list, dict)) else v
            for k, v in body.items()
        }

    async def _request(self, **kwargs: Any) -> httpx.Response:
        method, url = self._method, self._path
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.TimeoutException as exc:
            raise AppTimeoutError(f"HTTP request timed out: {method} {url}", cause=exc) from exc
        except httpx.HTTPStatusError as exc:
            raise ExternalServiceError(
                service=url,
                message=f"HTTP {exc.response.status_code} from {method} {url}",
                status_code=exc.response.status_code,
                cause=exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise ExternalServiceError(service=url, message=str(exc), cause=exc) from exc


__all__ = ["HttpxPageFetcher"]
