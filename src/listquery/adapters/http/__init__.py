"""HTTP adapter – httpx-backed page fetcher."""
from listquery.adapters.http.fetcher import HttpxPageFetcher

__all__ = ["HttpxPageFetcher"]
