"""Testing fakes – in-memory doubles for the fetch contract."""
from listquery.testing.fakes.page_source import InMemoryPageSource

__all__ = ["InMemoryPageSource"]
