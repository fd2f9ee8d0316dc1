"""Pagination – page cursor and fetch contract types."""
from listquery.pagination.controller import PaginationController
from listquery.pagination.result import FetchPage, PageInfo, PageParams, QueryResult

__all__ = ["FetchPage", "PageInfo", "PageParams", "PaginationController", "QueryResult"]
