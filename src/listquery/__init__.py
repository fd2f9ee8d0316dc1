"""
listquery – generic list-query engine for admin list views.

Import path convention::

    from listquery.query import ListQuery, ListState
    from listquery.criteria import FilterField, FilterCriterion, DataType
    from listquery.adapters.http import HttpxPageFetcher
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
