"""Query – composite request keys used to discard stale responses."""
from __future__ import annotations

import dataclasses
import hashlib
from typing import Iterable

from listquery.criteria import FilterCriterion, SortCriterion, serialize_criteria


@dataclasses.dataclass(frozen=True, repr=False)
class RequestKey:
    """Resource identity plus the serialised query parameters.

    The repr shows the digest instead of the criteria, which may hold
    user-entered values; keys are safe to pass to any log call.

    ``revision`` is bumped by an explicit refetch so that a response to an
    earlier, otherwise identical request is still treated as stale.
    """

    resource: str
    offset: int
    limit: int
    filters: str = "[]"
    sort: str = "[]"
    revision: int = 0

    @classmethod
    def build(
        cls,
        resource: str,
        *,
        offset: int,
        limit: int,
        filters: Iterable[FilterCriterion] = (),
        sort: Iterable[SortCriterion] = (),
        revision: int = 0,
    ) -> "RequestKey":
        return cls(
            resource=resource,
            offset=offset,
            limit=limit,
            filters=serialize_criteria(filters),
            sort=serialize_criteria(sort),
            revision=revision,
        )

    @property
    def digest(self) -> str:
        raw = f"{self.resource}|{self.offset}|{self.limit}|{self.filters}|{self.sort}|{self.revision}"
        return hashlib.sha1(raw.encode(), usedforsecurity=False).hexdigest()[:12]

    def __str__(self) -> str:
        return f"{self.resource}:{self.digest}"

    def __repr__(self) -> str:
        return (
            f"RequestKey(resource={self.resource!r}, offset={self.offset}, "
            f"limit={self.limit}, revision={self.revision}, digest={self.digest!r})"
        )


__all__ = ["RequestKey"]
