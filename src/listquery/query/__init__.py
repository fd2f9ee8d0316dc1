"""Query – empty-state resolution and the ListQuery orchestrator."""
from listquery.query.keys import RequestKey
from listquery.query.orchestrator import ListQuery, SnapshotListener
from listquery.query.resolver import (
    PROBE_PARAMS,
    EmptyStateResolver,
    ShouldProbe,
    default_should_probe,
)
from listquery.query.state import (
    CriteriaChanged,
    ListEvent,
    ListState,
    MainSettled,
    ProbeSettled,
    QuerySnapshot,
    classify,
    reduce,
)

__all__ = [
    "PROBE_PARAMS",
    "CriteriaChanged",
    "EmptyStateResolver",
    "ListEvent",
    "ListQuery",
    "ListState",
    "MainSettled",
    "ProbeSettled",
    "QuerySnapshot",
    "RequestKey",
    "ShouldProbe",
    "SnapshotListener",
    "classify",
    "default_should_probe",
    "reduce",
]
