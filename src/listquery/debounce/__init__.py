"""Debounce – restartable timers and the live/committed criteria controller."""
from listquery.debounce.controller import CommitListener, CriteriaKind, DebouncedCriteria
from listquery.debounce.timer import DebounceTimer

__all__ = ["CommitListener", "CriteriaKind", "DebounceTimer", "DebouncedCriteria"]
