from enum import Enum


class ControllerPhase(str, Enum):
    UNINITIALIZED = "UNINITIALIZED"
    CACHE_HYDRATED = "CACHE_HYDRATED"
    FETCHING = "FETCHING"
    SETTLED = "SETTLED"


class CycleOutcome(str, Enum):
    LIVE = "live"  # current price and history both from upstream
    PARTIAL = "partial"  # one of the two paths fell back
    FALLBACK = "fallback"  # nothing live, static table shown
