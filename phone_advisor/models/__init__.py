"""Data models - Pure data structures with no business logic."""

from .device import Device
from .preference import PreferenceProfile, Priority, ProfileValidationError, UsageType
from .recommendation import RankedPick, Ranking, RecommendationResult, ScoredCandidate
from .trade_in import DeviceCondition, TradeInQuote

__all__ = [
    "Device",
    "PreferenceProfile",
    "Priority",
    "ProfileValidationError",
    "UsageType",
    "RankedPick",
    "Ranking",
    "ScoredCandidate",
    "RecommendationResult",
    "DeviceCondition",
    "TradeInQuote",
]
