"""Phone upgrade advisor package."""

from .models import Device, PreferenceProfile, Priority, RecommendationResult, ScoredCandidate, UsageType
from .services import (
    InMemoryCatalog,
    NoAffordableDeviceError,
    RecommendationService,
    quote_trade_in,
    recommend,
)

__all__ = [
    "Device",
    "PreferenceProfile",
    "Priority",
    "UsageType",
    "ScoredCandidate",
    "RecommendationResult",
    "InMemoryCatalog",
    "NoAffordableDeviceError",
    "RecommendationService",
    "recommend",
    "quote_trade_in",
]
