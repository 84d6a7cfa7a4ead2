"""Service layer - Business logic modules.

Each service module has a clear interface and can be developed/tested independently.
"""

from .catalog import CatalogError, CatalogProvider, InMemoryCatalog
from .extractors import (
    BEST_UPGRADE_CATEGORIES,
    best_upgrades,
    compare_attribute,
    extract_battery_capacity_mah,
    extract_main_camera_mp,
    extract_processor_generation,
    sort_devices,
    value_score,
)
from .fallback_ranker import FallbackRanker
from .llm_service import LLMService, LLMServiceError
from .reasoner import (
    LLMReasoner,
    OracleMalformedResponseError,
    OracleUnavailableError,
    Reasoner,
    ReasonerError,
)
from .recommendation_service import NoAffordableDeviceError, RecommendationService, recommend
from .trade_in import TradeInEstimator, estimate_trade_in, quote_trade_in

__all__ = [
    "CatalogError",
    "CatalogProvider",
    "InMemoryCatalog",
    "BEST_UPGRADE_CATEGORIES",
    "best_upgrades",
    "compare_attribute",
    "extract_battery_capacity_mah",
    "extract_main_camera_mp",
    "extract_processor_generation",
    "sort_devices",
    "value_score",
    "FallbackRanker",
    "LLMService",
    "LLMServiceError",
    "LLMReasoner",
    "OracleMalformedResponseError",
    "OracleUnavailableError",
    "Reasoner",
    "ReasonerError",
    "NoAffordableDeviceError",
    "RecommendationService",
    "recommend",
    "TradeInEstimator",
    "estimate_trade_in",
    "quote_trade_in",
]
