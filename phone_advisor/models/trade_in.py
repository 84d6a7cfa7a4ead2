"""Trade-in data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class DeviceCondition(Enum):
    """Physical condition of a trade-in device."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

    @property
    def multiplier(self) -> float:
        return _CONDITION_MULTIPLIERS[self]

    @classmethod
    def parse(cls, value: "DeviceCondition | str | None") -> "DeviceCondition":
        """Parse a condition, falling back to GOOD for anything unrecognised."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.GOOD


_CONDITION_MULTIPLIERS = {
    DeviceCondition.EXCELLENT: 1.0,
    DeviceCondition.GOOD: 0.85,
    DeviceCondition.FAIR: 0.7,
    DeviceCondition.POOR: 0.5,
}


@dataclass(frozen=True)
class TradeInQuote:
    """Breakdown of a trade-in estimate."""
    model: str
    storage_tier: str
    condition: DeviceCondition
    base_value: int
    condition_multiplier: float
    storage_bonus: float
    value: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "model": self.model,
            "storage": self.storage_tier,
            "condition": self.condition.value,
            "baseValue": self.base_value,
            "conditionMultiplier": self.condition_multiplier,
            "storageBonus": self.storage_bonus,
            "tradeInValue": self.value,
        }
