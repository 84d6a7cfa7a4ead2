"""Trade-in Estimator - Estimated resale value of the user's current phone.

Interface Contract:
- quote_trade_in(model, storage_tier, condition) -> int
- estimate_trade_in(model, storage_tier, condition) -> TradeInQuote
- Never raises for unknown models, tiers or conditions
"""

from __future__ import annotations

import math

from phone_advisor.models import DeviceCondition, TradeInQuote

# Base values in USD for a device in excellent condition with base storage
BASE_TRADE_IN_VALUES: dict[str, int] = {
    "Samsung Galaxy S24 Ultra": 750,
    "Samsung Galaxy S24+": 650,
    "Samsung Galaxy S24": 550,
    "Samsung Galaxy S23 Ultra": 550,
    "Samsung Galaxy S23+": 450,
    "Samsung Galaxy S23": 350,
    "Samsung Galaxy S22 Ultra": 400,
    "Samsung Galaxy S22+": 300,
    "Samsung Galaxy S22": 250,
    "Samsung Galaxy S21 Ultra": 300,
    "Samsung Galaxy S21+": 250,
    "Samsung Galaxy S21": 200,
    "Samsung Galaxy Z Fold5": 700,
    "Samsung Galaxy Z Fold4": 500,
    "Samsung Galaxy Z Flip5": 450,
    "Samsung Galaxy Z Flip4": 350,
    "Samsung Galaxy A54": 150,
    "Samsung Galaxy A53": 100,
    "Samsung Galaxy Note 20 Ultra": 300,
    "Samsung Galaxy Note 20": 250,
    "Other Samsung": 150,
    "Other Brand": 100,
}

DEFAULT_BASE_VALUE = 150

# Additive bonus as a fraction of the base value
STORAGE_BONUS: dict[str, float] = {
    "1TB": 0.20,
    "512GB": 0.15,
    "256GB": 0.10,
}


class TradeInEstimator:
    """Prices trade-ins from static lookup tables."""

    def __init__(
        self,
        base_values: dict[str, int] | None = None,
        default_base_value: int = DEFAULT_BASE_VALUE,
    ):
        self._base_values = BASE_TRADE_IN_VALUES if base_values is None else base_values
        self._default_base_value = default_base_value

    def base_value(self, model: str) -> int:
        """Base value by exact model name; unknown models get the default."""
        return self._base_values.get(model, self._default_base_value)

    def estimate(
        self,
        model: str,
        storage_tier: str,
        condition: DeviceCondition | str | None = DeviceCondition.GOOD,
    ) -> TradeInQuote:
        """Build a full trade-in quote."""
        base = self.base_value(model)
        parsed_condition = DeviceCondition.parse(condition)
        tier = (storage_tier or "").strip().upper()
        bonus_fraction = STORAGE_BONUS.get(tier, 0.0)

        storage_bonus = base * bonus_fraction
        raw_value = base * parsed_condition.multiplier + storage_bonus
        # Half-up rounding; round() would round halves to even
        value = int(math.floor(raw_value + 0.5))
        # Capped at base * 1.2, the best condition plus the largest bonus
        value = min(value, base * 6 // 5)

        return TradeInQuote(
            model=model,
            storage_tier=tier,
            condition=parsed_condition,
            base_value=base,
            condition_multiplier=parsed_condition.multiplier,
            storage_bonus=storage_bonus,
            value=max(0, value),
        )

    def quote(
        self,
        model: str,
        storage_tier: str,
        condition: DeviceCondition | str | None = DeviceCondition.GOOD,
    ) -> int:
        """Estimated trade-in value as an integer."""
        return self.estimate(model, storage_tier, condition).value


_default_estimator = TradeInEstimator()


def estimate_trade_in(
    model: str,
    storage_tier: str,
    condition: DeviceCondition | str | None = DeviceCondition.GOOD,
) -> TradeInQuote:
    """Quote breakdown using the default tables."""
    return _default_estimator.estimate(model, storage_tier, condition)


def quote_trade_in(
    model: str,
    storage_tier: str,
    condition: DeviceCondition | str | None = DeviceCondition.GOOD,
) -> int:
    """Trade-in value using the default tables."""
    return _default_estimator.quote(model, storage_tier, condition)
