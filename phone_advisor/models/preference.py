"""User preference data model.

A PreferenceProfile is built once per request and validated at construction,
so the scoring code never has to deal with unknown usage types or priorities.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable


class ProfileValidationError(ValueError):
    """Raised when a preference profile contains unknown or invalid values."""
    pass


class UsageType(Enum):
    """How heavily the user uses their phone."""
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"
    PROFESSIONAL = "professional"


class Priority(Enum):
    """Attributes a user can declare as important."""
    CAMERA = "camera"
    GAMING = "gaming"
    BATTERY = "battery"
    DISPLAY = "display"
    DESIGN = "design"


def _coerce_usage(value: UsageType | str) -> UsageType:
    if isinstance(value, UsageType):
        return value
    try:
        return UsageType(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(u.value for u in UsageType)
        raise ProfileValidationError(
            f"Unknown usage type {value!r} (expected one of: {allowed})"
        ) from None


def _coerce_priorities(values: Iterable[Priority | str] | str | None) -> tuple[Priority, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        values = [v for v in values.split(",") if v.strip()]
    elif not isinstance(values, (list, tuple, set, frozenset)):
        raise ProfileValidationError(f"Priorities must be a list, got {type(values).__name__}")

    result: list[Priority] = []
    for value in values:
        if isinstance(value, Priority):
            priority = value
        else:
            try:
                priority = Priority(str(value).strip().lower())
            except ValueError:
                allowed = ", ".join(p.value for p in Priority)
                raise ProfileValidationError(
                    f"Unknown priority {value!r} (expected any of: {allowed})"
                ) from None
        if priority not in result:
            result.append(priority)
    return tuple(result)


@dataclass(frozen=True)
class PreferenceProfile:
    """What the user has and what they want from an upgrade."""
    usage_type: UsageType
    budget: int
    priorities: tuple[Priority, ...] = ()
    current_phone: str = ""
    current_storage: str = ""
    include_trade_in: bool = False
    trade_in_condition: str = "good"

    def __post_init__(self) -> None:
        object.__setattr__(self, "usage_type", _coerce_usage(self.usage_type))
        object.__setattr__(self, "priorities", _coerce_priorities(self.priorities))
        if isinstance(self.budget, bool) or not isinstance(self.budget, int):
            raise ProfileValidationError(f"Budget must be an integer, got {self.budget!r}")
        if self.budget < 0:
            raise ProfileValidationError(f"Budget must not be negative, got {self.budget}")

    def has_priority(self, priority: Priority | str) -> bool:
        """Check whether a priority was requested."""
        if not isinstance(priority, Priority):
            priority = Priority(priority)
        return priority in self.priorities

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "currentPhone": self.current_phone,
            "currentStorage": self.current_storage,
            "usageType": self.usage_type.value,
            "budget": self.budget,
            "priorities": [p.value for p in self.priorities],
            "includeTradeIn": self.include_trade_in,
            "tradeInCondition": self.trade_in_condition,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PreferenceProfile":
        """Create from dictionary (snake_case or camelCase keys)."""
        def pick(snake: str, camel: str, default: Any = "") -> Any:
            if snake in data:
                return data[snake]
            return data.get(camel, default)

        if "budget" not in data:
            raise ProfileValidationError("Budget is required")

        return cls(
            usage_type=pick("usage_type", "usageType", "moderate"),
            budget=data["budget"],
            priorities=data.get("priorities", ()),
            current_phone=pick("current_phone", "currentPhone"),
            current_storage=pick("current_storage", "currentStorage"),
            include_trade_in=bool(pick("include_trade_in", "includeTradeIn", False)),
            trade_in_condition=pick("trade_in_condition", "tradeInCondition", "good"),
        )
