"""Recommendation data models.

Pure data structures for recommendation results.
"""

from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field
from typing import Any, Literal

from .device import Device


@dataclass
class RankedPick:
    """A single pick as produced by a ranker, before it is resolved to a device."""
    device_ref: str
    match_score: int
    reasons: list[str] = dataclass_field(default_factory=list)


@dataclass
class Ranking:
    """Raw ranking output shared by the reasoner and the fallback ranker."""
    best_match: RankedPick
    alternatives: list[RankedPick] = dataclass_field(default_factory=list)

    @property
    def picks(self) -> list[RankedPick]:
        return [self.best_match, *self.alternatives]


@dataclass(frozen=True)
class ScoredCandidate:
    """A device paired with its match score and reasons."""
    device: Device
    match_score: int
    reasons: tuple[str, ...]
    trade_in_value: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data: dict[str, Any] = {
            "phone": self.device.to_dict(),
            "match": self.match_score,
            "reasons": list(self.reasons),
        }
        if self.trade_in_value is not None:
            data["tradeInValue"] = self.trade_in_value
        return data


@dataclass(frozen=True)
class RecommendationResult:
    """Best match plus up to two alternatives."""
    best_match: ScoredCandidate
    alternatives: tuple[ScoredCandidate, ...] = ()
    source: Literal["reasoner", "fallback"] = "fallback"

    @property
    def candidates(self) -> list[ScoredCandidate]:
        """All candidates, best match first."""
        return [self.best_match, *self.alternatives]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "bestMatch": self.best_match.to_dict(),
            "alternatives": [alt.to_dict() for alt in self.alternatives],
            "source": self.source,
        }
