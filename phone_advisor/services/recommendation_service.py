"""Recommendation Service - Phone upgrade ranking.

This module handles:
- Filtering the catalog down to devices within budget
- Asking the reasoner for a ranking and validating it against the catalog
- Falling back to rule-based ranking when the reasoner fails
- Attaching trade-in values for the user's current phone

Interface Contract:
- recommend(profile, catalog) -> RecommendationResult
- Raises NoAffordableDeviceError when no device is within budget; every
  reasoner failure is absorbed and answered by the fallback ranker
- Never mutates the catalog or the profile
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Sequence

from config import USE_REASONER
from phone_advisor.models import (
    Device,
    PreferenceProfile,
    RankedPick,
    Ranking,
    RecommendationResult,
    ScoredCandidate,
)
from phone_advisor.services.fallback_ranker import MAX_ALTERNATIVES, FallbackRanker
from phone_advisor.services.reasoner import OracleMalformedResponseError, Reasoner, ReasonerError
from phone_advisor.services.trade_in import TradeInEstimator

logger = logging.getLogger(__name__)


class RecommendationServiceError(Exception):
    """Raised when recommendation service fails."""
    pass


class NoAffordableDeviceError(RecommendationServiceError):
    """Raised when no device in the catalog fits the budget."""

    def __init__(self, budget: int):
        self.budget = budget
        super().__init__(f"No phones found within your budget of ${budget}")


class RecommendationService:
    """Service for ranking phone upgrades against user preferences."""

    def __init__(
        self,
        reasoner: Reasoner | None = None,
        *,
        fallback: FallbackRanker | None = None,
        trade_in: TradeInEstimator | None = None,
        use_reasoner: bool = USE_REASONER,
    ):
        """Initialize with optional dependencies.

        Args:
            reasoner: Ranking oracle. If None and use_reasoner is set, an
                LLMReasoner over the default LLM service is created on first use.
            fallback: Rule-based ranker. If None, creates default.
            trade_in: Trade-in estimator. If None, creates default.
            use_reasoner: If False, always rank with the fallback ranker.
        """
        self._reasoner = reasoner
        self._use_reasoner = use_reasoner
        self.fallback = fallback or FallbackRanker()
        self.trade_in = trade_in or TradeInEstimator()

    @property
    def reasoner(self) -> Reasoner | None:
        """Lazy load reasoner."""
        if not self._use_reasoner:
            return None
        if self._reasoner is None:
            from phone_advisor.services.reasoner import LLMReasoner
            self._reasoner = LLMReasoner()
        return self._reasoner

    def recommend(
        self,
        profile: PreferenceProfile,
        catalog: Iterable[Device],
    ) -> RecommendationResult:
        """Recommend a phone upgrade.

        Args:
            profile: The user's preferences
            catalog: Candidate devices, in catalog order

        Returns:
            RecommendationResult: Best match plus up to two alternatives

        Raises:
            NoAffordableDeviceError: If no device is within budget
        """
        affordable = [device for device in catalog if device.price <= profile.budget]
        logger.debug("%d devices within budget $%d", len(affordable), profile.budget)
        if not affordable:
            raise NoAffordableDeviceError(profile.budget)

        result = self._rank_with_reasoner(profile, affordable)
        if result is None:
            # Fallback candidates carry their devices; refs are resolved for reasoner output only
            best, *alternatives = self.fallback.candidates(profile, affordable)
            result = RecommendationResult(
                best_match=best,
                alternatives=tuple(alternatives),
                source="fallback",
            )

        if profile.include_trade_in and profile.current_phone:
            result = self._attach_trade_in(result, profile)

        return result

    def _rank_with_reasoner(
        self,
        profile: PreferenceProfile,
        affordable: Sequence[Device],
    ) -> RecommendationResult | None:
        """Reasoner ranking resolved against the catalog, or None on any failure."""
        reasoner = self.reasoner
        if reasoner is None:
            return None

        try:
            ranking = reasoner.rank(profile, list(affordable))
            return self._resolve_ranking(ranking, affordable, source="reasoner")
        except ReasonerError as e:
            logger.warning("Reasoner failed, using fallback ranking: %s", e)
        except Exception:
            logger.exception("Unexpected reasoner error, using fallback ranking")
        return None

    def _resolve_ranking(
        self,
        ranking: Ranking,
        affordable: Sequence[Device],
        *,
        source: str,
    ) -> RecommendationResult:
        """Turn device refs into devices, rejecting the whole ranking on any problem."""
        if not isinstance(ranking, Ranking):
            raise OracleMalformedResponseError(f"Expected a Ranking, got {type(ranking).__name__}")
        if len(ranking.alternatives) > MAX_ALTERNATIVES:
            raise OracleMalformedResponseError(
                f"Expected at most {MAX_ALTERNATIVES} alternatives, got {len(ranking.alternatives)}"
            )

        by_ref: dict[str, Device] = {}
        for device in affordable:
            by_ref.setdefault(str(device.id), device)
        for device in affordable:
            by_ref.setdefault(device.model, device)

        candidates: list[ScoredCandidate] = []
        seen_ids: set[int] = set()
        for pick in ranking.picks:
            candidate = self._resolve_pick(pick, by_ref)
            if candidate.device.id in seen_ids:
                raise OracleMalformedResponseError(
                    f"Device {candidate.device.model!r} was recommended more than once"
                )
            seen_ids.add(candidate.device.id)
            candidates.append(candidate)

        return RecommendationResult(
            best_match=candidates[0],
            alternatives=tuple(candidates[1:]),
            source=source,
        )

    def _resolve_pick(self, pick: RankedPick, by_ref: dict[str, Device]) -> ScoredCandidate:
        device = by_ref.get(str(pick.device_ref).strip())
        if device is None:
            raise OracleMalformedResponseError(
                f"Unknown device {pick.device_ref!r} is not in the affordable catalog"
            )

        score = pick.match_score
        if isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= 100:
            raise OracleMalformedResponseError(f"Invalid match score {score!r} for {device.model!r}")

        reasons = pick.reasons
        if not reasons or not all(isinstance(r, str) and r.strip() for r in reasons):
            raise OracleMalformedResponseError(f"Missing or empty reasons for {device.model!r}")

        return ScoredCandidate(device=device, match_score=score, reasons=tuple(reasons))

    def _attach_trade_in(
        self,
        result: RecommendationResult,
        profile: PreferenceProfile,
    ) -> RecommendationResult:
        value = self.trade_in.quote(
            profile.current_phone,
            profile.current_storage,
            profile.trade_in_condition,
        )
        return replace(
            result,
            best_match=replace(result.best_match, trade_in_value=value),
            alternatives=tuple(replace(alt, trade_in_value=value) for alt in result.alternatives),
        )


_default_service: RecommendationService | None = None


def recommend(profile: PreferenceProfile, catalog: Iterable[Device]) -> RecommendationResult:
    """Recommend with the default service."""
    global _default_service
    if _default_service is None:
        _default_service = RecommendationService()
    return _default_service.recommend(profile, catalog)
