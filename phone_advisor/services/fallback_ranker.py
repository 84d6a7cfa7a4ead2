"""Fallback Ranker - Deterministic rule-based ranking.

Used whenever the reasoner is unavailable or returns something unusable, so
the advisor keeps working with no external dependency. The output has the
same shape as the reasoner's: a Ranking of device refs, scores and reasons.

Ordering rules:
1. Usage base order: professional/heavy by price descending, light by price
   ascending, moderate keeps catalog order.
2. One dominant priority re-sorts the list, first match wins:
   camera (main camera MP desc), battery (mAh desc), gaming (processors
   with a "Gen" marker first, then price desc). Display and design do not
   reorder.

All sorts are stable, so ties keep the order of the previous step.
"""

from __future__ import annotations

from typing import Sequence

from phone_advisor.models import (
    Device,
    PreferenceProfile,
    Priority,
    RankedPick,
    Ranking,
    ScoredCandidate,
    UsageType,
)
from phone_advisor.services.extractors import (
    HIGH_RES_CAMERA_MARKERS,
    extract_battery_capacity_mah,
    extract_main_camera_mp,
)

BEST_MATCH_SCORE = 95
FIRST_ALTERNATIVE_SCORE = 90
ALTERNATIVE_SCORE_STEP = 10
MAX_ALTERNATIVES = 2

# Literal substring check; 5001 mAh or "5000mAh" do not match
LARGE_BATTERY_MARKER = "5000 mAh"
GAMING_PROCESSOR_MARKER = "Snapdragon"
PREMIUM_DISPLAY_MARKER = "AMOLED"
PROCESSOR_GEN_MARKER = "Gen"


class FallbackRanker:
    """Ranks devices from fixed rules. Stateless and deterministic."""

    def rank(self, profile: PreferenceProfile, devices: Sequence[Device]) -> Ranking:
        """Rank devices for a profile.

        Args:
            profile: The user's preferences
            devices: Affordable devices, in catalog order (must be non-empty)

        Returns:
            Ranking: Best match plus up to two alternatives
        """
        picks = [
            RankedPick(
                device_ref=str(candidate.device.id),
                match_score=candidate.match_score,
                reasons=list(candidate.reasons),
            )
            for candidate in self.candidates(profile, devices)
        ]
        return Ranking(best_match=picks[0], alternatives=picks[1:])

    def candidates(self, profile: PreferenceProfile, devices: Sequence[Device]) -> list[ScoredCandidate]:
        """Best match followed by up to two alternatives, holding the devices themselves.

        Raises:
            ValueError: If devices is empty
        """
        if not devices:
            raise ValueError("Cannot rank an empty device list")

        ordered = self.order(profile, devices)
        best, alternatives = ordered[0], ordered[1:1 + MAX_ALTERNATIVES]

        scored = [
            ScoredCandidate(
                device=best,
                match_score=BEST_MATCH_SCORE,
                reasons=tuple(self.reasons_for(best, profile, is_best_match=True)),
            )
        ]
        for index, device in enumerate(alternatives):
            scored.append(ScoredCandidate(
                device=device,
                match_score=FIRST_ALTERNATIVE_SCORE - index * ALTERNATIVE_SCORE_STEP,
                reasons=tuple(self.reasons_for(device, profile, is_best_match=False)),
            ))
        return scored

    def order(self, profile: PreferenceProfile, devices: Sequence[Device]) -> list[Device]:
        """Full ordering of devices, best first. Does not modify the input."""
        ordered = self._base_order(profile.usage_type, devices)

        if profile.has_priority(Priority.CAMERA):
            ordered.sort(key=lambda d: extract_main_camera_mp(d.main_camera), reverse=True)
        elif profile.has_priority(Priority.BATTERY):
            ordered.sort(key=lambda d: extract_battery_capacity_mah(d.battery), reverse=True)
        elif profile.has_priority(Priority.GAMING):
            ordered.sort(key=lambda d: (PROCESSOR_GEN_MARKER not in d.processor, -d.price))

        return ordered

    def _base_order(self, usage_type: UsageType, devices: Sequence[Device]) -> list[Device]:
        if usage_type in (UsageType.PROFESSIONAL, UsageType.HEAVY):
            return sorted(devices, key=lambda d: d.price, reverse=True)
        if usage_type is UsageType.LIGHT:
            return sorted(devices, key=lambda d: d.price)
        return list(devices)

    def reasons_for(
        self,
        device: Device,
        profile: PreferenceProfile,
        *,
        is_best_match: bool,
    ) -> list[str]:
        """Human-readable reasons, at least one."""
        reasons: list[str] = []

        if is_best_match:
            reasons.append(f"Best overall match for your {profile.usage_type.value} usage needs")

        if device.is_premium_tier and profile.usage_type is UsageType.PROFESSIONAL:
            reasons.append("Flagship performance ideal for professional users")

        if any(marker in device.main_camera for marker in HIGH_RES_CAMERA_MARKERS):
            reasons.append("Exceptional camera system for photography enthusiasts")

        if profile.has_priority(Priority.BATTERY) and LARGE_BATTERY_MARKER in device.battery:
            reasons.append("Large battery capacity for all-day usage")

        if profile.has_priority(Priority.GAMING) and GAMING_PROCESSOR_MARKER in device.processor:
            reasons.append("Powerful processor optimized for gaming performance")

        if profile.has_priority(Priority.DISPLAY) and PREMIUM_DISPLAY_MARKER in device.display_type:
            reasons.append("Premium display with vibrant colors and deep blacks")

        if not reasons:
            reasons.append(f"Good balance of features within your ${profile.budget} budget")

        return reasons
