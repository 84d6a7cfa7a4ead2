"""Reasoner - Optional LLM-backed ranking oracle.

The recommendation engine prefers a reasoner's ranking when one is available.
Any failure here is recovered by the engine, so a reasoner only has to raise
a ReasonerError subclass and never return partial output.

Interface Contract:
- rank(profile, devices) -> Ranking
- Raises OracleUnavailableError when the call fails or times out
- Raises OracleMalformedResponseError when the reply cannot be parsed into
  the expected shape
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Sequence

from phone_advisor.models import Device, PreferenceProfile, RankedPick, Ranking
from phone_advisor.services.llm_service import BaseLLMService, LLMServiceError


class ReasonerError(Exception):
    """Base class for reasoner failures."""
    pass


class OracleUnavailableError(ReasonerError):
    """Raised when the reasoner could not be reached or timed out."""
    pass


class OracleMalformedResponseError(ReasonerError):
    """Raised when the reasoner replied with an unusable ranking."""
    pass


class Reasoner(ABC):
    """A source of rankings for a profile over a list of devices."""

    @abstractmethod
    def rank(self, profile: PreferenceProfile, devices: Sequence[Device]) -> Ranking:
        """Rank devices for a profile.

        Raises:
            ReasonerError: If no usable ranking could be produced
        """
        pass


class LLMReasoner(Reasoner):
    """Reasoner that asks an LLM to pick the best phone and two alternatives."""

    def __init__(self, llm_service: BaseLLMService | None = None):
        """Initialize with optional LLM service dependency.

        Args:
            llm_service: LLM service for ranking. If None, uses default.
        """
        self._llm = llm_service

    @property
    def llm(self):
        """Lazy load LLM service."""
        if self._llm is None:
            from phone_advisor.services.llm_service import LLMService
            self._llm = LLMService.get_instance()
        return self._llm

    def rank(self, profile: PreferenceProfile, devices: Sequence[Device]) -> Ranking:
        prompt = self._build_ranking_prompt(profile, devices)

        try:
            response = self.llm.call(prompt, json_mode=True)
        except LLMServiceError as e:
            raise OracleUnavailableError(f"Reasoner call failed: {e}") from e
        except Exception as e:
            raise OracleUnavailableError(f"Reasoner call failed unexpectedly: {e}") from e

        return self._parse_ranking(response)

    def _build_ranking_prompt(self, profile: PreferenceProfile, devices: Sequence[Device]) -> str:
        """Build prompt for ranking."""
        priorities = ", ".join(p.value for p in profile.priorities) or "None specified"

        device_lines = "".join(
            f"""
- [{device.id}] {device.model}: ${device.price}
  Display: {device.display_size}, {device.display_type}, {device.resolution}
  Processor: {device.processor}
  Camera: {device.main_camera} (front: {device.front_camera})
  Battery: {device.battery}
  RAM: {device.ram}
  Storage: {', '.join(device.storage_options)}
  Key features: {device.features}
"""
            for device in devices
        )

        return f'''As an expert in smartphones, recommend the best phone upgrade for a user with these preferences:

Current phone: {profile.current_phone or 'Not specified'}
Current storage: {profile.current_storage or 'Not specified'}
Usage type: {profile.usage_type.value}
Budget: ${profile.budget}
Priorities: {priorities}

Here are the available phones within budget (id in brackets, all prices in USD):
{device_lines}
Based on the user's preferences, give the single best match and up to 2 alternative recommendations.
For each recommendation, include a match percentage (0-100) and specific reasons why it's a good match for this user.
Only recommend phones from the list above, and never recommend the same phone twice.

Respond in this exact JSON format:
{{
  "bestMatch": {{
    "deviceRef": "id of the phone from the list",
    "matchScore": number between 0-100,
    "reasons": ["reason 1", "reason 2", "reason 3"]
  }},
  "alternatives": [
    {{
      "deviceRef": "id of the phone from the list",
      "matchScore": number between 0-100,
      "reasons": ["reason 1", "reason 2"]
    }}
  ]
}}

Return ONLY the JSON object, no additional text.'''

    def _parse_ranking(self, response: str) -> Ranking:
        """Parse LLM response into a Ranking."""
        try:
            data = json.loads(response)
        except (json.JSONDecodeError, TypeError) as e:
            raise OracleMalformedResponseError(f"Invalid JSON response: {e}") from e

        if not isinstance(data, dict):
            raise OracleMalformedResponseError("Response is not a JSON object")

        if "bestMatch" not in data:
            raise OracleMalformedResponseError("Response is missing 'bestMatch'")
        best_match = self._parse_pick(data["bestMatch"], "bestMatch")

        alternatives_data = data.get("alternatives", [])
        if not isinstance(alternatives_data, list):
            raise OracleMalformedResponseError("'alternatives' must be a list")
        alternatives = [
            self._parse_pick(item, f"alternatives[{index}]")
            for index, item in enumerate(alternatives_data)
        ]

        return Ranking(best_match=best_match, alternatives=alternatives)

    def _parse_pick(self, item: Any, where: str) -> RankedPick:
        if not isinstance(item, dict):
            raise OracleMalformedResponseError(f"{where} must be an object")

        missing = [key for key in ("deviceRef", "matchScore", "reasons") if key not in item]
        if missing:
            raise OracleMalformedResponseError(f"{where} is missing {', '.join(missing)}")

        device_ref = item["deviceRef"]
        if isinstance(device_ref, bool) or not isinstance(device_ref, (str, int)):
            raise OracleMalformedResponseError(f"{where}.deviceRef must be a string or integer")

        reasons = item["reasons"]
        if not isinstance(reasons, list):
            raise OracleMalformedResponseError(f"{where}.reasons must be a list")

        # Score range and reason contents are checked by the engine
        return RankedPick(
            device_ref=str(device_ref).strip(),
            match_score=item["matchScore"],
            reasons=list(reasons),
        )
