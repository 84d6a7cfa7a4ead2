"""LLM Service - Abstraction layer for AI model calls.

This module provides a unified interface for calling different LLM providers
(OpenAI, Gemini) with consistent error handling and a bounded request time.

Interface Contract:
- call() returns str (raw text)
- All methods raise LLMServiceError on failure, including timeouts
- Calls are never retried; callers decide what to do on failure
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod

import google.generativeai as genai
from openai import OpenAI

from config import DEFAULT_MODEL, LLM_PROVIDER, REASONER_TIMEOUT, RECOMMENDATION_MODEL

logger = logging.getLogger(__name__)


class LLMServiceError(Exception):
    """Raised when LLM call fails."""
    pass


class BaseLLMService(ABC):
    """Abstract base class for LLM services."""

    @abstractmethod
    def call(self, prompt: str, *, json_mode: bool = False) -> str:
        """Call the LLM with a prompt.

        Args:
            prompt: The prompt to send to the LLM
            json_mode: If True, expect JSON response

        Returns:
            str: The LLM response text

        Raises:
            LLMServiceError: If the call fails or times out
        """
        pass


class GeminiService(BaseLLMService):
    """Google Gemini LLM service implementation."""

    def __init__(self, model: str = DEFAULT_MODEL, timeout: float = REASONER_TIMEOUT):
        self.model = model
        self.timeout = timeout
        self._configured = False

    def _configure(self) -> None:
        """Configure Gemini API (lazy initialization)."""
        if self._configured:
            return
        api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
        if not api_key:
            raise LLMServiceError("GEMINI_API_KEY or GOOGLE_API_KEY environment variable not set")
        genai.configure(api_key=api_key)
        self._configured = True

    def call(self, prompt: str, *, json_mode: bool = False) -> str:
        """Call Gemini model."""
        self._configure()
        try:
            gen_config = None
            if json_mode:
                gen_config = genai.GenerationConfig(
                    response_mime_type="application/json"
                )
            model = genai.GenerativeModel(self.model)
            response = model.generate_content(
                prompt,
                generation_config=gen_config,
                request_options={"timeout": self.timeout},
            )
            return response.text
        except Exception as e:
            raise LLMServiceError(f"Gemini call failed: {e}") from e


class OpenAIService(BaseLLMService):
    """OpenAI LLM service implementation."""

    def __init__(
        self,
        model: str = RECOMMENDATION_MODEL,
        timeout: float = REASONER_TIMEOUT,
        temperature: float = 0.7,
    ):
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self._client: OpenAI | None = None

    def _get_client(self) -> OpenAI:
        """Get or create OpenAI client (lazy initialization)."""
        if self._client is None:
            api_key = os.environ.get("OPENAI_API_KEY")
            if not api_key:
                raise LLMServiceError("OPENAI_API_KEY environment variable not set")
            self._client = OpenAI(api_key=api_key, timeout=self.timeout, max_retries=0)
        return self._client

    def call(self, prompt: str, *, json_mode: bool = False) -> str:
        """Call OpenAI model."""
        client = self._get_client()
        try:
            kwargs = {}
            if json_mode:
                kwargs["response_format"] = {"type": "json_object"}

            response = client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                **kwargs,
            )
            content = response.choices[0].message.content
            if not content:
                raise LLMServiceError("Empty response from OpenAI")
            return content
        except LLMServiceError:
            raise
        except Exception as e:
            raise LLMServiceError(f"OpenAI call failed: {e}") from e


_PROVIDERS = {
    "openai": OpenAIService,
    "gemini": GeminiService,
}


# Default service instance (can be swapped for testing)
class LLMService:
    """Facade for LLM services with provider switching."""

    _instance: BaseLLMService | None = None

    @classmethod
    def get_instance(cls) -> BaseLLMService:
        """Get the configured LLM service instance."""
        if cls._instance is None:
            provider = _PROVIDERS.get(LLM_PROVIDER)
            if provider is None:
                logger.warning("Unknown LLM_PROVIDER %r, using openai", LLM_PROVIDER)
                provider = OpenAIService
            cls._instance = provider()
        return cls._instance

    @classmethod
    def set_instance(cls, service: BaseLLMService) -> None:
        """Set a custom LLM service (useful for testing)."""
        cls._instance = service

    @classmethod
    def reset(cls) -> None:
        """Reset to default service."""
        cls._instance = None

