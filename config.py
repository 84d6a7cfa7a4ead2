"""Global configuration values."""

import os

# LLM provider used by the reasoner ("openai" or "gemini")
LLM_PROVIDER = os.environ.get("LLM_PROVIDER", "openai").lower()

# Default model for recommendations (OpenAI)
RECOMMENDATION_MODEL = os.environ.get("OPENAI_RECOMMENDATION_MODEL", "gpt-4o")

# Default Gemini model (can be overridden via env)
DEFAULT_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")

# Seconds to wait for the reasoner before falling back to rule-based ranking
REASONER_TIMEOUT = float(os.environ.get("REASONER_TIMEOUT", "20"))

# Toggle the LLM reasoner; when off, only the fallback ranker is used
USE_REASONER = os.environ.get("USE_REASONER", "true").lower() in ("1", "true", "yes")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
