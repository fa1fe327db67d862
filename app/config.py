"""
Configuration settings for the resume2score application.

This file contains configuration for the LLM providers, the retry policy of
the AI extraction path and the upload limits. Values come from the process
environment (or a local .env file) and are collected into a Settings object
that is handed explicitly to the clients and the orchestrator.
"""

from dotenv import load_dotenv
load_dotenv()          # ← must be before os.getenv(...)
import os
from dataclasses import dataclass

# LLM Provider Configuration
# Set to "openai", "gemini" or "ollama"
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai")

# Model Configuration
DEFAULT_MODEL = {
    "openai": "gpt-4o-mini",
    "gemini": "gemini-2.0-flash",
    "ollama": "llama3.1:8b",
}

# Near-zero temperature keeps extraction reproducible
EXTRACTION_PARAMS = {
    "temperature": 0.1,
    "max_tokens": 4096,
}

# Ollama Configuration
OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")

MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def get_model_for_provider(provider: str = None) -> str:
    """Get the default model for the specified provider."""
    provider = provider or LLM_PROVIDER
    return DEFAULT_MODEL.get(provider, "gpt-4o-mini")


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _api_key_for(provider: str) -> str | None:
    if provider == "openai":
        return os.getenv("OPENAI_API_KEY") or None
    if provider == "gemini":
        return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or None
    return None


@dataclass(frozen=True)
class Settings:
    provider: str = "openai"
    model: str = DEFAULT_MODEL["openai"]
    api_key: str | None = None
    ollama_base_url: str = "http://localhost:11434"
    temperature: float = EXTRACTION_PARAMS["temperature"]
    max_tokens: int = EXTRACTION_PARAMS["max_tokens"]
    request_timeout: float = 60.0
    require_ai: bool = False
    max_attempts: int = 3
    initial_backoff: float = 2.0
    max_upload_bytes: int = MAX_UPLOAD_BYTES

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """Build settings from the environment; keyword overrides win."""
        provider = (overrides.pop("provider", None) or os.getenv("LLM_PROVIDER", LLM_PROVIDER)).lower()
        values = dict(
            provider=provider,
            model=os.getenv("LLM_MODEL") or get_model_for_provider(provider),
            api_key=_api_key_for(provider),
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", OLLAMA_BASE_URL),
            require_ai=_env_flag("REQUIRE_AI"),
            max_attempts=max(1, int(os.getenv("AI_MAX_ATTEMPTS", "3"))),
            initial_backoff=float(os.getenv("AI_INITIAL_BACKOFF", "2")),
            max_upload_bytes=int(float(os.getenv("MAX_UPLOAD_MB", "10")) * 1024 * 1024),
        )
        values.update(overrides)
        return cls(**values)

    @property
    def ai_configured(self) -> bool:
        """True when a credential (or a local endpoint) is available."""
        if self.provider == "ollama":
            return bool(self.ollama_base_url)
        return bool(self.api_key)
