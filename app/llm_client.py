"""
LLM client abstraction layer to support multiple providers.

This module provides a unified interface for OpenAI, Gemini and Ollama.
Each client is built explicitly from a Settings object and translates its
provider's failures (HTTP status, connection problems) into the
AiExtractionError family, so the retry logic never has to know which SDK
sits underneath.
"""

from __future__ import annotations
from typing import List, Dict, Optional
from abc import ABC, abstractmethod
import logging

import httpx

from config import Settings
from errors import NetworkError, error_for_status

try:
    import ollama
except ImportError:
    ollama = None

try:
    import openai
    from openai import OpenAI
except ImportError:
    openai = OpenAI = None

try:
    from google import genai
    from google.genai import errors as genai_errors
    from google.genai import types as genai_types
except ImportError:
    genai = genai_errors = genai_types = None

logger = logging.getLogger(__name__)

# keep SDK request logging out of the application log
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("openai").setLevel(logging.WARNING)


class LLMResponse:
    """Unified response object for LLM responses."""

    def __init__(self, content: str):
        self.message = MessageContent(content)


class MessageContent:
    """Message content wrapper."""

    def __init__(self, content: str):
        self.content = content


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    temperature: float = 0.1
    max_tokens: int = 4096

    @abstractmethod
    def chat(self, model: str, messages: List[Dict[str, str]],
             temperature: Optional[float] = None) -> LLMResponse:
        """Send a chat request to the LLM provider."""
        pass


class OllamaClient(LLMClient):
    """Ollama client implementation."""

    def __init__(self, host: str = "http://localhost:11434", temperature: float = 0.1,
                 timeout: float = 60.0):
        if ollama is None:
            raise ImportError("ollama package is required for OllamaClient")
        self.client = ollama.Client(host=host, timeout=timeout)
        self.temperature = temperature

    def chat(self, model: str, messages: List[Dict[str, str]],
             temperature: Optional[float] = None) -> LLMResponse:
        """Send a chat request to Ollama."""
        temperature = self.temperature if temperature is None else temperature
        try:
            response = self.client.chat(
                model=model, messages=messages, options={"temperature": temperature}
            )
        except ollama.ResponseError as exc:
            raise error_for_status(exc.status_code, exc.error) from exc
        except (ConnectionError, httpx.TransportError) as exc:
            raise NetworkError(f"Could not reach Ollama: {exc}") from exc
        return LLMResponse(response.message.content or "")


class OpenAIClient(LLMClient):
    """OpenAI client implementation."""

    def __init__(self, api_key: str | None = None, temperature: float = 0.1,
                 max_tokens: int = 4096, timeout: float = 60.0):
        if OpenAI is None:
            raise ImportError("openai package is required for OpenAIClient")
        if not api_key:
            raise ValueError("OpenAI API key is required. Set OPENAI_API_KEY environment variable or pass api_key parameter.")

        # retries are owned by parser_llm, not the SDK
        self.client = OpenAI(api_key=api_key, max_retries=0, timeout=timeout)
        self.temperature = temperature
        self.max_tokens = max_tokens

    def chat(self, model: str, messages: List[Dict[str, str]],
             temperature: Optional[float] = None) -> LLMResponse:
        """Send a chat request to OpenAI."""
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=self.temperature if temperature is None else temperature,
                max_tokens=self.max_tokens,
            )
        except openai.APIStatusError as exc:
            raise error_for_status(exc.status_code, exc.message) from exc
        except openai.APIConnectionError as exc:
            raise NetworkError(f"Could not reach OpenAI: {exc}") from exc

        return LLMResponse(response.choices[0].message.content or "")


# résumés are full of names and employers; the default filters refuse some of them
GEMINI_SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)


class GeminiClient(LLMClient):
    """Gemini client implementation (google-genai SDK)."""

    def __init__(self, api_key: str | None = None, temperature: float = 0.1,
                 max_tokens: int = 4096, timeout: float = 60.0):
        if genai is None:
            raise ImportError("google-genai package is required for GeminiClient")
        if not api_key:
            raise ValueError("Gemini API key is required. Set GEMINI_API_KEY environment variable or pass api_key parameter.")
        # HttpOptions.timeout is in milliseconds
        self.client = genai.Client(
            api_key=api_key,
            http_options=genai_types.HttpOptions(timeout=int(timeout * 1000)),
        )
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _config(self, system: str, temperature: float):
        return genai_types.GenerateContentConfig(
            system_instruction=system or None,
            temperature=temperature,
            max_output_tokens=self.max_tokens,
            safety_settings=[
                genai_types.SafetySetting(category=category, threshold="BLOCK_NONE")
                for category in GEMINI_SAFETY_CATEGORIES
            ],
        )

    def chat(self, model: str, messages: List[Dict[str, str]],
             temperature: Optional[float] = None) -> LLMResponse:
        """Send a chat request to Gemini."""
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        contents = "\n\n".join(m["content"] for m in messages if m["role"] != "system")
        temperature = self.temperature if temperature is None else temperature
        try:
            response = self.client.models.generate_content(
                model=model,
                contents=contents,
                config=self._config(system, temperature),
            )
        except genai_errors.APIError as exc:
            raise error_for_status(exc.code, exc.message) from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"Could not reach Gemini: {exc}") from exc
        return LLMResponse(response.text or "")


def get_llm_client(settings: Settings) -> LLMClient:
    """Factory function to get the appropriate LLM client for the settings."""
    provider = settings.provider.lower()
    logger.info("Using LLM provider %s (model %s)", provider, settings.model)

    if provider == "openai":
        return OpenAIClient(
            settings.api_key,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            timeout=settings.request_timeout,
        )
    elif provider == "gemini":
        return GeminiClient(
            settings.api_key,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            timeout=settings.request_timeout,
        )
    elif provider == "ollama":
        return OllamaClient(
            settings.ollama_base_url,
            temperature=settings.temperature,
            timeout=settings.request_timeout,
        )
    else:
        raise ValueError(f"Unsupported LLM provider: {provider}")
