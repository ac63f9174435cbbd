"""AI client factory for the supported text generation providers.

Clients are built per call from a ProviderConfig snapshot. SDK-level retries
are disabled: each generation makes exactly one network request.
"""
import logging
import threading
from typing import Any, Dict, Optional

import google.generativeai as genai
from anthropic import Anthropic
from openai import OpenAI

from backend.ai.config import ANTHROPIC, DEFAULT_TIMEOUT, GEMINI, OPENAI, ProviderConfig
from backend.ai.errors import MissingCredentialError

logger = logging.getLogger(__name__)

_ENV_NAMES = {
    GEMINI: "GEMINI_API_KEY",
    OPENAI: "OPENAI_API_KEY",
    ANTHROPIC: "ANTHROPIC_API_KEY",
}

# google-generativeai keeps its API key in process-wide state.
_gemini_lock = threading.Lock()
_gemini_configured_key: Optional[str] = None


def require_api_key(config: ProviderConfig, provider: str) -> str:
    """Return the provider's API key or raise MissingCredentialError."""
    api_key = config.api_key_for(provider)
    if not api_key:
        raise MissingCredentialError(
            f"{_ENV_NAMES.get(provider, provider)} not configured.", provider=provider
        )
    return api_key


def configure_gemini(api_key: str) -> None:
    """Point the Gemini SDK at `api_key`, reconfiguring only when the key changes."""
    global _gemini_configured_key
    with _gemini_lock:
        if api_key == _gemini_configured_key:
            return
        genai.configure(api_key=api_key)
        _gemini_configured_key = api_key
        logger.info("Configured Gemini SDK with a new API key")


class AIClientFactory:
    """Factory for creating provider SDK clients."""

    @staticmethod
    def create_openai_client(
        config: ProviderConfig,
        timeout: Optional[float] = None,
    ) -> OpenAI:
        """Create an OpenAI client with retries disabled."""
        client_kwargs: Dict[str, Any] = {
            "api_key": require_api_key(config, OPENAI),
            "timeout": timeout or config.timeout or DEFAULT_TIMEOUT,
            "max_retries": 0,
        }
        logger.debug("Creating OpenAI client (timeout=%ss)", client_kwargs["timeout"])
        return OpenAI(**client_kwargs)

    @staticmethod
    def create_anthropic_client(
        config: ProviderConfig,
        timeout: Optional[float] = None,
    ) -> Anthropic:
        """Create an Anthropic client with retries disabled."""
        client_kwargs: Dict[str, Any] = {
            "api_key": require_api_key(config, ANTHROPIC),
            "timeout": timeout or config.timeout or DEFAULT_TIMEOUT,
            "max_retries": 0,
        }
        logger.debug("Creating Anthropic client (timeout=%ss)", client_kwargs["timeout"])
        return Anthropic(**client_kwargs)

    @staticmethod
    def create_gemini_model(
        config: ProviderConfig,
        system_instruction: Optional[str] = None,
    ) -> "genai.GenerativeModel":
        """Create a Gemini model bound to the configured key and parameters."""
        configure_gemini(require_api_key(config, GEMINI))
        return genai.GenerativeModel(
            model_name=config.model_for(GEMINI) or "gemini-pro",
            system_instruction=system_instruction,
            generation_config=genai.GenerationConfig(
                max_output_tokens=config.max_tokens,
                temperature=config.temperature,
            ),
        )
