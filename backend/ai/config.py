"""Provider configuration for text generation.

ProviderConfig is immutable. Changes are made by building a new config and
publishing it to the ProviderConfigSource, so a request that has already read
the config keeps a consistent view for its whole duration.
"""

import threading
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from backend.settings import Settings

GEMINI = "gemini"
OPENAI = "openai"
ANTHROPIC = "anthropic"

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class ProviderConfig:
    """Selected provider plus credentials and generation parameters."""

    provider: str = GEMINI
    api_keys: Dict[str, Optional[str]] = field(default_factory=dict)
    models: Dict[str, str] = field(default_factory=dict)
    max_tokens: int = 4096
    temperature: float = 0.7
    timeout: float = DEFAULT_TIMEOUT

    def api_key_for(self, provider: str) -> Optional[str]:
        return self.api_keys.get(provider) or None

    def model_for(self, provider: str) -> Optional[str]:
        return self.models.get(provider)

    def with_provider(self, provider: str) -> "ProviderConfig":
        return replace(self, provider=provider)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ProviderConfig":
        return cls(
            provider=settings.ai_provider,
            api_keys={
                GEMINI: settings.gemini_api_key,
                OPENAI: settings.openai_api_key,
                ANTHROPIC: settings.anthropic_api_key,
            },
            models={
                GEMINI: settings.gemini_model,
                OPENAI: settings.openai_model,
                ANTHROPIC: settings.anthropic_model,
            },
            max_tokens=settings.ai_max_tokens,
            temperature=settings.ai_temperature,
            timeout=settings.ai_timeout,
        )


class ProviderConfigSource:
    """Holds the current ProviderConfig; replaced whole, never mutated."""

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config
        self._lock = threading.Lock()

    @property
    def current(self) -> ProviderConfig:
        with self._lock:
            return self._config

    def publish(self, config: ProviderConfig) -> None:
        with self._lock:
            self._config = config
