"""AI text generation: provider config, client factory and routing."""

from backend.ai.client_factory import AIClientFactory
from backend.ai.config import ProviderConfig, ProviderConfigSource
from backend.ai.errors import (
    AIProviderError,
    MissingCredentialError,
    ProviderError,
    TransportError,
    UnknownProviderError,
)
from backend.ai.router import ProviderRouter

__all__ = [
    "AIClientFactory",
    "AIProviderError",
    "MissingCredentialError",
    "ProviderConfig",
    "ProviderConfigSource",
    "ProviderError",
    "ProviderRouter",
    "TransportError",
    "UnknownProviderError",
]
