"""Errors raised by the AI provider layer."""

from typing import Optional


class AIProviderError(Exception):
    """Base class for text generation failures."""

    def __init__(self, message: str, provider: Optional[str] = None) -> None:
        super().__init__(message)
        self.provider = provider


class UnknownProviderError(AIProviderError):
    """The configured provider name has no adapter."""


class MissingCredentialError(AIProviderError):
    """No API key is configured for the selected provider."""


class TransportError(AIProviderError):
    """The request never got a provider response (timeout, connection error)."""


class ProviderError(AIProviderError):
    """The provider answered with an error or an unusable response."""
