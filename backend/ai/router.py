"""Routes generation requests to the configured AI provider."""

import logging
import time
from typing import Any, Dict, Iterable, Optional

from backend.ai.client_factory import AIClientFactory
from backend.ai.config import ProviderConfigSource
from backend.ai.errors import AIProviderError, UnknownProviderError
from backend.ai.providers import DEFAULT_ADAPTERS, ProviderAdapter

logger = logging.getLogger(__name__)


class ProviderRouter:
    """Sends a prompt to whichever provider the current config selects.

    No retries happen here; callers that want them wrap generate().
    """

    def __init__(
        self,
        config_source: ProviderConfigSource,
        adapters: Optional[Iterable[ProviderAdapter]] = None,
        factory: Any = AIClientFactory,
    ) -> None:
        self._config_source = config_source
        if adapters is None:
            adapters = [adapter_cls(factory) for adapter_cls in DEFAULT_ADAPTERS]
        self._adapters: Dict[str, ProviderAdapter] = {a.name: a for a in adapters}

    @property
    def providers(self) -> list:
        return sorted(self._adapters)

    def generate(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """Generate text for a prompt.

        Raises:
            UnknownProviderError: The configured provider has no adapter.
            MissingCredentialError: No API key for the configured provider.
            TransportError: Timeout or connection failure.
            ProviderError: The provider returned an error or no text.
        """
        config = self._config_source.current
        adapter = self._adapters.get(config.provider)
        if adapter is None:
            raise UnknownProviderError(
                f"Unknown AI provider '{config.provider}'", provider=config.provider
            )

        start_time = time.time()
        try:
            text = adapter.generate(prompt, system_prompt, config)
        except AIProviderError as e:
            logger.error("AI generation via %s failed: %s", adapter.name, e)
            raise

        logger.info(
            "AI generation via %s completed in %dms (%d chars)",
            adapter.name,
            round((time.time() - start_time) * 1000),
            len(text),
        )
        return text
