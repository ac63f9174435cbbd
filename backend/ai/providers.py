"""Provider adapters for single-shot text generation.

Every adapter follows the same steps: check the credential, build the
provider-specific request, send it once, and pull the text out of the
provider's response envelope. SDK exceptions are translated into
TransportError (no response) or ProviderError (error response).
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import anthropic
import openai
from google.api_core import exceptions as google_exceptions

from backend.ai.client_factory import AIClientFactory, require_api_key
from backend.ai.config import ANTHROPIC, GEMINI, OPENAI, ProviderConfig
from backend.ai.errors import ProviderError, TransportError

logger = logging.getLogger(__name__)


class ProviderAdapter(ABC):
    """One text generation backend."""

    name: str = ""

    def __init__(self, factory: Any = AIClientFactory) -> None:
        self._factory = factory

    def generate(
        self, prompt: str, system_prompt: Optional[str], config: ProviderConfig
    ) -> str:
        require_api_key(config, self.name)
        request = self.build_request(prompt, system_prompt, config)
        response = self.send(request, system_prompt, config)
        text = self.extract_text(response)
        if not text:
            raise ProviderError(f"{self.name} returned an empty response", provider=self.name)
        return text

    @abstractmethod
    def build_request(
        self, prompt: str, system_prompt: Optional[str], config: ProviderConfig
    ) -> Dict[str, Any]:
        ...

    @abstractmethod
    def send(
        self, request: Dict[str, Any], system_prompt: Optional[str], config: ProviderConfig
    ) -> Any:
        ...

    @abstractmethod
    def extract_text(self, response: Any) -> str:
        ...


class AnthropicAdapter(ProviderAdapter):
    name = ANTHROPIC

    def build_request(self, prompt, system_prompt, config):
        request: Dict[str, Any] = {
            "model": config.model_for(ANTHROPIC),
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            request["system"] = system_prompt
        return request

    def send(self, request, system_prompt, config):
        client = self._factory.create_anthropic_client(config, timeout=config.timeout)
        try:
            return client.messages.create(**request)
        except anthropic.APIConnectionError as e:
            raise TransportError(f"Anthropic request failed: {e}", provider=self.name) from e
        except anthropic.APIStatusError as e:
            raise ProviderError(e.message, provider=self.name) from e

    def extract_text(self, response):
        blocks = getattr(response, "content", None) or []
        return "".join(
            getattr(block, "text", "") for block in blocks if getattr(block, "type", None) == "text"
        )


class OpenAIAdapter(ProviderAdapter):
    name = OPENAI

    def build_request(self, prompt, system_prompt, config):
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return {
            "model": config.model_for(OPENAI),
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
            "messages": messages,
        }

    def send(self, request, system_prompt, config):
        client = self._factory.create_openai_client(config, timeout=config.timeout)
        try:
            return client.chat.completions.create(**request)
        except openai.APIConnectionError as e:
            raise TransportError(f"OpenAI request failed: {e}", provider=self.name) from e
        except openai.APIStatusError as e:
            raise ProviderError(e.message, provider=self.name) from e

    def extract_text(self, response):
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        return choices[0].message.content or ""


class GeminiAdapter(ProviderAdapter):
    name = GEMINI

    def build_request(self, prompt, system_prompt, config):
        # Model, token limit and temperature are bound on the model object.
        return {
            "contents": prompt,
            "request_options": {"timeout": config.timeout, "retry": None},
        }

    def send(self, request, system_prompt, config):
        model = self._factory.create_gemini_model(config, system_instruction=system_prompt)
        try:
            return model.generate_content(**request)
        except (google_exceptions.DeadlineExceeded, google_exceptions.ServiceUnavailable) as e:
            raise TransportError(f"Gemini request failed: {e}", provider=self.name) from e
        except google_exceptions.GoogleAPIError as e:
            raise ProviderError(getattr(e, "message", None) or str(e), provider=self.name) from e

    def extract_text(self, response):
        try:
            return response.text
        except ValueError as e:
            # Raised when the candidate was blocked or carries no text part.
            feedback = getattr(response, "prompt_feedback", None)
            raise ProviderError(
                f"Gemini returned no text: {feedback or e}", provider=self.name
            ) from e


DEFAULT_ADAPTERS = (AnthropicAdapter, OpenAIAdapter, GeminiAdapter)
