"""
LLM Manager for the external chat-completion service.

The manager is the credential holder for the whole pipeline: it is built once
from configuration and handed to every stage that can call the model. When no
credential is configured it holds no providers and every stage takes its
heuristic path.
"""

import json
import logging
import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, List, Optional

from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from ..exceptions import LLMResponseError, LLMUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_MODELS = {
    "openai": "gpt-3.5-turbo",
    "anthropic": "claude-3-haiku-20240307",
}


def resolve_env_vars(value: Optional[str]) -> Optional[str]:
    """Resolve ${VAR_NAME} references; unset variables resolve to an empty string."""
    if isinstance(value, str) and "${" in value:
        def replace_env_var(match):
            return os.getenv(match.group(1), "")

        value = re.sub(r'\$\{([^}]+)\}', replace_env_var, value)
    if isinstance(value, str):
        value = value.strip()
    return value or None


class StrategyMode(Enum):
    """Which variant a pipeline stage runs."""
    LLM = "llm"
    HEURISTIC = "heuristic"


def _reject_constant(name: str):
    # NaN and Infinity are not JSON
    raise ValueError(f"non-finite constant {name}")


def parse_json_object(text: Optional[str]) -> Dict[str, Any]:
    """Parse a completion verbatim as a JSON object."""
    if not text:
        raise LLMResponseError("Empty completion")
    try:
        data = json.loads(text.strip(), parse_constant=_reject_constant)
    except ValueError as e:
        raise LLMResponseError(f"Completion is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise LLMResponseError(f"Expected a JSON object, got {type(data).__name__}")
    return data


@dataclass
class LLMConfig:
    """Configuration for LLM providers."""
    provider: str
    model: str
    temperature: float = 0.1
    max_tokens: int = 1000
    api_key: Optional[str] = None
    base_url: Optional[str] = None

    def __post_init__(self):
        """Resolve environment variables after initialization."""
        self.api_key = resolve_env_vars(self.api_key)
        self.base_url = resolve_env_vars(self.base_url)


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    def __init__(self, config: LLMConfig):
        self.config = config
        if not config.api_key:
            raise ValueError(f"{config.provider} API key not found")

    @abstractmethod
    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate text using the LLM."""


class OpenAIProvider(LLMProvider):
    """OpenAI-compatible chat completion provider."""

    def __init__(self, config: LLMConfig):
        super().__init__(config)
        self.client = AsyncOpenAI(api_key=config.api_key, base_url=config.base_url)

    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate text using a single user message."""
        try:
            response = await self.client.chat.completions.create(
                model=self.config.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=kwargs.get("temperature", self.config.temperature),
                max_tokens=kwargs.get("max_tokens", self.config.max_tokens)
            )
            return response.choices[0].message.content
        except Exception as e:
            logger.error(f"OpenAI generation error: {e}")
            raise


class AnthropicProvider(LLMProvider):
    """Anthropic messages provider."""

    def __init__(self, config: LLMConfig):
        super().__init__(config)
        self.client = AsyncAnthropic(api_key=config.api_key, base_url=config.base_url)

    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate text using Anthropic."""
        try:
            response = await self.client.messages.create(
                model=self.config.model,
                max_tokens=kwargs.get("max_tokens", self.config.max_tokens),
                temperature=kwargs.get("temperature", self.config.temperature),
                messages=[{"role": "user", "content": prompt}]
            )
            return response.content[0].text
        except Exception as e:
            logger.error(f"Anthropic generation error: {e}")
            raise


PROVIDER_CLASSES = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
}


class LLMManager:
    """Holds the configured completion provider, if any."""

    def __init__(self, config: Dict[str, Any], api_key: Optional[str] = None):
        self.config = config
        self.providers: Dict[str, LLMProvider] = {}
        self.default_provider = config.get("llm", {}).get("default_provider", "openai")
        self._initialize_providers(api_key)

    def _initialize_providers(self, api_key_override: Optional[str]):
        """Initialize the default provider when a credential is available."""
        llm_config = self.config.get("llm", {})
        name = self.default_provider

        if name not in PROVIDER_CLASSES:
            raise ValueError(f"Unknown LLM provider: {name}")

        provider_config = llm_config.get(name, {}) or {}
        llm_settings = LLMConfig(
            provider=name,
            model=provider_config.get("model", DEFAULT_MODELS[name]),
            temperature=provider_config.get("temperature", 0.1),
            max_tokens=provider_config.get("max_tokens", 1000),
            api_key=api_key_override or provider_config.get("api_key"),
            base_url=provider_config.get("base_url")
        )

        if not llm_settings.api_key:
            logger.info("No LLM credential configured, using heuristic processing")
            return

        self.providers[name] = PROVIDER_CLASSES[name](llm_settings)
        logger.info(f"{name} provider initialized with model {llm_settings.model}")

    @property
    def is_configured(self) -> bool:
        """Whether a completion provider holds a credential."""
        return bool(self.providers)

    @property
    def mode(self) -> StrategyMode:
        """Strategy every LLM-backed stage dispatches on."""
        return StrategyMode.LLM if self.providers else StrategyMode.HEURISTIC

    async def generate(self, prompt: str, provider: Optional[str] = None, **kwargs) -> str:
        """Generate text using specified or default provider."""
        provider_name = provider or self.default_provider

        if provider_name not in self.providers:
            raise LLMUnavailableError(f"Provider {provider_name} not available")

        return await self.providers[provider_name].generate(prompt, **kwargs)

    async def generate_json(self, prompt: str, provider: Optional[str] = None, **kwargs) -> Dict[str, Any]:
        """Generate a completion and parse it as a JSON object."""
        response = await self.generate(prompt, provider=provider, **kwargs)
        return parse_json_object(response)

    def get_available_providers(self) -> List[str]:
        """Get list of available providers."""
        return list(self.providers.keys())
