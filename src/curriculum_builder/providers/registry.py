# resolves configured provider names to live provider instances
import logging
from enum import Enum
from typing import List, Optional, Tuple

from .base import GenerationProvider
from .mock import MockProvider
from .ollama import OllamaProvider
from ..config import Settings, get_settings
from ..llm_service import OllamaLLMService

logger = logging.getLogger(__name__)


class ProviderVariant(str, Enum):
    DETERMINISTIC = "mock"
    GENERATIVE = "ollama"


_ALIASES = {
    "mock": ProviderVariant.DETERMINISTIC,
    "deterministic": ProviderVariant.DETERMINISTIC,
    "ollama": ProviderVariant.GENERATIVE,
    "generative": ProviderVariant.GENERATIVE,
}


# map a provider name onto a variant, unknown names fall back to the mock
def variant_for(name: str) -> ProviderVariant:
    variant = _ALIASES.get(name.strip().lower())
    if variant is None:
        logger.warning(f"Unknown AI provider '{name}', falling back to {ProviderVariant.DETERMINISTIC.value}")
        return ProviderVariant.DETERMINISTIC
    return variant


# build a fresh provider for a variant
def construct(variant: ProviderVariant, settings: Optional[Settings] = None) -> GenerationProvider:
    settings = settings or get_settings()
    if variant is ProviderVariant.GENERATIVE:
        return OllamaProvider(OllamaLLMService(
            base_url=settings.OLLAMA_BASE_URL,
            model=settings.OLLAMA_MODEL,
            temperature=settings.OLLAMA_TEMPERATURE,
            timeout=settings.OLLAMA_TIMEOUT_SECONDS,
        ))
    return MockProvider(delay_seconds=settings.MOCK_DELAY_SECONDS)


class ProviderRegistry:
    """Factory with a single cached provider slot.

    The slot holds the last constructed (variant, instance) pair and is
    replaced wholesale when a different variant is requested. Access is not
    synchronized: two threads resolving the same name at once may both
    construct, which only wastes one construction.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._slot: Optional[Tuple[ProviderVariant, GenerationProvider]] = None

    def resolve(self, name: Optional[str] = None) -> GenerationProvider:
        variant = variant_for(name or self.settings.AI_PROVIDER)

        slot = self._slot
        if slot is not None and slot[0] is variant:
            return slot[1]

        logger.info(f"Creating AI provider: {variant.value}")
        provider = construct(variant, self.settings)
        self._slot = (variant, provider)
        return provider

    def reset(self) -> None:
        self._slot = None

    @staticmethod
    def available_providers() -> List[str]:
        return [variant.value for variant in ProviderVariant]


# global instance for singleton pattern
provider_registry = None


# get or create the global provider registry
def get_provider_registry() -> ProviderRegistry:
    """Get or create the global provider registry"""
    global provider_registry
    if provider_registry is None:
        provider_registry = ProviderRegistry()
    return provider_registry
