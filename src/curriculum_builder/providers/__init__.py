from .base import GenerationProvider, FragmentCallback
from .mock import MockProvider
from .ollama import OllamaProvider
from .registry import ProviderRegistry, ProviderVariant, construct, get_provider_registry, variant_for

__all__ = [
    "GenerationProvider",
    "FragmentCallback",
    "MockProvider",
    "OllamaProvider",
    "ProviderRegistry",
    "ProviderVariant",
    "construct",
    "get_provider_registry",
    "variant_for",
]
