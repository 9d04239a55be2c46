"""Tests for provider resolution and the single-slot cache."""

import pytest

from curriculum_builder.config import Settings
from curriculum_builder.providers import (
    MockProvider, OllamaProvider, ProviderRegistry, ProviderVariant, construct, get_provider_registry, variant_for,
)


def test_resolve_same_name_returns_cached_instance(registry):
    assert registry.resolve("mock") is registry.resolve("mock")


def test_resolve_is_case_insensitive(registry):
    first = registry.resolve("MOCK")
    assert isinstance(first, MockProvider)
    assert registry.resolve("Mock") is first


def test_resolve_different_name_replaces_slot(registry):
    mock = registry.resolve("mock")
    ollama = registry.resolve("ollama")

    assert isinstance(ollama, OllamaProvider)
    assert ollama is not mock
    assert registry.resolve("mock") is not mock


def test_reset_forces_new_instance(registry):
    first = registry.resolve("mock")
    registry.reset()
    assert registry.resolve("mock") is not first


def test_unknown_name_falls_back_to_mock(registry):
    assert isinstance(registry.resolve("gpt-42"), MockProvider)


def test_default_comes_from_settings():
    registry = ProviderRegistry(Settings(_env_file=None, AI_PROVIDER="Ollama"))
    assert registry.resolve().identify() == "ollama"


@pytest.mark.parametrize("name,variant", [
    ("mock", ProviderVariant.DETERMINISTIC),
    ("deterministic", ProviderVariant.DETERMINISTIC),
    (" OLLAMA ", ProviderVariant.GENERATIVE),
    ("generative", ProviderVariant.GENERATIVE),
    ("", ProviderVariant.DETERMINISTIC),
])
def test_variant_for(name, variant):
    assert variant_for(name) is variant


def test_construct_uses_settings():
    settings = Settings(_env_file=None, OLLAMA_MODEL="mistral", OLLAMA_BASE_URL="http://ollama:11434/")
    provider = construct(ProviderVariant.GENERATIVE, settings)

    assert provider.llm_service.model == "mistral"
    assert provider.llm_service.base_url == "http://ollama:11434"


def test_construct_returns_new_instances(settings):
    assert construct(ProviderVariant.DETERMINISTIC, settings) is not construct(ProviderVariant.DETERMINISTIC, settings)


def test_identify_names_are_distinct(settings):
    names = {construct(variant, settings).identify().lower() for variant in ProviderVariant}
    assert names == set(ProviderRegistry.available_providers())


def test_global_registry_is_shared():
    assert get_provider_registry() is get_provider_registry()
