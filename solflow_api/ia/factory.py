# solflow_api/ia/factory.py
"""
Factory Pattern: builds the configured completion provider.
"""
from typing import Optional

from ..config import settings
from .providers import CompletionProviderStrategy, GeminiProvider, MockCompletionProvider, OpenAIProvider


class CompletionProviderFactory:
    """Creates providers from Settings (IA_PROVIDER, OPENAI_API_KEY, GEMINI_API_KEY, ...)."""

    @staticmethod
    def create_provider(
        provider_type: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
    ) -> CompletionProviderStrategy:
        """
        Args:
            provider_type: "mock", "openai" or "gemini". Defaults to settings.ia_provider
            api_key: Overrides the key from settings
            model: Overrides the default model from settings

        Raises:
            ValueError: Unknown provider type or missing API key
        """
        provider_type = (provider_type or settings.ia_provider).lower()

        if provider_type == "mock":
            return MockCompletionProvider()

        elif provider_type == "openai":
            return OpenAIProvider(
                api_key=api_key or settings.openai_api_key,
                model=model or settings.openai_model,
                timeout=settings.http_timeout,
            )

        elif provider_type == "gemini":
            return GeminiProvider(
                api_key=api_key or settings.gemini_api_key,
                model=model or settings.gemini_model,
            )

        else:
            raise ValueError(
                f"Unknown provider type: {provider_type}. "
                f"Valid types: {', '.join(CompletionProviderFactory.get_available_providers())}"
            )

    @staticmethod
    def get_available_providers() -> list[str]:
        return ["mock", "openai", "gemini"]
