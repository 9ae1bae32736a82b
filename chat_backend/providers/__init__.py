"""Provider factory for the supported text-generation endpoints."""

from chat_backend.providers.base import BaseProvider


def create_provider(provider_type: str = "gemini") -> BaseProvider:
    """Factory function to create a provider from the current configuration.

    Args:
        provider_type: Type of provider to create ("gemini" or "ollama")

    Returns:
        BaseProvider instance. A Gemini provider without an API key is still
        returned; its ``configured`` flag is False.

    Raises:
        ValueError: If provider_type is not supported
    """
    from chat_backend.config import Config

    provider_type = provider_type.lower()

    if provider_type == "gemini":
        from chat_backend.providers.gemini import GeminiProvider
        return GeminiProvider(
            api_key=Config.get_api_key(),
            model=Config.GEMINI_MODEL,
            base_url=Config.GEMINI_BASE_URL,
            timeout=Config.REQUEST_TIMEOUT_SECONDS,
        )
    elif provider_type == "ollama":
        from chat_backend.providers.ollama import OllamaProvider
        return OllamaProvider(
            base_url=Config.OLLAMA_URL,
            model=Config.OLLAMA_MODEL,
            timeout=Config.REQUEST_TIMEOUT_SECONDS,
        )
    else:
        raise ValueError(
            f"Unsupported provider type: '{provider_type}'. "
            f"Supported types are: 'gemini', 'ollama'"
        )


__all__ = ["create_provider", "BaseProvider"]
