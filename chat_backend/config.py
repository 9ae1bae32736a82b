"""Configuration management for the API key and chat settings."""

import os
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv

# config.py is in chat_backend/, .env is in project root
ENV_PATH = Path(__file__).parent.parent / ".env"
load_dotenv(ENV_PATH)


SUPPORTED_PROVIDERS = ("gemini", "ollama")

DEFAULT_SYSTEM_INSTRUCTION = """You are a friendly assistant at a hands-on coding workshop.
- Answer questions clearly and concisely
- Prefer short examples over long explanations
- Say so when you are not sure about something"""


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        print(f"[CONFIG] Ignoring invalid {name}={raw!r}, expected a number of seconds")
        return None


class Config:
    """Application configuration from environment variables."""

    # Provider selection: "gemini" or "ollama"
    CHAT_PROVIDER: str = os.getenv("CHAT_PROVIDER", "gemini")

    # Gemini settings
    GEMINI_API_KEY: Optional[str] = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    GEMINI_BASE_URL: str = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com")

    # Ollama settings (no API key needed, it's local)
    OLLAMA_URL: str = os.getenv("OLLAMA_URL", "http://localhost:11434")
    OLLAMA_MODEL: str = os.getenv("OLLAMA_MODEL", "gemma3:4b")

    # Unset means requests are never timed out
    REQUEST_TIMEOUT_SECONDS: Optional[float] = _optional_float("CHAT_REQUEST_TIMEOUT_SECONDS")

    SYSTEM_INSTRUCTION: str = os.getenv("CHAT_SYSTEM_INSTRUCTION", DEFAULT_SYSTEM_INSTRUCTION)

    # Server bind
    HOST: str = os.getenv("CHAT_HOST", "127.0.0.1")
    PORT: int = int(os.getenv("CHAT_PORT", "8010"))

    @classmethod
    def validate(cls) -> list[str]:
        """Validate configuration and return list of missing required settings."""
        missing = []

        provider = cls.CHAT_PROVIDER.lower()
        if provider not in SUPPORTED_PROVIDERS:
            # build_session falls back to Gemini for unknown providers
            missing.append(f"CHAT_PROVIDER (unsupported value '{cls.CHAT_PROVIDER}', using gemini)")
            provider = "gemini"

        if provider == "gemini" and not cls.get_api_key():
            missing.append("GEMINI_API_KEY (required when CHAT_PROVIDER=gemini)")

        return missing

    @classmethod
    def get_api_key(cls) -> Optional[str]:
        """Get the Gemini API key, checking the class attribute then the environment."""
        if cls.GEMINI_API_KEY and cls.GEMINI_API_KEY.strip():
            return cls.GEMINI_API_KEY.strip()

        key = os.getenv("GEMINI_API_KEY", "").strip()
        return key or None
