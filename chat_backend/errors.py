"""Exception types raised while handling a chat turn."""

from __future__ import annotations


CREDENTIAL_MISSING = "credential missing"


class ChatError(Exception):
    """Base exception for the chat backend."""


class ValidationError(ChatError):
    """Raised when submitted text is empty or whitespace only."""


class ConfigurationError(ChatError):
    """Raised when the provider credential is not configured."""

    def __init__(self, message: str = CREDENTIAL_MISSING):
        super().__init__(message)


class TransportError(ChatError):
    """Raised when the endpoint cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(TransportError):
    """Raised when a successful response carries no generated text."""
