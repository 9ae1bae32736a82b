"""Abstract base class for text-generation providers."""

from abc import ABC, abstractmethod
from typing import Optional

import httpx

from chat_backend.errors import ConfigurationError, MalformedResponseError, TransportError
from chat_backend.prompt import GenerateRequest, GenerateResponse


class BaseProvider(ABC):
    """Abstract base class for all provider implementations."""

    name = "base"

    def __init__(self, timeout: Optional[float] = None, client: Optional[httpx.AsyncClient] = None):
        """Initialize shared HTTP settings.

        Args:
            timeout: Seconds before a request is abandoned, None to wait indefinitely
            client: Pre-built client to use instead of one per request
        """
        self.timeout = timeout
        self._client = client

    @property
    @abstractmethod
    def configured(self) -> bool:
        """True when the provider has everything it needs to make a call."""
        pass

    def require_configured(self):
        """Raise ConfigurationError when the provider cannot make a call."""
        if not self.configured:
            raise ConfigurationError()

    @abstractmethod
    async def generate(self, request: GenerateRequest) -> GenerateResponse:
        """Send one request and return the generated text.

        Args:
            request: Structured request built by ``build_request``

        Returns:
            GenerateResponse with the assistant's text

        Raises:
            TransportError: endpoint unreachable or answered with an error
            MalformedResponseError: success response without any text
        """
        pass

    async def _post_json(self, url: str, payload: dict, headers: Optional[dict] = None) -> dict:
        """POST ``payload`` and return the decoded JSON body, mapping failures to TransportError."""
        try:
            if self._client is not None:
                r = await self._client.post(url, json=payload, headers=headers, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    r = await client.post(url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            print(f"[{self.name.upper()}] Request timed out: {e!r}")
            raise TransportError("Error: The request timed out. Please try again.") from e
        except httpx.HTTPError as e:
            print(f"[{self.name.upper()}] Connection error: {e!r}")
            raise TransportError(self._connection_message()) from e

        if r.is_error:
            detail = self._error_detail(r)
            print(f"[{self.name.upper()}] HTTP {r.status_code}: {detail}")
            raise TransportError(self._status_message(r.status_code, detail), status_code=r.status_code)

        try:
            data = r.json()
        except ValueError as e:
            raise MalformedResponseError("Error: The model returned a response that could not be read.") from e
        if not isinstance(data, dict):
            raise MalformedResponseError("Error: The model returned a response that could not be read.")
        return data

    def _connection_message(self) -> str:
        return "Error: Network connection failed. Please check your internet connection and try again."

    def _status_message(self, status_code: int, detail: str) -> str:
        if status_code in (401, 403):
            return "Error: Invalid or missing API key. Please check your API key setting."
        if status_code == 429:
            return "Error: Rate limit exceeded. Please wait a moment and try again."
        if status_code == 404:
            return "Error: Model not found. Please check your model setting."
        return f"Error: {detail}" if detail else f"Error: The model endpoint returned HTTP {status_code}."

    @staticmethod
    def _error_detail(r: httpx.Response) -> str:
        try:
            data = r.json()
        except ValueError:
            return r.text.strip()[:300]
        if isinstance(data, dict):
            err = data.get("error")
            if isinstance(err, dict):
                return str(err.get("message", "")).strip()
            if isinstance(err, str):
                return err.strip()
        return ""
