from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from chat_backend.errors import MalformedResponseError
from chat_backend.prompt import GenerateRequest, GenerateResponse, require_structured
from chat_backend.providers.base import BaseProvider

DEFAULT_LOCAL_URL = "http://localhost:11434"
DEFAULT_LOCAL_MODEL = "gemma3:4b"


def build_payload(model: str, request: GenerateRequest) -> Dict[str, Any]:
    instruction = require_structured(request.system_instruction)
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": instruction.text},
            {"role": "user", "content": request.user_text},
        ],
        "options": {
            "temperature": request.temperature,
            "num_predict": request.max_output_tokens,
        },
        "stream": False,
    }


class OllamaProvider(BaseProvider):
    """Local Ollama server via /api/chat."""

    name = "ollama"

    def __init__(
        self,
        base_url: str = DEFAULT_LOCAL_URL,
        model: str = DEFAULT_LOCAL_MODEL,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(timeout=timeout, client=client)
        self.base_url = base_url.rstrip("/")
        self.model = model

    @property
    def configured(self) -> bool:
        # no credential needed, it's local
        return True

    async def generate(self, request: GenerateRequest) -> GenerateResponse:
        data = await self._post_json(f"{self.base_url}/api/chat", build_payload(self.model, request))
        message = data.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content.strip():
            raise MalformedResponseError("Error: The model returned an empty response.")
        return GenerateResponse(text=content)

    def _connection_message(self) -> str:
        return f"Error: Cannot connect to Ollama at {self.base_url}. Please ensure Ollama is running."

    def _status_message(self, status_code: int, detail: str) -> str:
        if status_code == 404:
            return (
                f"Error: Model '{self.model}' not found. Please check your OLLAMA_MODEL setting "
                f"or install the model with: ollama pull {self.model}"
            )
        return super()._status_message(status_code, detail)
