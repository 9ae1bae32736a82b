from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from chat_backend.errors import MalformedResponseError
from chat_backend.prompt import GenerateRequest, GenerateResponse, require_structured
from chat_backend.providers.base import BaseProvider

# Gemini Developer API (AI Studio) REST base
DEFAULT_GEMINI_BASE = "https://generativelanguage.googleapis.com"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"


def build_payload(request: GenerateRequest) -> Dict[str, Any]:
    """Request body for generateContent. The system instruction goes out as ``{"parts": [...]}``."""
    instruction = require_structured(request.system_instruction)
    return {
        "systemInstruction": instruction.to_dict(),
        "contents": [
            {"role": "user", "parts": [{"text": request.user_text}]}
        ],
        "generationConfig": {
            "temperature": request.temperature,
            "maxOutputTokens": request.max_output_tokens,
        },
    }


def extract_text(data: Dict[str, Any]) -> str:
    feedback = data.get("promptFeedback")
    if feedback is not None and not isinstance(feedback, dict):
        raise MalformedResponseError("Error: The model returned a response that could not be read.")
    if feedback and feedback.get("blockReason"):
        raise MalformedResponseError(
            "I cannot respond to that prompt due to safety filters. Please try rephrasing your question."
        )

    candidates = data.get("candidates") or []
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        raise MalformedResponseError("Error: The model returned no candidates.")

    content = candidates[0].get("content") or {}
    if not isinstance(content, dict):
        raise MalformedResponseError("Error: The model returned a response that could not be read.")
    parts = content.get("parts") or []
    if not isinstance(parts, list):
        raise MalformedResponseError("Error: The model returned a response that could not be read.")

    text = "".join([p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)])
    if not text.strip():
        raise MalformedResponseError("Error: The model returned an empty response.")
    return text


class GeminiProvider(BaseProvider):
    """Google Gemini generateContent over REST."""

    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_GEMINI_MODEL,
        base_url: str = DEFAULT_GEMINI_BASE,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(timeout=timeout, client=client)
        self.api_key = (api_key or "").strip()
        self.model = model.strip()
        self.base_url = base_url.rstrip("/")

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def url(self) -> str:
        # Gemini REST: POST /v1beta/models/{model}:generateContent
        return f"{self.base_url}/v1beta/models/{self.model}:generateContent"

    async def generate(self, request: GenerateRequest) -> GenerateResponse:
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }
        data = await self._post_json(self.url, build_payload(request), headers=headers)
        return GenerateResponse(text=extract_text(data))

    def _status_message(self, status_code: int, detail: str) -> str:
        if status_code in (401, 403):
            return (
                "Error: Invalid or missing API key. Please check your GEMINI_API_KEY setting. "
                "Get your API key from: https://aistudio.google.com/app/apikey"
            )
        if status_code == 404:
            return f"Error: Model '{self.model}' not found. Please check your GEMINI_MODEL setting."
        return super()._status_message(status_code, detail)
