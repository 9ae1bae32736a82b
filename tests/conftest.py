from __future__ import annotations

import asyncio
from typing import Callable

import pytest

from chat_backend.prompt import GenerateRequest, GenerateResponse
from chat_backend.providers.base import BaseProvider


class FakeProvider(BaseProvider):
    """In-process provider; ``handler`` decides the reply for each request."""

    name = "fake"

    def __init__(self, handler: Callable[[GenerateRequest], str] | None = None, configured: bool = True) -> None:
        super().__init__()
        self.handler = handler or (lambda request: f"echo: {request.user_text}")
        self._configured = configured
        self.requests: list[GenerateRequest] = []
        self.gate: asyncio.Event | None = None

    @property
    def configured(self) -> bool:
        return self._configured

    async def generate(self, request: GenerateRequest) -> GenerateResponse:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        return GenerateResponse(text=self.handler(request))


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()
