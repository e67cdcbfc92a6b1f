"""Test doubles for the translation layer."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from core.trans.interface import CompletionInterface, EngineAttributes

if TYPE_CHECKING:
    from models.config_models import Config
    from models.translation_models import CompletionRequest


class DummyEngine(CompletionInterface):
    """Scripted completion engine.

    Responses are consumed in order; the last one repeats. An Exception instance is raised instead of returned.
    """

    def __init__(self, responses: list[str | Exception] | None = None) -> None:
        super().__init__()
        self.responses: list[str | Exception] = list(responses or ["translated"])
        self.requests: list[CompletionRequest] = []
        self.gate: asyncio.Event | None = None
        self.closed: bool = False

    @staticmethod
    def fetch_engine_name() -> str:
        return ""

    @property
    def is_available(self) -> bool:
        return True

    def initialize(self, config: Config) -> None:
        self.engine_attributes = EngineAttributes(name="dummy", model=config.TRANSLATION.MODEL)

    async def complete(self, request: CompletionRequest) -> str:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        response: str | Exception = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True


class SleepRecorder:
    """Replacement for asyncio.sleep that records the requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


