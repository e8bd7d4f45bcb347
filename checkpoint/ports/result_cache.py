from __future__ import annotations

from typing import Protocol

from checkpoint.models import CheckResponse


class ResultCache(Protocol):
    async def read(self) -> CheckResponse | None: ...
    async def write(self, response: CheckResponse, ttl_seconds: float) -> None: ...
