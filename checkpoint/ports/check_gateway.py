from __future__ import annotations

from typing import Protocol

from checkpoint.models import CheckParams, CheckResponse


class CheckGateway(Protocol):
    async def check(self, params: CheckParams) -> CheckResponse: ...
