from __future__ import annotations

import asyncio

import httpx

from checkpoint.adapters.http_transport import USER_AGENT, send, timeout_extensions
from checkpoint.config import CheckpointConfig
from checkpoint.models import ReportParams
from checkpoint.signature import SignatureStore, signature_or_sentinel


class HttpReportGateway:
    def __init__(
        self,
        config: CheckpointConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config if config is not None else CheckpointConfig.from_env()
        self._client = client

    def build_request(self, params: ReportParams) -> httpx.Request:
        return httpx.Request(
            "POST",
            f"{self._config.base_url}/telemetry/{params.product}",
            content=params.model_dump_json().encode("utf-8"),
            headers={"Content-Type": "application/json", "User-Agent": USER_AGENT},
            extensions=timeout_extensions(self._config.timeout),
        )

    async def report(self, params: ReportParams) -> None:
        if self._config.disabled:
            return

        if not params.signature and params.signature_file is not None:
            store = SignatureStore(params.signature_file)
            signature = await asyncio.to_thread(signature_or_sentinel, store)
            params = params.model_copy(update={"signature": signature})

        await send(self.build_request(params), self._client)
