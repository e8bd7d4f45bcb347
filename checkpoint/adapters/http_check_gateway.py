from __future__ import annotations

from collections.abc import Callable
import logging
from pathlib import Path
import re

import httpx
from pydantic import ValidationError

from checkpoint.adapters.filesystem_result_cache import FileSystemResultCache
from checkpoint.adapters.http_transport import USER_AGENT, send, timeout_extensions
from checkpoint.config import CheckpointConfig
from checkpoint.errors import CheckpointDecodeError, CheckpointErrorCause
from checkpoint.models import CheckParams, CheckResponse
from checkpoint.ports.check_gateway import CheckGateway
from checkpoint.ports.result_cache import ResultCache
from checkpoint.versions import is_outdated

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 6 * 60 * 60

_MAX_AGE_PATTERN = re.compile(r"max-age\s*=\s*(\d+)", re.IGNORECASE)


class HttpCheckGateway(CheckGateway):
    def __init__(
        self,
        config: CheckpointConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        cache_factory: Callable[[Path], ResultCache] = FileSystemResultCache,
    ) -> None:
        self._config = config if config is not None else CheckpointConfig.from_env()
        self._client = client
        self._cache_factory = cache_factory

    def build_request(self, params: CheckParams) -> httpx.Request:
        return httpx.Request(
            "GET",
            f"{self._config.base_url}/check/{params.product}",
            params={
                "version": params.version,
                "signature": params.signature,
                "type": params.type,
                "arch": params.arch,
                "os": params.os,
            },
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            extensions=timeout_extensions(self._config.timeout),
        )

    async def check(self, params: CheckParams) -> CheckResponse:
        if self._config.disabled:
            return CheckResponse()

        cache = self._cache_factory(params.cache_file) if params.cache_file else None
        if cache is not None and (cached := await cache.read()) is not None:
            return cached

        response = await send(self.build_request(params), self._client)
        result = _decode(response, params.version)

        if cache is not None:
            await cache.write(result, _cache_ttl(response))
        return result


def _decode(response: httpx.Response, running_version: str) -> CheckResponse:
    try:
        result = CheckResponse.model_validate_json(response.content)
    except ValidationError as exc:
        raise CheckpointDecodeError(
            cause=CheckpointErrorCause.INVALID_RESPONSE
        ) from exc

    outdated = is_outdated(result.current_version, running_version)
    if outdated != result.outdated:
        logger.debug(
            "Overriding server outdated=%s for %s against %s",
            result.outdated,
            result.current_version,
            running_version,
        )
    return result.model_copy(update={"outdated": outdated})


def _cache_ttl(response: httpx.Response) -> int:
    cache_control = response.headers.get("Cache-Control", "")
    if match := _MAX_AGE_PATTERN.search(cache_control):
        return int(match.group(1))
    return DEFAULT_CACHE_TTL_SECONDS
