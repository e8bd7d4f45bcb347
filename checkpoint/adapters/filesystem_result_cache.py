from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
from pathlib import Path
import time

from pydantic import ValidationError

from checkpoint.io import atomic_write_text
from checkpoint.models import CacheRecord, CheckResponse
from checkpoint.ports.result_cache import ResultCache

logger = logging.getLogger(__name__)


class FileSystemResultCache(ResultCache):
    def __init__(
        self,
        cache_file: Path | str,
        get_current_timestamp: Callable[[], float] = time.time,
    ) -> None:
        self._cache_file = Path(cache_file)
        self._get_current_timestamp = get_current_timestamp

    @property
    def cache_file(self) -> Path:
        return self._cache_file

    async def read(self) -> CheckResponse | None:
        try:
            content = await asyncio.to_thread(
                self._cache_file.read_text, encoding="utf-8"
            )
        except (OSError, UnicodeDecodeError):
            return None

        try:
            record = CacheRecord.model_validate_json(content)
        except ValidationError:
            logger.debug("Ignoring unreadable cache file %s", self._cache_file)
            return None

        if record.expiry <= self._get_current_timestamp():
            return None
        return record.response

    async def write(self, response: CheckResponse, ttl_seconds: float) -> None:
        if ttl_seconds <= 0:
            return None
        record = CacheRecord(
            expiry=self._get_current_timestamp() + ttl_seconds, response=response
        )
        try:
            await asyncio.to_thread(
                atomic_write_text, self._cache_file, record.model_dump_json()
            )
        except OSError:
            logger.debug("Cannot write cache file %s", self._cache_file, exc_info=True)
            return None
