from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import contextlib
from datetime import UTC, datetime
import logging
from pathlib import Path
import threading

from rich.console import Console

from checkpoint import paths
from checkpoint.adapters.http_check_gateway import HttpCheckGateway
from checkpoint.adapters.http_report_gateway import HttpReportGateway
from checkpoint.config import CheckpointConfig
from checkpoint.models import CheckParams, CheckResponse, ReportParams
from checkpoint.ports.check_gateway import CheckGateway
from checkpoint.scheduler import (
    CheckCallback,
    IntervalHandle,
    check_interval,
    deliver,
)
from checkpoint.signature import SignatureStore, signature_or_sentinel
from checkpoint.versions import is_outdated

logger = logging.getLogger(__name__)

VERSION_CHECK_INTERVAL_SECONDS = 24 * 60 * 60

_stderr = Console(stderr=True)


def _print_notice(message: str) -> None:
    _stderr.print(message, markup=False, highlight=False)


class UsageClient:
    """Background version checks and usage reports for an embedding app.

    ``start`` returns immediately. All network and file work happens on a
    daemon thread with its own event loop, and every failure there is
    discarded in ``_discard_errors`` so the host application never sees it.
    """

    def __init__(
        self,
        config: CheckpointConfig | None = None,
        *,
        check_gateway: CheckGateway | None = None,
        report_gateway: HttpReportGateway | None = None,
        notify: Callable[[str], None] = _print_notice,
        interval: float = VERSION_CHECK_INTERVAL_SECONDS,
        cache_file: Path | None = None,
    ) -> None:
        self._config = config if config is not None else CheckpointConfig.from_env()
        self._check_gateway = check_gateway or HttpCheckGateway(self._config)
        self._report_gateway = report_gateway or HttpReportGateway(self._config)
        self._notify = notify
        self._interval = interval
        self._cache_file = cache_file

        self._lock = threading.Lock()
        self._stop_requested = False
        self._threads: list[threading.Thread] = []
        self._schedules: list[tuple[asyncio.AbstractEventLoop, IntervalHandle]] = []

    def start(self, name: str, version: str) -> None:
        if self._config.disabled:
            logger.debug("Checkpoint disabled, not starting for %s", name)
            return

        started_at = datetime.now(UTC)
        thread = threading.Thread(
            target=self._run_in_background,
            args=(name, version, started_at),
            name=f"checkpoint-{name}",
            daemon=True,
        )
        with self._lock:
            self._prune()
            self._stop_requested = False
            self._threads.append(thread)
        thread.start()

    def stop(self, timeout: float | None = None) -> None:
        with self._lock:
            self._stop_requested = True
            schedules = list(self._schedules)
            threads = list(self._threads)

        for loop, handle in schedules:
            # the loop is closed once its thread has finished
            with contextlib.suppress(RuntimeError):
                loop.call_soon_threadsafe(handle.stop)
        for thread in threads:
            thread.join(timeout)
        with self._lock:
            self._prune()

    def _prune(self) -> None:
        self._threads = [t for t in self._threads if t.is_alive()]
        self._schedules = [
            (loop, handle) for loop, handle in self._schedules if not loop.is_closed()
        ]

    def _run_in_background(
        self, name: str, version: str, started_at: datetime
    ) -> None:
        asyncio.run(_discard_errors(self._run(name, version, started_at), "startup"))

    async def _run(self, name: str, version: str, started_at: datetime) -> None:
        signature_path = await asyncio.to_thread(paths.signature_file, name)
        cache_path = self._cache_file or await asyncio.to_thread(paths.cache_file, name)
        signature = await asyncio.to_thread(
            signature_or_sentinel, SignatureStore(signature_path)
        )

        params = CheckParams(
            product=name, version=version, signature=signature, cache_file=cache_path
        )
        callback = self._check_callback(name, version)

        handle = check_interval(
            self._check_gateway, params, self._interval, callback, config=self._config
        )
        self._register(handle)

        report = ReportParams(
            signature=signature,
            product=name,
            version=version,
            start_time=started_at,
            end_time=datetime.now(UTC),
            signature_file=signature_path,
        )
        immediate = asyncio.create_task(
            self._report_then_check(report, params, callback)
        )
        await handle.wait()
        await immediate

    def _register(self, handle: IntervalHandle) -> None:
        with self._lock:
            self._schedules.append((asyncio.get_running_loop(), handle))
            if self._stop_requested:
                handle.stop()

    async def _report_then_check(
        self, report: ReportParams, params: CheckParams, callback: CheckCallback
    ) -> None:
        await _discard_errors(self._report_gateway.report(report), "report")

        response: CheckResponse | None = None
        error: Exception | None = None
        try:
            response = await self._check_gateway.check(params)
        except Exception as exc:
            error = exc
        deliver(callback, response, error)

    def _check_callback(self, product: str, version: str) -> CheckCallback:
        def callback(response: CheckResponse | None, error: Exception | None) -> None:
            if error is not None or response is None:
                logger.debug("Version check for %s failed: %s", product, error)
                return
            # cached flags may predate an upgrade of the host
            if is_outdated(response.current_version, version):
                self._notify(
                    f"A new version of {product} is available. "
                    f"Please visit {response.current_download_url}."
                )

        return callback


async def _discard_errors(awaitable: Awaitable[object], what: str) -> None:
    """The single place where background failures are dropped on purpose."""
    try:
        await awaitable
    except Exception:
        logger.debug("Checkpoint %s failed", what, exc_info=True)


def start(name: str, version: str) -> UsageClient:
    client = UsageClient()
    client.start(name, version)
    return client
