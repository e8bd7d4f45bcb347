"""Jittered periodic version checks.

A fleet of installations started at the same moment would otherwise hit the
checkpoint service in lockstep, so the first tick waits a random stagger
around the interval before settling into a fixed period.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
import random

from checkpoint.config import CheckpointConfig
from checkpoint.models import CheckParams, CheckResponse
from checkpoint.ports.check_gateway import CheckGateway

logger = logging.getLogger(__name__)

CheckCallback = Callable[[CheckResponse | None, Exception | None], None]


def random_stagger(interval: float, spread: int = 2) -> float:
    """Return a delay uniformly drawn from ``interval +/- interval / (2 * spread)``.

    With a 24 hour interval and ``spread=2`` the result lies in [18h, 30h].
    """
    window = interval / spread
    return interval - window / 2 + random.uniform(0, window)


class IntervalHandle:
    def __init__(
        self, task: asyncio.Task[None] | None, stop_event: asyncio.Event
    ) -> None:
        self._task = task
        self._stop_event = stop_event

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        self._stop_event.set()

    async def wait(self) -> None:
        if self._task is not None:
            await self._task


def check_interval(
    gateway: CheckGateway,
    params: CheckParams,
    interval: float,
    callback: CheckCallback,
    *,
    config: CheckpointConfig | None = None,
) -> IntervalHandle:
    """Run ``gateway.check`` every ``interval`` seconds on the running loop.

    Each result, or the error that replaced it, is passed to ``callback``.
    Ticks are sequential and a failing tick never ends the loop. The
    returned handle stops the schedule; with a disabled config it is inert.
    """
    config = config if config is not None else CheckpointConfig.from_env()
    stop_event = asyncio.Event()
    if config.disabled:
        return IntervalHandle(None, stop_event)

    task = asyncio.get_running_loop().create_task(
        _run(gateway, params, interval, callback, stop_event),
        name=f"checkpoint-interval-{params.product}",
    )
    return IntervalHandle(task, stop_event)


async def _run(
    gateway: CheckGateway,
    params: CheckParams,
    interval: float,
    callback: CheckCallback,
    stop_event: asyncio.Event,
) -> None:
    delay = random_stagger(interval)
    while not await _stopped_within(stop_event, delay):
        response: CheckResponse | None = None
        error: Exception | None = None
        try:
            response = await gateway.check(params)
        except Exception as exc:
            error = exc

        if stop_event.is_set():
            break
        deliver(callback, response, error)
        delay = interval


async def _stopped_within(stop_event: asyncio.Event, delay: float) -> bool:
    try:
        await asyncio.wait_for(stop_event.wait(), timeout=delay)
    except TimeoutError:
        return False
    return True


def deliver(
    callback: CheckCallback, response: CheckResponse | None, error: Exception | None
) -> None:
    try:
        callback(response, error)
    except Exception:
        logger.warning("Version check callback failed.", exc_info=True)
