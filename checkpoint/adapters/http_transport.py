from __future__ import annotations

from typing import Any

import httpx

from checkpoint.errors import (
    CheckpointDecodeError,
    CheckpointErrorCause,
    CheckpointTransportError,
)

USER_AGENT = "checkpoint-client"


def timeout_extensions(timeout: float) -> dict[str, Any]:
    return {"timeout": httpx.Timeout(timeout).as_dict()}


async def send(
    request: httpx.Request, client: httpx.AsyncClient | None = None
) -> httpx.Response:
    """Send ``request`` once and return a successful response.

    Transport failures become ``CheckpointTransportError`` and non-2xx
    statuses become ``CheckpointDecodeError``. Nothing is retried.
    """
    try:
        if client is not None:
            response = await client.send(request)
        else:
            async with httpx.AsyncClient() as owned_client:
                response = await owned_client.send(request)
    except httpx.TimeoutException as exc:
        raise CheckpointTransportError(
            cause=CheckpointErrorCause.TIMEOUT, message=f"timeout: {exc}"
        ) from exc
    except httpx.RequestError as exc:
        raise CheckpointTransportError(
            cause=CheckpointErrorCause.REQUEST_FAILED, message=str(exc) or None
        ) from exc

    if not response.is_success:
        raise CheckpointDecodeError(
            cause=CheckpointErrorCause.ERROR_RESPONSE,
            message=f"Unexpected status {response.status_code}",
        )
    return response
