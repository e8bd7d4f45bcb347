from __future__ import annotations

from collections.abc import Mapping
import logging
import os

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://checkpoint-api.solo.io/v1"
DEFAULT_TIMEOUT_MS = 3000

DISABLE_ENV_VAR = "CHECKPOINT_DISABLE"
URL_ENV_VAR = "CHECKPOINT_URL"
TIMEOUT_ENV_VAR = "CHECKPOINT_TIMEOUT"


class CheckpointConfig(BaseModel):
    """Settings shared by every checkpoint component.

    Built once and handed to constructors; components never re-read the
    environment on their own.
    """

    model_config = ConfigDict(frozen=True)

    disabled: bool = False
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT_MS / 1000

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CheckpointConfig:
        env = os.environ if environ is None else environ
        return cls(
            disabled=bool(env.get(DISABLE_ENV_VAR)),
            base_url=(env.get(URL_ENV_VAR) or DEFAULT_BASE_URL).rstrip("/"),
            timeout=_parse_timeout_ms(env.get(TIMEOUT_ENV_VAR)) / 1000,
        )


def _parse_timeout_ms(raw: str | None) -> int:
    if not raw:
        return DEFAULT_TIMEOUT_MS
    try:
        value = int(raw.strip())
    except ValueError:
        logger.debug("Ignoring invalid %s value %r", TIMEOUT_ENV_VAR, raw)
        return DEFAULT_TIMEOUT_MS
    if value <= 0:
        logger.debug("Ignoring non-positive %s value %r", TIMEOUT_ENV_VAR, raw)
        return DEFAULT_TIMEOUT_MS
    return value
