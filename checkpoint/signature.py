from __future__ import annotations

import logging
from pathlib import Path
import uuid

from checkpoint.errors import SignatureError
from checkpoint.io import atomic_write_text

logger = logging.getLogger(__name__)

SIGNATURE_ERROR_SENTINEL = "siggenerror"


class SignatureStore:
    """Anonymous per-installation identifier kept in a single file.

    The token is random and carries no information about the user. It is
    created on first use and never rotated.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> str | None:
        try:
            signature = self._path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError):
            return None
        return signature or None

    def get_signature(self) -> str:
        if signature := self.read():
            return signature

        signature = str(uuid.uuid4())
        try:
            atomic_write_text(self._path, signature + "\n")
        except OSError as exc:
            raise SignatureError(f"Cannot persist signature to {self._path}") from exc
        logger.debug("Generated new signature at %s", self._path)
        return signature


def signature_or_sentinel(store: SignatureStore) -> str:
    try:
        return store.get_signature()
    except SignatureError:
        logger.debug("Falling back to sentinel signature", exc_info=True)
        return SIGNATURE_ERROR_SENTINEL
