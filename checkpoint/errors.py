from __future__ import annotations

from enum import StrEnum, auto


class CheckpointErrorCause(StrEnum):
    @staticmethod
    def _generate_next_value_(
        name: str, start: int, count: int, last_values: list[str]
    ) -> str:
        return name.lower()

    TIMEOUT = auto()
    REQUEST_FAILED = auto()
    ERROR_RESPONSE = auto()
    INVALID_RESPONSE = auto()
    UNKNOWN = auto()


DEFAULT_ERROR_MESSAGES: dict[CheckpointErrorCause, str] = {
    CheckpointErrorCause.TIMEOUT: "Client timeout exceeded while awaiting the checkpoint service.",
    CheckpointErrorCause.REQUEST_FAILED: "Network error while contacting the checkpoint service.",
    CheckpointErrorCause.ERROR_RESPONSE: "Unexpected response received from the checkpoint service.",
    CheckpointErrorCause.INVALID_RESPONSE: "Received an invalid response from the checkpoint service.",
    CheckpointErrorCause.UNKNOWN: "Unable to reach the checkpoint service.",
}


class CheckpointError(Exception):
    def __init__(
        self, *, cause: CheckpointErrorCause, message: str | None = None
    ) -> None:
        self.cause = cause
        self.detail = message
        text = DEFAULT_ERROR_MESSAGES.get(
            cause, DEFAULT_ERROR_MESSAGES[CheckpointErrorCause.UNKNOWN]
        )
        super().__init__(f"{text} ({message})" if message else text)


class CheckpointTransportError(CheckpointError):
    """Raised when the request never produced a response (timeout, DNS, refused)."""


class CheckpointDecodeError(CheckpointError):
    """Raised when a response arrived but cannot be used."""


class SignatureError(Exception):
    pass
