from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
import platform
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

CHECK_TYPE = "c1"
REPORT_TYPE = "r1"


def local_arch() -> str:
    return platform.machine().lower() or "unknown"


def local_os() -> str:
    return platform.system().lower() or "unknown"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class CheckParams:
    product: str
    version: str
    signature: str = ""
    cache_file: Path | None = None
    type: str = CHECK_TYPE
    arch: str = field(default_factory=local_arch)
    os: str = field(default_factory=local_os)


class Alert(BaseModel):
    id: int = 0
    date: int = 0
    url: str = ""
    level: str = ""
    message: str = ""


class CheckResponse(BaseModel):
    product: str = ""
    current_version: str = ""
    current_release_date: int = Field(
        default=0,
        validation_alias=AliasChoices("current_release_date", "current_release"),
    )
    current_download_url: str = ""
    current_changelog_url: str = ""
    project_website: str = ""
    outdated: bool = False
    alerts: list[Alert] = Field(default_factory=list)

    @field_validator("alerts", mode="before")
    @classmethod
    def _null_alerts(cls, value: Any) -> Any:
        return [] if value is None else value


class ReportParams(BaseModel):
    signature: str = ""
    product: str = ""
    version: str = ""
    start_time: datetime = Field(default_factory=_utcnow)
    end_time: datetime = Field(default_factory=_utcnow)
    # local lookup only, never sent
    signature_file: Path | None = Field(default=None, exclude=True)
    type: str = REPORT_TYPE
    arch: str = Field(default_factory=local_arch)
    os: str = Field(default_factory=local_os)
    run_id: str = ""
    payload: dict[str, Any] | None = None


class CacheRecord(BaseModel):
    expiry: float
    response: CheckResponse
