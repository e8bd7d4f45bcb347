from __future__ import annotations

import logging

from checkpoint.adapters.filesystem_result_cache import FileSystemResultCache
from checkpoint.adapters.http_check_gateway import (
    DEFAULT_CACHE_TTL_SECONDS,
    HttpCheckGateway,
)
from checkpoint.adapters.http_report_gateway import HttpReportGateway
from checkpoint.client import VERSION_CHECK_INTERVAL_SECONDS, UsageClient, start
from checkpoint.config import CheckpointConfig
from checkpoint.errors import (
    CheckpointDecodeError,
    CheckpointError,
    CheckpointErrorCause,
    CheckpointTransportError,
    SignatureError,
)
from checkpoint.models import (
    Alert,
    CheckParams,
    CheckResponse,
    ReportParams,
)
from checkpoint.ports.check_gateway import CheckGateway
from checkpoint.ports.result_cache import ResultCache
from checkpoint.scheduler import IntervalHandle, check_interval, random_stagger
from checkpoint.signature import (
    SIGNATURE_ERROR_SENTINEL,
    SignatureStore,
    signature_or_sentinel,
)
from checkpoint.versions import is_outdated

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DEFAULT_CACHE_TTL_SECONDS",
    "SIGNATURE_ERROR_SENTINEL",
    "VERSION_CHECK_INTERVAL_SECONDS",
    "Alert",
    "CheckGateway",
    "CheckParams",
    "CheckResponse",
    "CheckpointConfig",
    "CheckpointDecodeError",
    "CheckpointError",
    "CheckpointErrorCause",
    "CheckpointTransportError",
    "FileSystemResultCache",
    "HttpCheckGateway",
    "HttpReportGateway",
    "IntervalHandle",
    "ReportParams",
    "ResultCache",
    "SignatureError",
    "SignatureStore",
    "UsageClient",
    "check_interval",
    "is_outdated",
    "random_stagger",
    "signature_or_sentinel",
    "start",
]
