from __future__ import annotations

from datetime import UTC, datetime
import json
from pathlib import Path

import httpx
import pytest
import respx

from checkpoint.adapters.http_report_gateway import HttpReportGateway
from checkpoint.config import CheckpointConfig
from checkpoint.errors import (
    CheckpointDecodeError,
    CheckpointErrorCause,
    CheckpointTransportError,
)
from checkpoint.models import ReportParams
from checkpoint.signature import SIGNATURE_ERROR_SENTINEL

BASE_URL = "http://checkpoint.test"
TELEMETRY_URL = f"{BASE_URL}/telemetry/prod"


def _gateway(**kwargs) -> HttpReportGateway:
    return HttpReportGateway(CheckpointConfig(base_url=BASE_URL), **kwargs)


def test_builds_a_telemetry_request() -> None:
    request = _gateway().build_request(ReportParams(signature="sig", product="prod"))

    assert request.method == "POST"
    assert request.url.path.endswith("/telemetry/prod")
    assert request.headers["Content-Type"] == "application/json"

    body = ReportParams.model_validate_json(request.content)
    assert body.signature == "sig"
    assert body.product == "prod"


def test_request_body_carries_report_fields_but_not_the_signature_file(
    tmp_path: Path,
) -> None:
    params = ReportParams(
        signature="sig",
        product="prod",
        version="1.2.3",
        start_time=datetime(2026, 1, 1, tzinfo=UTC),
        end_time=datetime(2026, 1, 1, 0, 0, 5, tzinfo=UTC),
        signature_file=tmp_path / "prod.sig",
        arch="arm64",
        os="darwin",
        payload={"feature": "on"},
    )

    body = json.loads(_gateway().build_request(params).content)

    assert body["version"] == "1.2.3"
    assert body["type"] == "r1"
    assert body["arch"] == "arm64"
    assert body["os"] == "darwin"
    assert body["payload"] == {"feature": "on"}
    assert body["start_time"].startswith("2026-01-01T00:00:00")
    assert "signature_file" not in body


def test_request_carries_the_configured_timeout() -> None:
    gateway = HttpReportGateway(CheckpointConfig(base_url=BASE_URL, timeout=0.25))

    request = gateway.build_request(ReportParams(product="prod"))

    assert request.extensions["timeout"]["read"] == 0.25


@pytest.mark.asyncio
async def test_sends_the_report(respx_mock: respx.MockRouter) -> None:
    route = respx_mock.post(TELEMETRY_URL).mock(return_value=httpx.Response(201))

    await _gateway().report(ReportParams(signature="sig", product="prod"))

    assert route.called
    sent = json.loads(route.calls.last.request.content)
    assert sent["signature"] == "sig"


@pytest.mark.asyncio
async def test_resolves_signature_from_signature_file(
    respx_mock: respx.MockRouter, tmp_path: Path
) -> None:
    sig_file = tmp_path / "prod.sig"
    sig_file.write_text("stored-signature\n")
    route = respx_mock.post(TELEMETRY_URL).mock(return_value=httpx.Response(200))

    await _gateway().report(ReportParams(product="prod", signature_file=sig_file))

    assert json.loads(route.calls.last.request.content)["signature"] == "stored-signature"


@pytest.mark.asyncio
async def test_falls_back_to_sentinel_signature(
    respx_mock: respx.MockRouter, tmp_path: Path
) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    route = respx_mock.post(TELEMETRY_URL).mock(return_value=httpx.Response(200))

    await _gateway().report(
        ReportParams(product="prod", signature_file=blocker / "prod.sig")
    )

    sent = json.loads(route.calls.last.request.content)
    assert sent["signature"] == SIGNATURE_ERROR_SENTINEL


@pytest.mark.asyncio
async def test_disabled_report_sends_nothing(
    respx_mock: respx.MockRouter, tmp_path: Path
) -> None:
    gateway = HttpReportGateway(CheckpointConfig(base_url=BASE_URL, disabled=True))

    await gateway.report(
        ReportParams(product="prod", signature_file=tmp_path / "prod.sig")
    )

    assert respx_mock.calls.call_count == 0
    assert not (tmp_path / "prod.sig").exists()


@pytest.mark.asyncio
async def test_raises_on_non_success(respx_mock: respx.MockRouter) -> None:
    respx_mock.post(TELEMETRY_URL).mock(return_value=httpx.Response(500))

    with pytest.raises(CheckpointDecodeError) as exc_info:
        await _gateway().report(ReportParams(signature="sig", product="prod"))

    assert exc_info.value.cause is CheckpointErrorCause.ERROR_RESPONSE


@pytest.mark.asyncio
async def test_wraps_request_error(respx_mock: respx.MockRouter) -> None:
    respx_mock.post(TELEMETRY_URL).mock(side_effect=httpx.ConnectError("boom"))

    with pytest.raises(CheckpointTransportError):
        await _gateway().report(ReportParams(signature="sig", product="prod"))


@pytest.mark.asyncio
async def test_wraps_timeout(respx_mock: respx.MockRouter) -> None:
    respx_mock.post(TELEMETRY_URL).mock(side_effect=httpx.ReadTimeout("slow"))

    with pytest.raises(CheckpointTransportError) as exc_info:
        await _gateway().report(ReportParams(signature="sig", product="prod"))

    assert exc_info.value.cause is CheckpointErrorCause.TIMEOUT
