from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
import threading

import pytest

from checkpoint import paths
from tests.adapters.checkpoint_server import (
    CheckpointServer,
    ServerState,
    StatefulServer,
)


@pytest.fixture(autouse=True)
def checkpoint_home(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> Path:
    for name in (
        "CHECKPOINT_DISABLE",
        "CHECKPOINT_URL",
        "CHECKPOINT_TIMEOUT",
        "CHECKPOINT_HOME",
    ):
        monkeypatch.delenv(name, raising=False)
    home = tmp_path_factory.mktemp("home") / ".checkpoint"
    monkeypatch.setattr(paths, "DEFAULT_CONFIG_DIR", home)
    return home


@pytest.fixture
def checkpoint_server() -> Iterator[CheckpointServer]:
    server = StatefulServer(ServerState())
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    try:
        yield CheckpointServer(url=f"http://{host}:{port}", state=server.state)
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
