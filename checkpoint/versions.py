from __future__ import annotations

from packaging.version import InvalidVersion, Version


def parse_version(raw: str | None) -> Version | None:
    if not raw:
        return None
    tag = raw.strip()
    if tag.startswith(("v", "V")):
        tag = tag[1:]
    try:
        return Version(tag)
    except InvalidVersion:
        return None


def is_outdated(current_version: str | None, running_version: str | None) -> bool:
    """Return True when ``running_version`` is older than ``current_version``.

    Ordering is semantic, so ``1.10.0`` is newer than ``1.9.0``. When either
    side cannot be parsed nothing is reported as outdated.
    """
    current = parse_version(current_version)
    running = parse_version(running_version)
    if current is None or running is None:
        return False
    return running < current
