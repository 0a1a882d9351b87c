"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

_ENV_KEYS = ("PORTSDIR", "PORTBUMP_QUIET", "PORTBUMP_JOBS", "PORTBUMP_FAIL_ON_ERROR")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def ports_root(tmp_path: Path) -> Path:
    root = tmp_path / "ports"
    root.mkdir()
    return root


@pytest.fixture()
def make_port(ports_root: Path) -> Callable[[str, bytes], Path]:
    """Create ``<ports_root>/<origin>/Makefile`` with the given content."""

    def _make(origin: str, content: bytes) -> Path:
        port_dir = ports_root / origin
        port_dir.mkdir(parents=True, exist_ok=True)
        makefile = port_dir / "Makefile"
        makefile.write_bytes(content)
        return makefile

    return _make
