from __future__ import annotations

import shutil
from pathlib import Path
from typing import Callable

import pytest

import netcmp.config as config


FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"

NETSTAT_HEADER = (
    "\n"
    "TCP: IPv4\n"
    "   Local Address        Remote Address    Swind Send-Q Rwind Recv-Q    State\n"
    "-------------------- -------------------- ----- ------ ----- ------ -----------\n"
)


def format_row(local: str, remote: str, state: str) -> str:
    return f"{local:<20} {remote:<20} 64128      0 128872      0 {state}\n"


@pytest.fixture(autouse=True)
def _no_user_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "DEFAULT_CONFIG_PATHS", [])


@pytest.fixture()
def write_listing(tmp_path: Path) -> Callable[..., Path]:
    """Write a netstat listing with the standard header and the given rows."""

    def _write(name: str, rows: list[tuple[str, str, str]], header: str = NETSTAT_HEADER) -> Path:
        path = tmp_path / name
        body = "".join(format_row(*row) for row in rows)
        path.write_text(header + body, encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def fixture_hosts(tmp_path: Path) -> list[Path]:
    paths = []
    for name in ("host-a", "host-b"):
        target = tmp_path / name
        shutil.copyfile(FIXTURE_DIR / name, target)
        paths.append(target)
    return paths
