"""Shared fixtures: fake powercap trees and scripted counter sources."""

from collections.abc import Callable
from pathlib import Path

import pytest

from raplmon.config import AppConfig


class ScriptedSource:
    """In-memory sensor source replaying fixed counter sequences.

    Args:
        zones: Mapping of entry name to (label bytes, counter values).
        root: Reported root path.
        on_read: Called with (entry, read_index) before each counter read,
            read_index counting that entry's counter reads from 0.
    """

    def __init__(
        self,
        zones: dict[str, tuple[bytes, list[int]]],
        root: Path = Path("/fake/powercap"),
        on_read: Callable[[str, int], None] | None = None,
    ) -> None:
        self.root = root
        self.zones = zones
        self.on_read = on_read
        self.reads: dict[str, int] = {entry: 0 for entry in zones}

    def list_entries(self) -> list[str]:
        return list(self.zones)

    def resource_path(self, entry: str, resource: str) -> Path:
        return self.root / entry / resource

    def is_readable(self, path: Path) -> bool:
        return path.parent.name in self.zones

    def read_bytes(self, path: Path) -> bytes:
        entry = path.parent.name
        label, counters = self.zones[entry]
        if path.name == "name":
            return label

        index = self.reads[entry]
        if self.on_read is not None:
            self.on_read(entry, index)
        self.reads[entry] = index + 1
        return f"{counters[index]}\n".encode()


@pytest.fixture
def scripted_source() -> type[ScriptedSource]:
    """The ScriptedSource class, for building sources inside tests."""
    return ScriptedSource


@pytest.fixture
def make_zone(tmp_path: Path) -> Callable[..., Path]:
    """Create a zone directory under tmp_path/powercap."""

    def _make_zone(
        entry: str,
        label: str | None = "package-0\n",
        counter: str | None = "1000000\n",
    ) -> Path:
        zone = tmp_path / "powercap" / entry
        zone.mkdir(parents=True, exist_ok=True)
        if label is not None:
            (zone / "name").write_text(label)
        if counter is not None:
            (zone / "energy_uj").write_text(counter)
        return zone

    (tmp_path / "powercap").mkdir(exist_ok=True)
    return _make_zone


@pytest.fixture
def powercap_root(tmp_path: Path) -> Path:
    root = tmp_path / "powercap"
    root.mkdir(exist_ok=True)
    return root


@pytest.fixture
def app_config(powercap_root: Path, tmp_path: Path) -> AppConfig:
    """Settings pointing at the fake powercap tree."""
    return AppConfig(
        powercap_root=powercap_root,
        log_dir=tmp_path / "logs",
        log_level="WARNING",
        log_format="console",
    )
