"""File-backed sensor source.

The powercap class directory exposes one subdirectory per power-capping
zone. Each zone holds a ``name`` file (the human-readable domain label)
and an ``energy_uj`` file (a cumulative energy counter in microjoules):

    /sys/class/powercap/intel-rapl:0/name       -> "package-0\\n"
    /sys/class/powercap/intel-rapl:0/energy_uj  -> "123456789\\n"

This module only knows how to list zones and read those small files;
discovery and sampling semantics live in their own modules.
"""

from __future__ import annotations

import errno
import os
import threading
from pathlib import Path
from typing import Protocol

from raplmon.errors import DiscoveryUnavailableError, ResourceReadError

LABEL_RESOURCE = "name"
COUNTER_RESOURCE = "energy_uj"

# Labels and counters are a handful of bytes; anything longer is not a sysfs attribute.
MAX_RESOURCE_BYTES = 256


class SensorSource(Protocol):
    """Capabilities discovery and sampling need from the host."""

    root: Path

    def list_entries(self) -> list[str]: ...

    def resource_path(self, entry: str, resource: str) -> Path: ...

    def is_readable(self, path: Path) -> bool: ...

    def read_bytes(self, path: Path) -> bytes: ...


class _ResourceReader(threading.Thread):
    """Reads one resource file on a daemon thread.

    A reader stuck in a hung read is abandoned after the timeout; being a
    daemon it never holds up interpreter exit.
    """

    def __init__(self, path: Path) -> None:
        super().__init__(name=f"raplmon-read-{path.name}", daemon=True)
        self.path = path
        self.data: bytes | None = None
        self.error: OSError | None = None

    def run(self) -> None:
        try:
            with open(self.path, "rb") as f:
                self.data = f.read(MAX_RESOURCE_BYTES)
        except OSError as e:
            self.error = e


class PowercapSource:
    """Sensor source backed by a powercap-style directory tree.

    Each read runs on its own daemon thread so a hung file system read turns
    into a fatal timeout instead of stalling the monitor forever.

    Usage:
        with PowercapSource(Path("/sys/class/powercap")) as source:
            registry = discover(source)
    """

    def __init__(self, root: Path, read_timeout_seconds: float = 2.0) -> None:
        self.root = Path(root)
        self.read_timeout_seconds = read_timeout_seconds
        self._abandoned: list[_ResourceReader] = []

    def list_entries(self) -> list[str]:
        """List entry names under the root.

        Raises:
            DiscoveryUnavailableError: If the root cannot be enumerated.
        """
        try:
            return os.listdir(self.root)
        except OSError as e:
            raise DiscoveryUnavailableError(str(self.root), e) from e

    def resource_path(self, entry: str, resource: str) -> Path:
        return self.root / entry / resource

    def is_readable(self, path: Path) -> bool:
        return os.access(path, os.R_OK)

    def read_bytes(self, path: Path) -> bytes:
        """Read a small resource file in full.

        Raises:
            ResourceReadError: If the file cannot be opened or read, yields no
                bytes, or the read does not finish within the timeout.
        """
        reader = _ResourceReader(path)
        reader.start()
        reader.join(self.read_timeout_seconds)

        if reader.is_alive():
            self._abandoned.append(reader)
            raise ResourceReadError(
                str(path),
                "read",
                f"timed out after {self.read_timeout_seconds}s",
                errno.ETIMEDOUT,
            )
        if reader.error is not None:
            error = reader.error
            raise ResourceReadError.from_os_error(str(path), "read", error) from error

        if not reader.data:
            raise ResourceReadError(str(path), "read", "file is empty", errno.ENODATA)
        return reader.data

    @property
    def abandoned_reads(self) -> int:
        """Readers that timed out and are still blocked."""
        self._abandoned = [reader for reader in self._abandoned if reader.is_alive()]
        return len(self._abandoned)

    def close(self) -> None:
        """Forget abandoned readers; daemon threads die with the process."""
        self._abandoned.clear()

    def __enter__(self) -> PowercapSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
