"""Sensor discovery.

Runs once at startup: enumerate the source root, keep zones that match the
prefix and expose both a readable label and a readable counter, read each
label, and build the sorted registry.
"""

from raplmon.config.settings import DEFAULT_SENSOR_PREFIX
from raplmon.errors import NoSensorsFoundError
from raplmon.sensors.registry import Sensor, SensorRegistry
from raplmon.sensors.source import COUNTER_RESOURCE, LABEL_RESOURCE, SensorSource
from raplmon.telemetry import (
    DISCOVERY_COMPLETED,
    DISCOVERY_SKIPPED_ENTRY,
    SENSOR_DISCOVERED,
    get_logger,
)

log = get_logger(__name__)


def decode_label(raw: bytes) -> str:
    """Decode a label resource, dropping exactly one trailing newline.

    Args:
        raw: Bytes read from the label file.

    Returns:
        The label text. Other trailing whitespace is preserved.
    """
    text = raw.decode("utf-8", errors="replace")
    if text.endswith("\n"):
        text = text[:-1]
    return text


def discover(source: SensorSource, prefix: str = DEFAULT_SENSOR_PREFIX) -> SensorRegistry:
    """Discover sensors exposed by the source.

    Args:
        source: Sensor source to enumerate.
        prefix: Entry name prefix a zone must start with.

    Returns:
        Registry of discovered sensors, sorted by id.

    Raises:
        DiscoveryUnavailableError: If the root cannot be enumerated.
        ResourceReadError: If a label passes the access check but cannot be read.
        NoSensorsFoundError: If no entry qualifies.
    """
    sensors: list[Sensor] = []

    for entry in source.list_entries():
        if not entry.startswith(prefix):
            continue

        label_path = source.resource_path(entry, LABEL_RESOURCE)
        if not source.is_readable(label_path):
            log.debug(DISCOVERY_SKIPPED_ENTRY, entry=entry, missing=LABEL_RESOURCE)
            continue

        counter_path = source.resource_path(entry, COUNTER_RESOURCE)
        if not source.is_readable(counter_path):
            log.debug(DISCOVERY_SKIPPED_ENTRY, entry=entry, missing=COUNTER_RESOURCE)
            continue

        label = decode_label(source.read_bytes(label_path))
        sensors.append(Sensor(id=entry, label=label, counter_source=counter_path))

    if not sensors:
        raise NoSensorsFoundError(str(source.root), prefix)

    registry = SensorRegistry.from_sensors(sensors)

    for sensor in registry:
        log.debug(
            SENSOR_DISCOVERED,
            sensor_id=sensor.id,
            label=sensor.label,
            counter_source=str(sensor.counter_source),
        )

    log.debug(
        DISCOVERY_COMPLETED,
        root=str(source.root),
        prefix=prefix,
        sensor_count=len(registry),
        sensor_ids=registry.ids,
    )
    return registry
