"""Counter sampling and delta-based power computation."""

import errno

from raplmon.errors import ResourceReadError
from raplmon.sensors.registry import Sensor
from raplmon.sensors.source import SensorSource
from raplmon.telemetry import COUNTER_REGRESSION, SENSOR_BASELINE, get_logger

log = get_logger(__name__)

MICROJOULES_PER_JOULE = 1_000_000


def parse_counter(raw: bytes, path: str) -> int:
    """Parse a counter resource as a non-negative decimal integer.

    Raises:
        ResourceReadError: If the content is not a non-negative integer.
    """
    text = raw.decode("ascii", errors="replace").strip()
    if not text.isdigit():
        raise ResourceReadError(path, "parse", f"malformed counter value {text!r}", errno.EINVAL)
    return int(text)


def compute_power(previous: int, current: int) -> float:
    """Power in watts between two counter reads one second apart.

    The counter is in microjoules and the period is fixed at one second,
    so the joule delta is the wattage.
    """
    return (float(current) - float(previous)) / MICROJOULES_PER_JOULE


def sample(sensor: Sensor, source: SensorSource) -> float | None:
    """Read a sensor's counter and derive power from the previous read.

    The first read only establishes the baseline. A counter that went
    backwards (reset or wraparound) is reported as a warning and becomes
    the new baseline; no power value is produced for that read.

    Args:
        sensor: Sensor to sample; its counter state is updated in place.
        source: Source used to read the counter file.

    Returns:
        Power in watts, or None when no valid delta exists.

    Raises:
        ResourceReadError: If the counter cannot be read or parsed.
    """
    current = parse_counter(source.read_bytes(sensor.counter_source), str(sensor.counter_source))

    if not sensor.has_baseline:
        sensor.last_counter = current
        sensor.has_baseline = True
        log.debug(SENSOR_BASELINE, sensor_id=sensor.id, counter_uj=current)
        return None

    previous = sensor.last_counter
    sensor.last_counter = current

    if current < previous:
        sensor.regression_count += 1
        log.warning(
            COUNTER_REGRESSION,
            sensor_id=sensor.id,
            label=sensor.label,
            previous_uj=previous,
            current_uj=current,
            delta_w=compute_power(previous, current),
            regression_count=sensor.regression_count,
        )
        return None

    return compute_power(previous, current)
