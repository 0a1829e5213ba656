import time
from typing import FrozenSet, Iterable, List, Optional

from thermostat_collector.exceptions import ConversionError
from thermostat_collector.measurements.converter import convert
from thermostat_collector.models import Device, NormalizedMeasurement
from thermostat_collector.util.logging import LoggingUtil

logger = LoggingUtil.get_logger(__name__)

# Both codes report the current room temperature, depending on the device model
TEMPERATURE_CODES: FrozenSet[str] = frozenset({"va_temperature", "temp_current"})

# Raw values are reported in tenths of a degree
SCALE_FACTOR = 10.0


def extract(
    devices: Iterable[Device], captured_at: Optional[int] = None
) -> List[NormalizedMeasurement]:
    """Extracts the temperature measurements of a fleet snapshot.

    Every status whose code is a known temperature code is converted, divided by
    `SCALE_FACTOR` and tagged with the identity of its device. All measurements
    share one capture timestamp. A status whose value cannot be converted is
    logged and skipped without affecting the others.

    Args:
        devices: The devices returned by the devices endpoint.
        captured_at: Epoch seconds to stamp the measurements with. Defaults to the
                     wall-clock time at the start of the extraction.

    Returns:
        The measurements in device order, then status order.
    """
    if captured_at is None:
        captured_at = int(time.time())

    measurements: List[NormalizedMeasurement] = []
    for device in devices:
        logger.info(
            "Device observed: %s",
            device.name,
            extra={"device_id": device.id, "online": device.online},
        )

        for status in device.statuses:
            if status.code not in TEMPERATURE_CODES:
                continue

            try:
                raw_value = convert(status.value)
            except ConversionError as e:
                logger.error(
                    "Skipping status %s of device %s: %s",
                    status.code,
                    device.id,
                    e,
                )
                continue

            measurements.append(
                NormalizedMeasurement(
                    device_id=device.id,
                    device_name=device.name,
                    device_type=device.device_type,
                    value=raw_value / SCALE_FACTOR,
                    timestamp_seconds=captured_at,
                )
            )

    return measurements
