"""One collection run: authenticate, fetch the fleet, extract temperatures and write them.

The stages run strictly in sequence. The destination is validated first so that
a misconfigured deployment fails before any call to the Danfoss API.
"""

from typing import Optional

from thermostat_collector.config import Settings
from thermostat_collector.exceptions import CollectorError
from thermostat_collector.measurements.extractor import extract
from thermostat_collector.retrievers.api_calls import authenticate, fetch_devices
from thermostat_collector.util.logging import LoggingUtil
from thermostat_collector.writers.timestream_writer import TimestreamWriter

logger = LoggingUtil.get_logger(__name__)


def run_pipeline(settings: Settings, writer: Optional[TimestreamWriter] = None) -> int:
    """Executes a single collection run.

    Args:
        settings: The configuration of the run.
        writer: The writer used for the final stage; a new `TimestreamWriter` is
                created when omitted.

    Returns:
        The number of measurements written.

    Raises:
        CollectorError: On any condition fatal to the run (missing configuration,
                        authentication, fetch or write failure).
    """
    logger.info("Starting collection run")
    try:
        settings.destination.validate()

        token = authenticate(
            settings.credentials, settings.api_url, settings.http_timeout
        )
        devices = fetch_devices(token, settings.api_url, settings.http_timeout)
        measurements = extract(devices)

        if writer is None:
            writer = TimestreamWriter()
        written = writer.write(measurements, settings.destination)
    except CollectorError as e:
        logger.error("Collection run failed: %s", e, extra={"error": type(e).__name__})
        raise

    logger.info(
        "Collection run completed",
        extra={"device_count": len(devices), "measurement_count": written},
    )
    return written
