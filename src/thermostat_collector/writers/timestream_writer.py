"""This module defines the TimestreamWriter class, which persists measurements to Amazon Timestream.

The writer translates `NormalizedMeasurement` objects into Timestream records
following the naming in `database/timestream_mapping.yaml` and submits them with
`WriteRecords`. The boto3 client is created for the duration of one write and
closed afterwards, so no connection pool survives between scheduled runs.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import boto3
import yaml
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from thermostat_collector.config import Destination
from thermostat_collector.exceptions import WriteError
from thermostat_collector.models import NormalizedMeasurement
from thermostat_collector.util.logging import LoggingUtil

logger = LoggingUtil.get_logger(__name__)

# Limit of records accepted by a single WriteRecords call
MAX_RECORDS_PER_CALL = 100

DEFAULT_MAPPING_PATH = Path(__file__).parent.parent / "database" / "timestream_mapping.yaml"

CLIENT_CONFIG = Config(
    max_pool_connections=10,
    tcp_keepalive=True,
    connect_timeout=10,
    read_timeout=20,
    retries={"max_attempts": 10, "mode": "standard"},
)


def load_mapping(mapping_path: Path = DEFAULT_MAPPING_PATH) -> Dict[str, Any]:
    with open(mapping_path, "r") as file:
        return yaml.safe_load(file)


class TimestreamWriter:
    """Writes batches of normalized measurements to a Timestream table.

    A client can be injected, in which case the caller owns it and it is not
    closed by the writer. Otherwise a client is created for each call to
    `write` and closed before returning.
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        mapping: Optional[Dict[str, Any]] = None,
        max_records_per_call: int = MAX_RECORDS_PER_CALL,
    ) -> None:
        """Initializes the writer.

        Args:
            client: An optional `timestream-write` client.
            mapping: The record mapping; loaded from the bundled YAML file when omitted.
            max_records_per_call: The number of records sent per WriteRecords call.
        """
        if max_records_per_call < 1:
            raise ValueError("max_records_per_call must be at least 1")
        self._client = client
        self._mapping = mapping if mapping is not None else load_mapping()
        self._max_records_per_call = max_records_per_call

    def build_records(
        self, measurements: Sequence[NormalizedMeasurement]
    ) -> List[Dict[str, Any]]:
        """Converts measurements into Timestream records.

        Args:
            measurements: The measurements to convert.

        Returns:
            One record per measurement, in the same order.
        """
        records = []
        for measurement in measurements:
            measure_mapping = self._mapping[measurement.measure_name]
            dimensions = [
                {"Name": name, "Value": str(getattr(measurement, attribute))}
                for name, attribute in measure_mapping["dimensions"].items()
            ]
            records.append(
                {
                    "Dimensions": dimensions,
                    "MeasureName": measurement.measure_name,
                    "MeasureValue": f"{measurement.value:.2f}",
                    "MeasureValueType": measure_mapping["measure_value_type"],
                    "Time": str(measurement.timestamp_seconds),
                    "TimeUnit": measure_mapping["time_unit"],
                }
            )
        return records

    def write(
        self, measurements: Sequence[NormalizedMeasurement], destination: Destination
    ) -> int:
        """Writes the measurements to the destination table.

        The destination is validated before any client is created. An empty batch
        is not an error and results in no call to the store.

        Args:
            measurements: The measurements of the current run.
            destination: The Timestream database, table and region.

        Returns:
            The number of records written.

        Raises:
            ConfigMissingError: If the database or table name is missing.
            WriteError: If the store rejects the records or cannot be reached.
        """
        destination.validate()

        if not measurements:
            logger.info("No temperature measurements to write, skipping")
            return 0

        records = self.build_records(measurements)

        if self._client is not None:
            self._write_records(self._client, records, destination)
        else:
            client = self._create_client(destination)
            try:
                self._write_records(client, records, destination)
            finally:
                client.close()

        logger.info(
            "Write records is successful",
            extra={
                "database": destination.database,
                "table": destination.table,
                "record_count": len(records),
            },
        )
        return len(records)

    @staticmethod
    def _create_client(destination: Destination) -> Any:
        session = boto3.session.Session()
        return session.client(
            "timestream-write", region_name=destination.region, config=CLIENT_CONFIG
        )

    def _write_records(
        self, client: Any, records: List[Dict[str, Any]], destination: Destination
    ) -> None:
        for offset in range(0, len(records), self._max_records_per_call):
            chunk = records[offset : offset + self._max_records_per_call]
            try:
                client.write_records(
                    DatabaseName=destination.database,
                    TableName=destination.table,
                    Records=chunk,
                )
            except ClientError as e:
                error_code = e.response.get("Error", {}).get("Code", "Unknown")
                for rejected in e.response.get("RejectedRecords", []):
                    logger.error(
                        "Record %s rejected: %s",
                        rejected.get("RecordIndex"),
                        rejected.get("Reason"),
                    )
                logger.error("Write records failed (%s): %s", error_code, e)
                raise WriteError(f"Write records failed ({error_code}): {e}") from e
            except BotoCoreError as e:
                logger.error("Write records failed: %s", e)
                raise WriteError(f"Write records failed: {e}") from e
