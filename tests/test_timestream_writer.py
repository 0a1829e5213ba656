from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from thermostat_collector.config import Destination
from thermostat_collector.exceptions import ConfigMissingError, WriteError
from thermostat_collector.models import NormalizedMeasurement
from thermostat_collector.writers.timestream_writer import (
    CLIENT_CONFIG,
    MAX_RECORDS_PER_CALL,
    TimestreamWriter,
    load_mapping,
)

DESTINATION = Destination(database="thermostats", table="temperatures")


def _measurement(device_id="dev-1", value=20.5, timestamp=1700000000):
    return NormalizedMeasurement(
        device_id=device_id,
        device_name="Living room",
        device_type="Ally",
        value=value,
        timestamp_seconds=timestamp,
    )


def test_bundled_mapping_describes_temperature_records():
    mapping = load_mapping()
    assert mapping["temperature"]["measure_value_type"] == "DOUBLE"
    assert mapping["temperature"]["time_unit"] == "SECONDS"
    assert set(mapping["temperature"]["dimensions"]) == {"name", "id", "type"}


def test_record_wire_format():
    writer = TimestreamWriter(client=MagicMock())

    (record,) = writer.build_records([_measurement(value=21.456)])

    assert record == {
        "Dimensions": [
            {"Name": "name", "Value": "Living room"},
            {"Name": "id", "Value": "dev-1"},
            {"Name": "type", "Value": "Ally"},
        ],
        "MeasureName": "temperature",
        "MeasureValue": "21.46",
        "MeasureValueType": "DOUBLE",
        "Time": "1700000000",
        "TimeUnit": "SECONDS",
    }


def test_write_submits_one_call_per_run():
    client = MagicMock()
    writer = TimestreamWriter(client=client)

    written = writer.write([_measurement("a"), _measurement("b")], DESTINATION)

    assert written == 2
    client.write_records.assert_called_once()
    kwargs = client.write_records.call_args.kwargs
    assert kwargs["DatabaseName"] == "thermostats"
    assert kwargs["TableName"] == "temperatures"
    assert [r["Dimensions"][1]["Value"] for r in kwargs["Records"]] == ["a", "b"]
    client.close.assert_not_called()


def test_large_batches_are_split_at_the_store_limit():
    client = MagicMock()
    writer = TimestreamWriter(client=client)
    measurements = [_measurement(str(i)) for i in range(MAX_RECORDS_PER_CALL + 5)]

    assert writer.write(measurements, DESTINATION) == MAX_RECORDS_PER_CALL + 5

    sizes = [len(c.kwargs["Records"]) for c in client.write_records.call_args_list]
    assert sizes == [MAX_RECORDS_PER_CALL, 5]


def test_empty_batch_is_a_no_op():
    client = MagicMock()
    assert TimestreamWriter(client=client).write([], DESTINATION) == 0
    client.write_records.assert_not_called()


@pytest.mark.parametrize(
    "destination",
    [Destination(database=None, table="t"), Destination(database="d", table=""), Destination(None, None)],
)
@patch("thermostat_collector.writers.timestream_writer.boto3")
def test_missing_destination_fails_before_any_client(mock_boto3, destination):
    with pytest.raises(ConfigMissingError):
        TimestreamWriter().write([_measurement()], destination)
    mock_boto3.session.Session.assert_not_called()


def test_rejected_records_raise_write_error():
    client = MagicMock()
    client.write_records.side_effect = ClientError(
        {
            "Error": {"Code": "RejectedRecordsException", "Message": "rejected"},
            "RejectedRecords": [{"RecordIndex": 0, "Reason": "Duplicate record"}],
        },
        "WriteRecords",
    )
    with pytest.raises(WriteError, match="RejectedRecordsException"):
        TimestreamWriter(client=client).write([_measurement()], DESTINATION)


def test_exhausted_transport_retries_raise_write_error():
    client = MagicMock()
    client.write_records.side_effect = EndpointConnectionError(endpoint_url="https://example")
    with pytest.raises(WriteError):
        TimestreamWriter(client=client).write([_measurement()], DESTINATION)


@patch("thermostat_collector.writers.timestream_writer.boto3")
def test_owned_client_is_configured_and_closed(mock_boto3):
    client = mock_boto3.session.Session.return_value.client.return_value

    TimestreamWriter().write([_measurement()], Destination("d", "t", region="eu-west-1"))

    mock_boto3.session.Session.return_value.client.assert_called_once_with(
        "timestream-write", region_name="eu-west-1", config=CLIENT_CONFIG
    )
    client.write_records.assert_called_once()
    client.close.assert_called_once()


@patch("thermostat_collector.writers.timestream_writer.boto3")
def test_owned_client_is_closed_on_failure(mock_boto3):
    client = mock_boto3.session.Session.return_value.client.return_value
    client.write_records.side_effect = ClientError(
        {"Error": {"Code": "ValidationException", "Message": "bad"}}, "WriteRecords"
    )

    with pytest.raises(WriteError):
        TimestreamWriter().write([_measurement()], DESTINATION)
    client.close.assert_called_once()


def test_client_config_limits():
    assert CLIENT_CONFIG.max_pool_connections == 10
    assert CLIENT_CONFIG.tcp_keepalive is True
    assert CLIENT_CONFIG.connect_timeout == 10
    assert CLIENT_CONFIG.read_timeout == 20
    assert CLIENT_CONFIG.retries == {"max_attempts": 10, "mode": "standard"}


def test_invalid_chunk_size_is_rejected():
    with pytest.raises(ValueError):
        TimestreamWriter(client=MagicMock(), max_records_per_call=0)
