"""
The `writers` module submits normalized measurements to the time-series store.

- [`timestream_writer.py`](src/thermostat_collector/writers/timestream_writer.py):
  Defines `TimestreamWriter`, which converts measurements into Amazon Timestream
  records and writes them with a pooled, retrying boto3 client scoped to one run.
"""
