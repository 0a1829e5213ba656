"""
The `measurements` module turns raw device statuses into normalized temperature
measurements.

- [`converter.py`](src/thermostat_collector/measurements/converter.py): The unit
  converter, the single consumer of the loosely-typed status values.
- [`extractor.py`](src/thermostat_collector/measurements/extractor.py): Selects the
  temperature statuses of each device, scales them and tags them with the device
  identity and a run-wide capture timestamp.
"""
