"""
The `retrievers` module fetches the fleet snapshot from the Danfoss Ally cloud API.

- [`api_calls.py`](src/thermostat_collector/retrievers/api_calls.py): Provides
  `authenticate`, which performs the OAuth2 client-credentials exchange, and
  `fetch_devices`, which retrieves the device list with its nested status
  readings using the resulting bearer token.
"""
