"""
The `thermostat_collector` package collects the room temperatures reported by a
fleet of Danfoss Ally smart thermostats and stores them in Amazon Timestream.

Each collection run is a single, strictly sequential pass:
1.  **Authentication:** An OAuth2 client-credentials exchange against the
    Danfoss API produces a short-lived bearer token.
2.  **Retrieval:** The device list, with the current status readings of every
    thermostat, is fetched using that token.
3.  **Extraction:** The temperature statuses are converted to floats, scaled from
    tenths of a degree and tagged with the device identity and a run-wide
    capture timestamp. A malformed reading is skipped without aborting the run.
4.  **Persistence:** The measurements are written to a Timestream table.

No state survives between runs: every run authenticates again and opens its
own connections.

Sub-packages:
-------------
- `retrievers`:
  API client functions for the token exchange and the device list.

- `measurements`:
  The unit converter and the measurement extractor.

- `writers`:
  The Timestream batch writer.

- `util`:
  The centralized logging utility.

The `pipeline` module chains the stages together and the `app` module provides
the AWS Lambda handler and a scheduler-based entry point.
"""
