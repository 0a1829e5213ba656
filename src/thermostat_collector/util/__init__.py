"""
General-purpose helpers shared by the collector modules.

- [`logging.py`](src/thermostat_collector/util/logging.py): Provides `LoggingUtil`,
  the single factory for loggers. Every module obtains its logger through it so
  that level, format and structured fields are handled the same way everywhere.
"""
