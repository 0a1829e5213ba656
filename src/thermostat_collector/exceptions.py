"""Exceptions raised by the collector pipeline.

Conversion errors (`ParseError`, `UnsupportedTypeError`) are recovered locally by
the extractor: the offending status is logged and skipped. Every other
`CollectorError` is fatal to the run and is surfaced to the scheduler.
"""


class CollectorError(Exception):
    """Base class for all collector errors."""


class CredentialsMissingError(CollectorError):
    """The API key or API secret is not configured."""


class AuthFailedError(CollectorError):
    """No usable access token could be obtained."""


class FetchError(CollectorError):
    """The device list could not be retrieved or parsed."""


class ConversionError(CollectorError):
    """A raw status value could not be converted to a float."""


class ParseError(ConversionError, ValueError):
    """A string status value is not numeric."""


class UnsupportedTypeError(ConversionError, TypeError):
    """A status value has a type the converter does not handle."""

    def __init__(self, value_type: type) -> None:
        self.value_type = value_type
        super().__init__(f"conversion to float from {value_type.__name__} not supported")


class ConfigMissingError(CollectorError):
    """A required destination setting is not configured."""


class WriteError(CollectorError):
    """The time-series store rejected the batch or could not be reached."""
