import math
from typing import Any

from thermostat_collector.exceptions import ParseError, UnsupportedTypeError
from thermostat_collector.util.logging import LoggingUtil

logger = LoggingUtil.get_logger(__name__)


def _require_finite(result: float, value: Any) -> float:
    if not math.isfinite(result):
        raise ParseError(f"{value!r} is not a finite number")
    return result


def convert(value: Any) -> float:
    """Converts a raw status value into a float.

    Integers are converted exactly, floats pass through and strings are parsed.
    Booleans map to 0.0 instead of failing; a boolean on a temperature code most
    likely points to an upstream data problem, so it is logged.

    Strings must be a plain decimal literal: surrounding whitespace and digit
    separators (`"2_05"`) are rejected even though `float()` would accept them.

    Args:
        value: The status value as decoded from JSON.

    Returns:
        The value as a finite float.

    Raises:
        ParseError: If the value is not representable as a finite float.
        UnsupportedTypeError: If the value is of any other type.
    """
    # bool is a subclass of int, so it has to be matched first
    if isinstance(value, bool):
        logger.warning("Boolean status value %s mapped to 0.0", value)
        return 0.0
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError as e:
            raise ParseError("integer value is too large to convert to float") from e
    if isinstance(value, float):
        return _require_finite(value, value)
    if isinstance(value, str):
        if value != value.strip() or "_" in value:
            raise ParseError(f"could not parse {value!r} as a number")
        try:
            result = float(value)
        except ValueError as e:
            raise ParseError(f"could not parse {value!r} as a number") from e
        return _require_finite(result, value)
    raise UnsupportedTypeError(type(value))
