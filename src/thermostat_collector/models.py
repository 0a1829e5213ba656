"""Data structures exchanged between the pipeline stages.

The `from_json` constructors are the deserialization boundary for the Danfoss
Ally API: they validate the shape of the payload and raise `ValueError` on
anything unexpected, leaving the caller to map it onto its own error type.
Status values keep their JSON scalar type (int, float, str or bool); the unit
converter is the only consumer that interprets them.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from thermostat_collector.util.logging import LoggingUtil

logger = LoggingUtil.get_logger(__name__)

StatusValue = Union[int, float, str, bool]

MEASURE_NAME = "temperature"


def _require_mapping(payload: Any, what: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValueError(f"{what} must be a JSON object, got {type(payload).__name__}")
    return payload


def _optional_int(payload: Dict[str, Any], key: str) -> Optional[int]:
    """Reads an informational integer field, falling back to None on any mismatch.

    Only values the collector never acts on go through here, so an unexpected
    type or range is logged and ignored instead of failing the whole response.
    """
    value = payload.get(key)
    if value is None:
        return None
    try:
        if isinstance(value, bool):
            raise TypeError("bool is not an integer")
        if isinstance(value, str):
            value = float(value)
        return int(value)
    except (TypeError, ValueError, OverflowError) as err:
        logger.debug("Ignoring field '%s' with unexpected value %r: %s", key, value, err)
        return None


@dataclass(frozen=True)
class AccessToken:
    value: str
    token_type: str = "bearer"
    expires_in_seconds: int = 0

    def __repr__(self) -> str:
        return (
            f"AccessToken(token_type={self.token_type!r}, "
            f"expires_in_seconds={self.expires_in_seconds})"
        )

    @classmethod
    def from_json(cls, payload: Any) -> "AccessToken":
        """Builds a token from the OAuth token endpoint response.

        `expires_in` is accepted both as a number and as a numeric string; any
        other value is ignored and treated as 0.

        Raises:
            ValueError: If the payload is not an object or a field has the wrong type.
        """
        payload = _require_mapping(payload, "Token response")
        value = payload.get("access_token") or ""
        token_type = payload.get("token_type") or "bearer"
        if not isinstance(value, str) or not isinstance(token_type, str):
            raise ValueError("'access_token' and 'token_type' must be strings")
        expires_in = _optional_int(payload, "expires_in")
        return cls(
            value=value,
            token_type=token_type,
            expires_in_seconds=expires_in or 0,
        )

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.value}"


@dataclass(frozen=True)
class Status:
    code: str
    value: StatusValue

    @classmethod
    def from_json(cls, payload: Any) -> "Status":
        payload = _require_mapping(payload, "Status")
        code = payload.get("code")
        if not isinstance(code, str):
            raise ValueError("Status 'code' must be a string")
        return cls(code=code, value=payload.get("value"))


@dataclass(frozen=True)
class Device:
    """Snapshot of one thermostat as returned by the devices endpoint."""

    id: str
    name: str
    device_type: str
    online: bool = False
    statuses: Tuple[Status, ...] = field(default_factory=tuple)
    active_time: Optional[int] = None
    create_time: Optional[int] = None
    update_time: Optional[int] = None
    time_zone: Optional[str] = None
    sub: bool = False

    @classmethod
    def from_json(cls, payload: Any) -> "Device":
        """Builds a device from one entry of the `result` list.

        Fields the collector does not know about are ignored.

        Raises:
            ValueError: If the entry or its status list has an unexpected shape.
        """
        payload = _require_mapping(payload, "Device")
        statuses = payload.get("status") or []
        if not isinstance(statuses, list):
            raise ValueError("Device 'status' must be a list")
        time_zone = payload.get("time_zone")
        return cls(
            id=str(payload.get("id") or ""),
            name=str(payload.get("name") or ""),
            device_type=str(payload.get("device_type") or ""),
            online=bool(payload.get("online", False)),
            statuses=tuple(Status.from_json(status) for status in statuses),
            active_time=_optional_int(payload, "active_time"),
            create_time=_optional_int(payload, "create_time"),
            update_time=_optional_int(payload, "update_time"),
            time_zone=time_zone if isinstance(time_zone, str) else None,
            sub=bool(payload.get("sub", False)),
        )


def parse_devices_response(payload: Any) -> Tuple[List[Device], Optional[int]]:
    """Parses the devices endpoint body `{result: [...], t: ...}`.

    A missing or empty `result` yields an empty fleet.

    Returns:
        The list of devices and the server time `t` (None if absent).

    Raises:
        ValueError: If the body does not have the expected shape.
    """
    payload = _require_mapping(payload, "Devices response")
    result = payload.get("result") or []
    if not isinstance(result, list):
        raise ValueError("Devices response 'result' must be a list")
    devices = [Device.from_json(entry) for entry in result]
    return devices, _optional_int(payload, "t")


@dataclass(frozen=True)
class NormalizedMeasurement:
    device_id: str
    device_name: str
    device_type: str
    value: float
    timestamp_seconds: int
    measure_name: str = MEASURE_NAME
