from typing import Any, Dict
from unittest.mock import MagicMock

import pytest

from thermostat_collector.config import Credentials, Destination, Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(
        credentials=Credentials(api_key="key", api_secret="secret"),
        destination=Destination(database="thermostats", table="temperatures"),
        api_url="https://api.example.test",
        http_timeout=5.0,
    )


@pytest.fixture
def token_payload() -> Dict[str, Any]:
    return {"access_token": "abc123", "token_type": "bearer", "expires_in": "3599"}


@pytest.fixture
def devices_payload() -> Dict[str, Any]:
    return {
        "result": [
            {
                "id": "dev-1",
                "name": "Living room",
                "device_type": "Danfoss Ally Radiator Thermostat",
                "online": True,
                "active_time": 1700000000,
                "time_zone": "Europe/Berlin",
                "firmware": "ignored",
                "status": [
                    {"code": "va_temperature", "value": "205"},
                    {"code": "battery", "value": 80},
                ],
            }
        ],
        "t": 1700000123456,
        "success": True,
    }


def _build_response(payload: Any = None, json_error: Exception | None = None) -> MagicMock:
    response = MagicMock()
    response.raise_for_status.return_value = None
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def make_response():
    """Factory for stand-ins of `requests.Response` returning `payload` as JSON."""
    return _build_response
