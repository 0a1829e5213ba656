import base64
from typing import List

import requests

from thermostat_collector.config import DEFAULT_API_URL, DEFAULT_HTTP_TIMEOUT, Credentials
from thermostat_collector.exceptions import AuthFailedError, FetchError
from thermostat_collector.models import AccessToken, Device, parse_devices_response
from thermostat_collector.util.logging import LoggingUtil

# Configure and start the logger
logger = LoggingUtil.get_logger(__name__)

TOKEN_PATH = "/oauth2/token"
DEVICES_PATH = "/ally/devices"


def _basic_auth_header(credentials: Credentials) -> str:
    raw = f"{credentials.api_key}:{credentials.api_secret}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("ascii")


def authenticate(
    credentials: Credentials,
    base_url: str = DEFAULT_API_URL,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> AccessToken:
    """Exchanges the API key and secret for a bearer token.

    This function sends a single POST request with a `client_credentials` grant
    to the OAuth token endpoint of the Danfoss API. There is no retry: a failed
    exchange ends the run.

    Args:
        credentials: The API key and secret.
        base_url: The root URL of the Danfoss API.
        timeout: The request timeout in seconds.

    Returns:
        An `AccessToken` with a non-empty value.

    Raises:
        CredentialsMissingError: If the key or the secret is not configured.
        AuthFailedError: If the request fails, the body cannot be parsed, or the
                         returned token is empty.
    """
    credentials.validate()

    headers = {
        "Authorization": _basic_auth_header(credentials),
        "Accept": "application/json",
        "Content-Type": "application/x-www-form-urlencoded",
    }
    try:
        response = requests.post(
            f"{base_url}{TOKEN_PATH}",
            data={"grant_type": "client_credentials"},
            headers=headers,
            timeout=timeout,
        )
        response.raise_for_status()
        token = AccessToken.from_json(response.json())
    except requests.RequestException as e:
        logger.error("Token request failed: %s", e)
        raise AuthFailedError(f"Token request failed: {e}") from e
    except ValueError as e:
        logger.error("Could not parse token response: %s", e)
        raise AuthFailedError(f"Could not parse token response: {e}") from e

    if not token.value:
        logger.error("Could not retrieve access token.")
        raise AuthFailedError("Could not retrieve access token.")

    logger.debug(
        "Access token retrieved", extra={"expires_in": token.expires_in_seconds}
    )
    return token


def fetch_devices(
    token: AccessToken,
    base_url: str = DEFAULT_API_URL,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> List[Device]:
    """Retrieves the device list with the current status readings.

    This function sends an authenticated GET request to the devices endpoint.
    An empty `result` list is a valid fleet snapshot and is returned as is.

    Args:
        token: The bearer token obtained from `authenticate`.
        base_url: The root URL of the Danfoss API.
        timeout: The request timeout in seconds.

    Returns:
        The devices in the order returned by the API.

    Raises:
        AuthFailedError: If the token value is empty.
        FetchError: If the request fails or the body cannot be parsed.
    """
    if not token.value:
        raise AuthFailedError("An access token is required to fetch devices.")

    headers = {
        "Authorization": token.authorization_header,
        "Accept": "application/json",
    }
    try:
        response = requests.get(
            f"{base_url}{DEVICES_PATH}", headers=headers, timeout=timeout
        )
        response.raise_for_status()
        devices, server_time = parse_devices_response(response.json())
    except requests.RequestException as e:
        logger.error("Devices request failed: %s", e)
        raise FetchError(f"Devices request failed: {e}") from e
    except ValueError as e:
        logger.error("Could not parse devices response: %s", e)
        raise FetchError(f"Could not parse devices response: {e}") from e

    logger.info(
        "Devices retrieved from API",
        extra={"device_count": len(devices), "server_time": server_time},
    )
    return devices
