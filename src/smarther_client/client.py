"""Smarther API client."""

import logging
from pathlib import Path
from typing import Any, Optional, Union

from .auth import API_ENDPOINT, AUTH_ENDPOINT, CodeProvider, ConsoleCodeProvider, Session, authenticate
from .config import SmartherConfig, load_config
from .exceptions import DecodeError, VendorApiError
from .transport import HttpTransport, decode_json

logger = logging.getLogger(__name__)

MEASURES_PATH = "chronothermostat/thermoregulation/addressLocation/plants/{plant_id}/modules/parameter/id/value/{module_id}/measures"


def _status_code(value: Any) -> Optional[int]:
    """Return the envelope status as an int, or None if it is not a whole number."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return int(number) if number.is_integer() else None


def unwrap_envelope(response: Any, payload_key: Optional[str], url: str) -> Any:
    """Apply the vendor's response envelope rule.

    A response carrying a non-null ``statusCode`` yields its ``payload_key``
    member (or the whole response when ``payload_key`` is None) if the status
    is 200, and raises otherwise. A response without ``statusCode`` is returned
    unchanged.

    Raises:
        VendorApiError: If the envelope reports a non-200 status.
        DecodeError: If a 200 envelope lacks the payload member.
    """
    if not isinstance(response, dict) or response.get("statusCode") is None:
        return response

    raw_status = response["statusCode"]
    status = _status_code(raw_status)
    if status != 200:
        raise VendorApiError(response.get("message"), status if status is not None else raw_status)

    if payload_key is None:
        return response
    if payload_key not in response:
        raise DecodeError(f"Response from {url} has no '{payload_key}' member")
    return response[payload_key]


class Smarther:
    """Client for the Smarther v2.0 API.

    Authorization happens during construction: the first run asks the user for
    an authorization code and stores the resulting refresh token in the config
    file; later runs exchange the stored refresh token for a new access token.
    """

    def __init__(
        self,
        config_path: Union[str, Path],
        code_provider: Optional[CodeProvider] = None,
        persist_refreshed_token: Optional[bool] = None,
        verify_tls: Optional[bool] = None,
        transport: Optional[HttpTransport] = None,
        auth_endpoint: str = AUTH_ENDPOINT,
        api_endpoint: str = API_ENDPOINT,
    ) -> None:
        """Initialize and authorize the client.

        Args:
            config_path: Path to the JSON config file.
            code_provider: Supplies the authorization code on first run. Defaults to a console prompt.
            persist_refreshed_token: Rewrite the config after a token refresh. Overrides ``persistRefreshedToken`` in the config.
            verify_tls: Verify the vendor's TLS certificates. Overrides ``verifyTls`` in the config.
            transport: Transport to use instead of a new HttpTransport.
            auth_endpoint: Base URL of the OAuth2 endpoints.
            api_endpoint: Base URL of the Smarther API.

        Raises:
            ConfigError: If the config file is missing or invalid, or cannot be written.
            AuthenticationError: If authorization fails.
            DecodeError: If a token response is not valid JSON.
            TransportError: If a token request fails.
        """
        self._config_path = Path(config_path)
        self._config = load_config(self._config_path)

        if persist_refreshed_token is None:
            persist_refreshed_token = self._config.persist_refreshed_token
        if verify_tls is None:
            verify_tls = self._config.verify_tls

        self._transport = transport if transport is not None else HttpTransport(verify_tls=verify_tls)
        self._code_provider: CodeProvider = code_provider if code_provider is not None else ConsoleCodeProvider()
        self._persist_refreshed_token = persist_refreshed_token
        self._auth_endpoint = auth_endpoint
        self._api_endpoint = api_endpoint

        self._session = self.authenticate()
        logger.debug(f"Smarther client initialized with API endpoint {api_endpoint}")

    def __enter__(self) -> "Smarther":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def config(self) -> SmartherConfig:
        return self._config

    @property
    def session(self) -> Session:
        return self._session

    def authenticate(self) -> Session:
        """Run the token flow for the loaded config and make the resulting session current.

        The subscription key and bearer token become the transport's default
        headers; each API call also sends the bearer token of the session it is
        made with.

        Returns:
            The new session.
        """
        session = authenticate(
            self._transport,
            self._config,
            self._config_path,
            self._code_provider,
            persist_refreshed_token=self._persist_refreshed_token,
            auth_endpoint=self._auth_endpoint,
            api_endpoint=self._api_endpoint,
        )
        self._session = session
        self._transport.set_headers(
            {
                "Ocp-Apim-Subscription-Key": self._config.subscription_key,
                "Authorization": f"Bearer {session.access_token}",
            }
        )
        return session

    def close(self) -> None:
        """Close the underlying HTTP transport."""
        self._transport.close()

    def _get(self, session: Session, path: str, payload_key: Optional[str]) -> Any:
        url = f"{session.api_endpoint}{path}"
        body = self._transport.request(url, headers={"Authorization": f"Bearer {session.access_token}"})
        return unwrap_envelope(decode_json(body, url), payload_key, url)

    def get_plants(self) -> Any:
        """Get the plants associated with the account.

        Returns:
            The decoded list of plants.

        Raises:
            VendorApiError: If the API reports an error.
            DecodeError: If the response is not valid JSON.
            TransportError: If the request fails.
        """
        return self._get(self._session, "plants", "plants")

    def get_plant_topology(self, plant_id: str) -> Any:
        """Get the topology of a plant, i.e. the modules it contains.

        Args:
            plant_id: The plant to inspect.

        Raises:
            VendorApiError: If the API reports an error.
            DecodeError: If the response is not valid JSON.
            TransportError: If the request fails.
        """
        return self._get(self._session, f"plants/{plant_id}/topology", "plant")

    def get_device_measures(self, plant_id: str, module_id: str) -> Any:
        """Get the current temperature and humidity measured by a module.

        Args:
            plant_id: The plant the module belongs to.
            module_id: The module to read.

        Returns:
            The full decoded response.

        Raises:
            VendorApiError: If the API reports an error.
            DecodeError: If the response is not valid JSON.
            TransportError: If the request fails.
        """
        return self._get(self._session, MEASURES_PATH.format(plant_id=plant_id, module_id=module_id), None)
