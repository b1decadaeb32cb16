"""OAuth2 token acquisition for the Smarther API."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, Union
from urllib.parse import urlencode

from .config import SmartherConfig, save_config
from .exceptions import AuthenticationError, DecodeError
from .transport import HttpTransport, decode_json

logger = logging.getLogger(__name__)

AUTH_ENDPOINT = "https://partners-login.eliotbylegrand.com/"
API_ENDPOINT = "https://api.developer.legrand.com/smarther/v2.0/"
REDIRECT_URI = "https://www.google.com"
OPENID_CONFIGURATION_URL = "https://login.eliotbylegrand.com/0d8816d5-3e7f-4c86-8229-645137e0f222/v2.0/.well-known/openid-configuration?p=B2C_1_Eliot-SignUpOrSignIn"

CODE_PROMPT = "The link above will redirect you to the login page, when you log in it should redirect you to your redirect url?code=<something>. Type in that something."


@dataclass(frozen=True)
class Session:
    """Authorized state for one run of the client. Never persisted."""

    access_token: str
    auth_endpoint: str
    api_endpoint: str


class CodeProvider(Protocol):
    """Callable that receives the authorization URL and returns the captured ``code`` value."""

    def __call__(self, authorization_url: str) -> str: ...


class ConsoleCodeProvider:
    """Prints the authorization URL and reads the code pasted back by the user."""

    def __call__(self, authorization_url: str) -> str:
        print(authorization_url)
        return input(f"\n{CODE_PROMPT}\n").strip()


def build_authorization_url(auth_endpoint: str, client_id: str, redirect_uri: str = REDIRECT_URI) -> str:
    """Build the URL the user opens to grant access and obtain an authorization code."""
    query = urlencode({"client_id": client_id, "response_type": "code", "redirect_uri": redirect_uri})
    return f"{auth_endpoint}authorize?{query}"


def _request_tokens(transport: HttpTransport, auth_endpoint: str, form: dict[str, str]) -> dict[str, Any]:
    url = f"{auth_endpoint}token"
    logger.debug(f"Requesting tokens from {url} with grant_type={form['grant_type']}")
    token_data = decode_json(transport.request(url, form), url)

    if not isinstance(token_data, dict):
        raise AuthenticationError(f"Unexpected token response from {url}: {token_data}")
    for key in ("access_token", "refresh_token"):
        if not token_data.get(key):
            # The vendor's error description is safe to surface; token values never are
            detail = token_data.get("error_description") or token_data.get("error") or "no details"
            raise AuthenticationError(f"No {key} in response from {url}: {detail}")
    return token_data


def exchange_authorization_code(transport: HttpTransport, auth_endpoint: str, config: SmartherConfig, code: str) -> dict[str, Any]:
    """Exchange an authorization code for an access token and a refresh token.

    Returns:
        The decoded token response.

    Raises:
        AuthenticationError: If the response carries no tokens.
        DecodeError: If the response is not valid JSON.
        TransportError: If the request fails.
    """
    return _request_tokens(
        transport,
        auth_endpoint,
        {
            "client_id": config.client_id,
            "grant_type": "authorization_code",
            "code": code,
            "client_secret": config.client_secret,
        },
    )


def exchange_refresh_token(transport: HttpTransport, auth_endpoint: str, config: SmartherConfig) -> dict[str, Any]:
    """Exchange the stored refresh token for a new access token and refresh token.

    Raises:
        AuthenticationError: If no refresh token is stored or the response carries no tokens.
        DecodeError: If the response is not valid JSON.
        TransportError: If the request fails.
    """
    if config.refresh_token is None:
        raise AuthenticationError("Cannot refresh tokens: no refresh token stored in config")
    return _request_tokens(
        transport,
        auth_endpoint,
        {
            "client_id": config.client_id,
            "grant_type": "refresh_token",
            "refresh_token": config.refresh_token,
            "client_secret": config.client_secret,
        },
    )


def discover_auth_endpoint(transport: HttpTransport, discovery_url: str = OPENID_CONFIGURATION_URL) -> str:
    """Look up the authorization endpoint from the OpenID discovery document.

    The client uses the fixed partner login endpoint by default; this returns
    the base URL (ending in ``/``) under which ``authorize`` and ``token`` live.

    Raises:
        DecodeError: If the discovery document is invalid.
        TransportError: If the request fails.
    """
    document = decode_json(transport.request(discovery_url), discovery_url)
    endpoint = document.get("authorization_endpoint") if isinstance(document, dict) else None
    if not isinstance(endpoint, str) or "/" not in endpoint:
        raise DecodeError(f"No authorization_endpoint in discovery document from {discovery_url}")

    base = endpoint.split("?", 1)[0].rsplit("/", 1)[0] + "/"
    logger.debug(f"Discovered auth endpoint {base}")
    return base


def authenticate(
    transport: HttpTransport,
    config: SmartherConfig,
    config_path: Union[str, Path],
    code_provider: CodeProvider,
    persist_refreshed_token: bool = False,
    auth_endpoint: str = AUTH_ENDPOINT,
    api_endpoint: str = API_ENDPOINT,
) -> Session:
    """Obtain an access token, running the authorization-code flow on first use.

    Without a stored refresh token the user is asked for an authorization code,
    which is exchanged for tokens, and the new refresh token is written to the
    config file. Otherwise the stored refresh token is exchanged for a new pair;
    the rotated refresh token replaces the one in ``config`` but is only written
    to disk when ``persist_refreshed_token`` is set.

    Args:
        transport: The transport used for token requests.
        config: The loaded config; its refresh token is updated in place.
        config_path: Where the config is persisted.
        code_provider: Supplies the authorization code for a given authorization URL.
        persist_refreshed_token: Whether to rewrite the config after a refresh.
        auth_endpoint: Base URL of the OAuth2 endpoints.
        api_endpoint: Base URL of the Smarther API.

    Returns:
        The authorized session.

    Raises:
        AuthenticationError: If no code is supplied or the token endpoint returns no tokens.
        ConfigError: If the config cannot be written.
        DecodeError: If a token response is not valid JSON.
        TransportError: If a token request fails.
    """
    if not config.has_refresh_token:
        logger.debug("No refresh token stored, starting authorization code flow")
        code = code_provider(build_authorization_url(auth_endpoint, config.client_id))
        if not code:
            raise AuthenticationError("No authorization code provided")

        token_data = exchange_authorization_code(transport, auth_endpoint, config, code)
        config.refresh_token = token_data["refresh_token"]
        save_config(config, config_path)
        logger.info("Authorization code flow completed and refresh token stored")
    else:
        logger.debug("Refreshing access token using stored refresh token")
        token_data = exchange_refresh_token(transport, auth_endpoint, config)
        config.refresh_token = token_data["refresh_token"]
        if persist_refreshed_token:
            save_config(config, config_path)
        logger.debug("Successfully refreshed access token")

    return Session(access_token=token_data["access_token"], auth_endpoint=auth_endpoint, api_endpoint=api_endpoint)
