"""Smarther API client.

A synchronous client for the Legrand/BTicino Smarther v2.0 cloud API,
handling OAuth2 token acquisition and refresh.

Public Classes:
    Smarther: Client exposing plant, topology and measurement queries.
    SmartherConfig: Credentials and flags loaded from the JSON config file.
    Session: Authorized state for one run of the client.
    HttpTransport: HTTP transport used for all requests.
    ConsoleCodeProvider: Prompts on the console for the authorization code.

Exceptions:
    SmartherError: Base exception for all client errors.
    ConfigError: Config file missing, invalid, or not writable.
    TransportError: Network or TLS failures.
    DecodeError: Response bodies that are not the expected JSON.
    AuthenticationError: OAuth2 token flow failures.
    VendorApiError: Error statuses reported by the API.
"""

from .auth import CodeProvider, ConsoleCodeProvider, Session, authenticate, build_authorization_url, discover_auth_endpoint
from .client import Smarther
from .config import SmartherConfig, load_config, save_config
from .exceptions import (
    AuthenticationError,
    ConfigError,
    DecodeError,
    SmartherError,
    TransportError,
    VendorApiError,
)
from .transport import HttpTransport

__version__ = "0.1.0"

__all__ = [
    "AuthenticationError",
    "CodeProvider",
    "ConfigError",
    "ConsoleCodeProvider",
    "DecodeError",
    "HttpTransport",
    "Session",
    "Smarther",
    "SmartherConfig",
    "SmartherError",
    "TransportError",
    "VendorApiError",
    "authenticate",
    "build_authorization_url",
    "discover_auth_endpoint",
    "load_config",
    "save_config",
]
