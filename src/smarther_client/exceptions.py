"""Custom exception types for the Smarther API client."""

from typing import Optional, Union


class SmartherError(Exception):
    """Base exception for all client-related errors.

    All custom exceptions in the client package inherit from this base class,
    allowing callers to catch all client exceptions with a single except clause.
    """

    pass


class ConfigError(SmartherError):
    """Exception raised when the JSON config file cannot be used.

    This includes failures in:
    - Reading the config file (missing or unreadable)
    - Parsing the config file (invalid JSON or not a JSON object)
    - Validating required keys (clientId, clientSecret, subscriptionKey)
    - Writing the config file back to disk
    """

    pass


class TransportError(SmartherError):
    """Exception raised when an HTTP request fails before a response body is received.

    This includes network failures, TLS verification failures and timeouts.
    A successful request with an empty body is never reported as a TransportError.
    """

    pass


class DecodeError(SmartherError):
    """Exception raised when a response body is not the expected JSON document."""

    pass


class AuthenticationError(SmartherError):
    """Exception raised when the OAuth2 token flow cannot complete.

    This includes failures in:
    - Capturing the authorization code from the user
    - Exchanging an authorization code for tokens
    - Exchanging a refresh token for a new access token
    """

    pass


class VendorApiError(SmartherError):
    """Exception raised when the vendor's response envelope reports a non-200 status.

    Attributes:
        message: The vendor-supplied error message.
        status_code: The vendor-supplied status code.
    """

    def __init__(self, message: Optional[str], status_code: Union[int, float, str]) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(f"Smarther API error {status_code}: {message}")
