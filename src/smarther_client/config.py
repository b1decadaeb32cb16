"""JSON config file handling for the Smarther client."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("clientId", "clientSecret", "subscriptionKey")


@dataclass
class SmartherConfig:
    """Persisted client credentials and flags.

    Keys not known to the client are kept in ``extra`` and written back
    unchanged, so a save/load round trip reproduces the original record.
    """

    client_id: str
    client_secret: str
    subscription_key: str
    refresh_token: Optional[str] = None
    persist_refreshed_token: bool = False
    verify_tls: bool = True
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def has_refresh_token(self) -> bool:
        return self.refresh_token is not None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SmartherConfig":
        """Build a config from its decoded JSON form.

        Args:
            data: The decoded config object.

        Returns:
            The parsed config.

        Raises:
            ConfigError: If a required key is missing or a flag is not a boolean.
        """
        missing = [key for key in REQUIRED_KEYS if key not in data]
        if missing:
            raise ConfigError(f"Config is missing required keys: {', '.join(missing)}")
        for flag in ("persistRefreshedToken", "verifyTls"):
            if flag in data and not isinstance(data[flag], bool):
                raise ConfigError(f"Config flag {flag} must be true or false, found {data[flag]!r}")

        known = set(REQUIRED_KEYS) | {"refreshToken", "persistRefreshedToken", "verifyTls"}
        return cls(
            client_id=data["clientId"],
            client_secret=data["clientSecret"],
            subscription_key=data["subscriptionKey"],
            refresh_token=data.get("refreshToken"),
            persist_refreshed_token=data.get("persistRefreshedToken", False),
            verify_tls=data.get("verifyTls", True),
            extra={key: value for key, value in data.items() if key not in known},
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the config, including any unknown keys."""
        data: dict[str, Any] = dict(self.extra)
        data["clientId"] = self.client_id
        data["clientSecret"] = self.client_secret
        data["subscriptionKey"] = self.subscription_key
        data["refreshToken"] = self.refresh_token
        # Flags are only written when they differ from the defaults
        if self.persist_refreshed_token:
            data["persistRefreshedToken"] = self.persist_refreshed_token
        if not self.verify_tls:
            data["verifyTls"] = self.verify_tls
        return data


def load_config(config_path: Union[str, Path]) -> SmartherConfig:
    """Load the client config from a JSON file.

    Args:
        config_path: Path to the JSON config file.

    Returns:
        The parsed config.

    Raises:
        ConfigError: If the file is missing, unreadable, not valid JSON, or not a valid config object.
    """
    path = Path(config_path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object, found {type(data).__name__}")

    config = SmartherConfig.from_dict(data)
    logger.debug(f"Loaded config from {path} (refresh token present: {config.has_refresh_token})")
    return config


def save_config(config: SmartherConfig, config_path: Union[str, Path]) -> None:
    """Overwrite the config file with the pretty-printed JSON form of ``config``.

    Raises:
        ConfigError: If the file cannot be written.
    """
    path = Path(config_path)
    try:
        path.write_text(json.dumps(config.to_dict(), indent=4) + "\n", encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to write config file {path}: {e}") from e
    logger.info(f"Config written to {path}")
