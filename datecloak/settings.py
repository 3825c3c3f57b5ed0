"""Privacy settings: CLI flags over ``GIT_PRIVACY_*`` environment variables over defaults.

Only ``password``, ``salt`` and ``enabled`` concern the trailer codec; the
``modify_*`` and ``*_time_limit`` fields configure commit date redaction.
"""

from typing import Any

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core import decode_salt
from .encoder import Credentials
from .exceptions import ConfigurationError


class PrivacySettings(BaseSettings):
    """Frozen settings object, built once per CLI invocation."""

    model_config = SettingsConfigDict(frozen=True, env_prefix="GIT_PRIVACY_")

    # --- trailer encryption ---
    password: SecretStr = SecretStr("")
    salt: str = ""  # base64, not secret
    enabled: bool = True

    # --- redaction ---
    modify_date: bool = False
    modify_month: bool = False
    modify_day: bool = False
    modify_hour: bool = False
    modify_minute: bool = False
    modify_second: bool = False
    limit_time: bool = False
    lower_time_limit: int = Field(default=0, ge=0, le=23)
    upper_time_limit: int = Field(default=23, ge=0, le=23)

    @model_validator(mode="after")
    def _check_time_window(self) -> "PrivacySettings":
        if self.lower_time_limit > self.upper_time_limit:
            raise ValueError("lower_time_limit must not exceed upper_time_limit")
        return self

    @classmethod
    def from_cli(cls, **cli_flags: Any) -> "PrivacySettings":
        """Construct settings, letting flags that were actually given win."""
        return cls(**{k: v for k, v in cli_flags.items() if v is not None})

    def credentials(self) -> Credentials:
        """
        Raises:
            ConfigurationError: Password or salt is not configured
            KeyDerivationFailure: Salt is not a valid base64 salt
        """
        password = self.password.get_secret_value()
        if not password:
            raise ConfigurationError("No password configured (GIT_PRIVACY_PASSWORD)")
        if not self.salt:
            raise ConfigurationError("No salt configured (GIT_PRIVACY_SALT)")
        return Credentials(password=password, salt=decode_salt(self.salt))
