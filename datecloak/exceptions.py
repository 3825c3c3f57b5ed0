"""Exception hierarchy for datecloak."""


class DateCloakError(Exception):
    """Base class for every error raised by datecloak."""


class KeyDerivationFailure(DateCloakError):
    """The password hashing primitive could not produce a key."""


class EncryptionFailure(DateCloakError):
    """The cipher could not produce a ciphertext."""


class AuthenticationFailure(DateCloakError):
    """Ciphertext failed tag verification (wrong key or tampered text)."""


class FormatError(DateCloakError, ValueError):
    """Trailer or date record text is malformed."""


class ConfigurationError(DateCloakError):
    """Settings are incomplete for the requested operation."""
