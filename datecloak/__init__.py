"""datecloak: hide the true commit date, keep it recoverable in an encrypted trailer."""

from .core import (
    derive_key,
    generate_salt,
    encode_salt,
    decode_salt,
    encrypt,
    decrypt,
    CipherEnvelope,
    __version__
)
from .encoder import Credentials, DecodedDates, OriginalDateEncoder
from .exceptions import (
    DateCloakError,
    KeyDerivationFailure,
    EncryptionFailure,
    AuthenticationFailure,
    FormatError,
    ConfigurationError
)
from .record import DateRecord
from .redact import CommitDateProvider, CommitDateResult
from .trailer import PREFIX, attach, contains_trailer, detach, extract

__all__ = [
    "derive_key",
    "generate_salt",
    "encode_salt",
    "decode_salt",
    "encrypt",
    "decrypt",
    "CipherEnvelope",
    "Credentials",
    "DecodedDates",
    "OriginalDateEncoder",
    "DateCloakError",
    "KeyDerivationFailure",
    "EncryptionFailure",
    "AuthenticationFailure",
    "FormatError",
    "ConfigurationError",
    "DateRecord",
    "CommitDateProvider",
    "CommitDateResult",
    "PREFIX",
    "attach",
    "contains_trailer",
    "detach",
    "extract"
]
