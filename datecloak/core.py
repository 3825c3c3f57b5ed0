#!/usr/bin/env python3
"""
datecloak core
Password-based key derivation (Argon2id) and authenticated encryption
(AES-256-GCM) of short payloads.
"""

import base64
import binascii
import secrets
from dataclasses import dataclass

from argon2.exceptions import HashingError
from argon2.low_level import hash_secret_raw, Type
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .exceptions import (
    AuthenticationFailure,
    EncryptionFailure,
    FormatError,
    KeyDerivationFailure,
)

__version__ = "1.0.0"

# Argon2id "interactive" limits, as published by libsodium
KDF_TIME_COST = 2
KDF_MEMORY_COST = 64 * 1024  # KiB, 64 MB
KDF_PARALLELISM = 1

SALT_SIZE = 16
KEY_SIZE = 32  # AES-256
NONCE_SIZE = 12  # 96 bits, recommended for AES-GCM
TAG_SIZE = 16


def derive_key(password: str, salt: bytes) -> bytes:
    """
    Derive a symmetric key from a password (Argon2id key derivation).

    Args:
        password: User password (UTF-8 encoded before hashing)
        salt: SALT_SIZE-byte salt from generate_salt()

    Returns:
        KEY_SIZE-byte key; identical inputs always give the identical key

    Raises:
        KeyDerivationFailure: If the salt has the wrong size or the
            hashing primitive fails
    """
    if not isinstance(salt, (bytes, bytearray)) or len(salt) != SALT_SIZE:
        raise KeyDerivationFailure(f"Salt must be exactly {SALT_SIZE} bytes")

    try:
        key = hash_secret_raw(
            secret=password.encode("utf-8"),
            salt=bytes(salt),
            time_cost=KDF_TIME_COST,
            memory_cost=KDF_MEMORY_COST,
            parallelism=KDF_PARALLELISM,
            hash_len=KEY_SIZE,
            type=Type.ID
        )
    except (HashingError, MemoryError, ValueError) as exc:
        raise KeyDerivationFailure(f"Password hashing failed: {exc}") from exc

    if len(key) != KEY_SIZE:
        raise KeyDerivationFailure("Password hashing returned a short key")
    return key


def generate_salt() -> bytes:
    """Fresh random salt. Generate a new one whenever the password changes."""
    return secrets.token_bytes(SALT_SIZE)


def encode_salt(salt: bytes) -> str:
    return base64.b64encode(salt).decode("ascii")


def decode_salt(text: str) -> bytes:
    """Decode a base64 salt, raising KeyDerivationFailure when unusable."""
    try:
        salt = base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise KeyDerivationFailure("Salt is not valid base64") from exc
    if len(salt) != SALT_SIZE:
        raise KeyDerivationFailure(f"Salt must be exactly {SALT_SIZE} bytes")
    return salt


@dataclass(frozen=True)
class CipherEnvelope:
    """Nonce plus ciphertext (the ciphertext ends with the GCM tag)."""

    nonce: bytes
    ciphertext: bytes

    def to_bytes(self) -> bytes:
        return self.nonce + self.ciphertext

    @classmethod
    def from_bytes(cls, data: bytes) -> "CipherEnvelope":
        if len(data) < NONCE_SIZE + TAG_SIZE:
            raise FormatError("Envelope too short")
        return cls(nonce=data[:NONCE_SIZE], ciphertext=data[NONCE_SIZE:])

    def to_text(self) -> str:
        return base64.b64encode(self.to_bytes()).decode("ascii")

    @classmethod
    def from_text(cls, text: str) -> "CipherEnvelope":
        try:
            data = base64.b64decode(text.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as exc:
            raise FormatError("Envelope is not valid base64") from exc
        return cls.from_bytes(data)


def encrypt(key: bytes, plaintext: bytes) -> CipherEnvelope:
    """
    Encrypt plaintext under key with a fresh random nonce.

    Args:
        key: KEY_SIZE-byte key from derive_key()
        plaintext: Bytes to protect

    Returns:
        CipherEnvelope; two calls with the same inputs never share a nonce

    Raises:
        EncryptionFailure: If the cipher cannot produce a ciphertext
    """
    if len(key) != KEY_SIZE:
        raise EncryptionFailure(f"Key must be exactly {KEY_SIZE} bytes")

    nonce = secrets.token_bytes(NONCE_SIZE)
    try:
        ciphertext = AESGCM(key).encrypt(nonce, plaintext, None)
    except (OverflowError, ValueError, TypeError) as exc:
        raise EncryptionFailure(f"Encryption failed: {exc}") from exc
    return CipherEnvelope(nonce=nonce, ciphertext=ciphertext)


def decrypt(key: bytes, envelope: CipherEnvelope) -> bytes:
    """
    Verify and decrypt an envelope.

    Raises:
        AuthenticationFailure: Wrong key, or the envelope was altered
    """
    if len(key) != KEY_SIZE:
        raise AuthenticationFailure("Key has the wrong size")
    try:
        return AESGCM(key).decrypt(envelope.nonce, envelope.ciphertext, None)
    except InvalidTag as exc:
        raise AuthenticationFailure("Tag verification failed") from exc
