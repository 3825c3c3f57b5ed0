"""Tests for key derivation and the authenticated cipher."""

import pytest
from argon2.exceptions import HashingError

from datecloak import core
from datecloak.core import (
    CipherEnvelope,
    decode_salt,
    decrypt,
    derive_key,
    encode_salt,
    encrypt,
    generate_salt,
    KEY_SIZE,
    NONCE_SIZE,
    SALT_SIZE,
    TAG_SIZE,
)
from datecloak.exceptions import (
    AuthenticationFailure,
    EncryptionFailure,
    FormatError,
    KeyDerivationFailure,
)

from conftest import PASSWORD, SALT


def test_derive_key_is_deterministic(key):
    """Same password and salt always give the same key."""
    assert derive_key(PASSWORD, SALT) == key
    assert len(key) == KEY_SIZE


def test_derive_key_depends_on_password_and_salt(key, other_key):
    assert key != other_key
    assert derive_key("wrong", SALT) != key


@pytest.mark.parametrize("salt", [b"", b"short", bytes(SALT_SIZE + 1)])
def test_derive_key_rejects_bad_salt(salt):
    with pytest.raises(KeyDerivationFailure):
        derive_key(PASSWORD, salt)


@pytest.mark.parametrize("error", [HashingError("boom"), MemoryError()])
def test_derive_key_surfaces_primitive_failure(monkeypatch, error):
    """A failing hash must raise, never hand back a zero key."""
    def failing_hash(**kwargs):
        raise error

    monkeypatch.setattr(core, "hash_secret_raw", failing_hash)
    with pytest.raises(KeyDerivationFailure) as excinfo:
        derive_key(PASSWORD, SALT)
    assert excinfo.value.__cause__ is error


def test_derive_key_rejects_short_output(monkeypatch):
    monkeypatch.setattr(core, "hash_secret_raw", lambda **kwargs: b"\x00" * 8)
    with pytest.raises(KeyDerivationFailure):
        derive_key(PASSWORD, SALT)


def test_generate_salt():
    first, second = generate_salt(), generate_salt()
    assert len(first) == SALT_SIZE
    assert first != second


def test_salt_text_roundtrip():
    salt = generate_salt()
    assert decode_salt(encode_salt(salt)) == salt


@pytest.mark.parametrize("text", ["not base64!", "AAAA", "ünïcode"])
def test_decode_salt_rejects_bad_text(text):
    with pytest.raises(KeyDerivationFailure):
        decode_salt(text)


def test_encrypt_decrypt(key):
    envelope = encrypt(key, b"1614935700 +0100;1614935700 +0100")
    assert len(envelope.nonce) == NONCE_SIZE
    assert len(envelope.ciphertext) == len(b"1614935700 +0100;1614935700 +0100") + TAG_SIZE
    assert decrypt(key, envelope) == b"1614935700 +0100;1614935700 +0100"


def test_empty_plaintext_is_distinct_from_failure(key, other_key):
    """An empty payload decrypts to b'' while a wrong key raises."""
    envelope = encrypt(key, b"")
    assert decrypt(key, envelope) == b""
    with pytest.raises(AuthenticationFailure):
        decrypt(other_key, envelope)


def test_tampered_ciphertext_fails(key):
    envelope = encrypt(key, b"payload")
    flipped = bytes([envelope.ciphertext[0] ^ 0x01]) + envelope.ciphertext[1:]
    with pytest.raises(AuthenticationFailure):
        decrypt(key, CipherEnvelope(envelope.nonce, flipped))


def test_tampered_nonce_fails(key):
    envelope = encrypt(key, b"payload")
    flipped = bytes([envelope.nonce[0] ^ 0x01]) + envelope.nonce[1:]
    with pytest.raises(AuthenticationFailure):
        decrypt(key, CipherEnvelope(flipped, envelope.ciphertext))


def test_encrypt_rejects_bad_key():
    with pytest.raises(EncryptionFailure):
        encrypt(b"\x00" * 16, b"payload")


def test_encrypt_surfaces_cipher_failure(monkeypatch, key):
    """No sentinel string: a cipher failure is an exception."""
    class BrokenAESGCM:
        def __init__(self, key):
            pass

        def encrypt(self, nonce, data, associated_data):
            raise OverflowError("Data or associated data too long")

    monkeypatch.setattr(core, "AESGCM", BrokenAESGCM)
    with pytest.raises(EncryptionFailure):
        encrypt(key, b"payload")


def test_decrypt_rejects_bad_key():
    envelope = CipherEnvelope(bytes(NONCE_SIZE), bytes(TAG_SIZE))
    with pytest.raises(AuthenticationFailure):
        decrypt(b"short", envelope)


def test_envelope_layout(key):
    """Wire form is nonce || ciphertext || tag."""
    envelope = encrypt(key, b"abc")
    raw = envelope.to_bytes()
    assert raw[:NONCE_SIZE] == envelope.nonce
    assert raw[NONCE_SIZE:] == envelope.ciphertext
    assert CipherEnvelope.from_text(envelope.to_text()) == envelope


def test_envelope_too_short():
    with pytest.raises(FormatError):
        CipherEnvelope.from_bytes(bytes(NONCE_SIZE + TAG_SIZE - 1))


@pytest.mark.parametrize("text", ["@@@@", "abc", "é" * 40])
def test_envelope_bad_text(text):
    with pytest.raises(FormatError):
        CipherEnvelope.from_text(text)
