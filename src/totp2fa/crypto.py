"""AES-256-GCM encryption for TOTP secrets at rest, and the codecs built on it."""

from __future__ import annotations

import base64
import binascii
import os
from abc import ABC, abstractmethod

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from totp2fa.errors import SecretDecodeError

_NONCE_SIZE = 12  # 96-bit nonce for AES-GCM
_KEY_SIZE = 32


def generate_master_key() -> str:
    """Return a fresh base64-encoded 256-bit key."""
    return base64.b64encode(os.urandom(_KEY_SIZE)).decode()


def _decode_key(raw: str) -> bytes:
    if not raw:
        raise RuntimeError("TOTP2FA_MASTER_KEY not set")
    try:
        key = base64.b64decode(raw, validate=True)
    except binascii.Error as e:
        raise ValueError("TOTP2FA_MASTER_KEY is not valid base64") from e
    if len(key) != _KEY_SIZE:
        raise ValueError("TOTP2FA_MASTER_KEY must be 32 bytes (base64-encoded)")
    return key


def encrypt(plaintext: str, master_key: str) -> str:
    """Encrypt a string. Returns base64(nonce + ciphertext)."""
    key = _decode_key(master_key)
    nonce = os.urandom(_NONCE_SIZE)
    ct = AESGCM(key).encrypt(nonce, plaintext.encode(), None)
    return base64.b64encode(nonce + ct).decode()


def decrypt(token: str, master_key: str) -> str:
    """Decrypt a base64(nonce + ciphertext) token back to plaintext."""
    key = _decode_key(master_key)
    raw = base64.b64decode(token)
    nonce, ct = raw[:_NONCE_SIZE], raw[_NONCE_SIZE:]
    return AESGCM(key).decrypt(nonce, ct, None).decode()


class SecretCodec(ABC):
    """Transform applied to a TOTP secret before storage and after reading it back."""

    @abstractmethod
    def encode(self, secret: str) -> str: ...

    @abstractmethod
    def decode(self, stored: str) -> str:
        """Return the plain secret. Raises SecretDecodeError on unreadable data."""


class IdentityCodec(SecretCodec):
    """Stores secrets as-is."""

    def encode(self, secret: str) -> str:
        return secret

    def decode(self, stored: str) -> str:
        return stored

    def __repr__(self) -> str:
        return "IdentityCodec()"


class AesGcmCodec(SecretCodec):
    """Encrypts secrets with AES-256-GCM under a single master key."""

    def __init__(self, master_key: str) -> None:
        _decode_key(master_key)  # fail fast on a bad key
        self._master_key = master_key

    def encode(self, secret: str) -> str:
        return encrypt(secret, self._master_key)

    def decode(self, stored: str) -> str:
        try:
            return decrypt(stored, self._master_key)
        except (InvalidTag, ValueError, binascii.Error) as e:
            raise SecretDecodeError() from e

    def __repr__(self) -> str:
        return "AesGcmCodec(master_key=***)"
