"""Tests for AES-256-GCM encryption and secret codecs."""

from __future__ import annotations

import base64
import os

import pytest

from totp2fa.auth.totp import generate_secret
from totp2fa.crypto import (
    AesGcmCodec,
    IdentityCodec,
    decrypt,
    encrypt,
    generate_master_key,
)
from totp2fa.errors import SecretDecodeError


def test_encrypt_decrypt():
    key = base64.b64encode(os.urandom(32)).decode()

    plaintext = "JBSWY3DPEHPK3PXP"
    token = encrypt(plaintext, key)
    assert token != plaintext
    assert decrypt(token, key) == plaintext


def test_encrypt_produces_different_ciphertexts():
    key = generate_master_key()

    # Same plaintext should produce different ciphertexts (random nonce)
    t1 = encrypt("test", key)
    t2 = encrypt("test", key)
    assert t1 != t2


def test_missing_key_raises():
    with pytest.raises(RuntimeError, match="TOTP2FA_MASTER_KEY not set"):
        encrypt("test", "")


def test_short_key_raises():
    with pytest.raises(ValueError, match="32 bytes"):
        AesGcmCodec(base64.b64encode(b"short").decode())


def test_identity_codec():
    codec = IdentityCodec()
    assert codec.encode("ABC") == "ABC"
    assert codec.decode("ABC") == "ABC"


def test_aes_codec_round_trip_for_generated_secrets():
    codec = AesGcmCodec(generate_master_key())
    for _ in range(20):
        secret = generate_secret()
        stored = codec.encode(secret)
        assert stored != secret
        assert codec.decode(stored) == secret


def test_aes_codec_wrong_key():
    stored = AesGcmCodec(generate_master_key()).encode(generate_secret())
    with pytest.raises(SecretDecodeError):
        AesGcmCodec(generate_master_key()).decode(stored)


@pytest.mark.parametrize("stored", ["not base64!", "", base64.b64encode(b"tiny").decode()])
def test_aes_codec_corrupt_data(stored):
    with pytest.raises(SecretDecodeError):
        AesGcmCodec(generate_master_key()).decode(stored)


def test_aes_codec_repr_hides_key():
    key = generate_master_key()
    assert key not in repr(AesGcmCodec(key))
