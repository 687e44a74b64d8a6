"""Tests for the command line entry point."""

from __future__ import annotations

import base64

import pyotp
import pytest

from totp2fa.__main__ import main


def test_keygen(capsys):
    main(["keygen"])
    key = capsys.readouterr().out.strip()
    assert len(base64.b64decode(key)) == 32


def test_provision(capsys):
    main(["provision", "--email", "user@example.com", "--issuer", "Acme", "--no-qr"])
    out = capsys.readouterr().out
    assert "otpauth://totp/Acme:user%40example.com" in out
    assert "qr:" not in out


def test_code(capsys):
    secret = pyotp.random_base32()
    main(["code", "--secret", secret])
    code = capsys.readouterr().out.strip()
    assert pyotp.TOTP(secret).verify(code, valid_window=1)


def test_verify_valid(capsys):
    secret = pyotp.random_base32()
    with pytest.raises(SystemExit) as exc:
        main(["verify", "--secret", secret, "--token", pyotp.TOTP(secret).now()])
    assert exc.value.code == 0
    assert capsys.readouterr().out.strip() == "valid"


def test_verify_invalid():
    with pytest.raises(SystemExit) as exc:
        main(["verify", "--secret", pyotp.random_base32(), "--token", "xxxx"])
    assert exc.value.code == 1


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 0
    assert "keygen" in capsys.readouterr().out
