"""totp2fa: TOTP second-factor gate for password logins."""

__version__ = "0.1.0"
