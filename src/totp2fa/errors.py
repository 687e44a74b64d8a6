"""Errors raised by the second-factor gate.

Every error carries a stable ``kind`` for programmatic checks and a
human-readable ``message``. ``status_code`` is the HTTP status a transport
layer should map the error to.
"""

from __future__ import annotations

from typing import Any


class Totp2faError(Exception):
    """Base exception for all totp2fa errors."""

    kind = "error"
    status_code = 500

    def __init__(
        self,
        message: str = "An error occurred",
        kind: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        if kind is not None:
            self.kind = kind
        self.details = details or {}
        super().__init__(self.message)


class InvocationError(Totp2faError):
    """The gate was wired into the wrong place of the pipeline."""

    kind = "invocation"


# =============================================================================
# Client errors (400)
# =============================================================================


class BadRequest(Totp2faError):
    """Base class for rejected requests."""

    kind = "bad_request"
    status_code = 400


class ValidationError(BadRequest):
    """Missing or wrong token, or a secret that is already stored."""

    kind = "validation"

    @classmethod
    def token_required(cls) -> ValidationError:
        return cls("Token required.", "token_required")

    @classmethod
    def invalid_token(cls) -> ValidationError:
        return cls("Invalid token.", "invalid_token")

    @classmethod
    def secret_already_saved(cls) -> ValidationError:
        return cls("Secret already saved.", "secret_already_saved")

    @classmethod
    def no_token(cls) -> ValidationError:
        return cls("No token.", "no_token")

    @classmethod
    def no_secret(cls) -> ValidationError:
        return cls("No secret.", "no_secret")


class ResolutionError(BadRequest):
    """Raised when the authenticated account cannot be re-fetched."""

    kind = "account_not_found"

    def __init__(self, account_id: str | None = None) -> None:
        details = {"account_id": str(account_id)} if account_id else {}
        super().__init__("Account not found.", details=details)


class PersistenceError(BadRequest):
    """Raised when the account store rejects the secret update."""

    kind = "persistence"

    def __init__(self, account_id: str | None = None) -> None:
        details = {"account_id": str(account_id)} if account_id else {}
        super().__init__("Could not save secret.", details=details)


class AccountNotFound(LookupError):
    """Raised by account stores when no record has the requested id."""


class SecretDecodeError(Totp2faError):
    """Raised by a codec when stored secret data cannot be decoded."""

    kind = "secret_decode"

    def __init__(self) -> None:
        super().__init__("Stored secret could not be decoded.")
