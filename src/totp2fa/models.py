"""Pydantic models for data flowing through the second-factor gate."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Tag


class HookType(StrEnum):
    BEFORE = "before"
    AFTER = "after"


class Account(BaseModel):
    """A user record as returned by the account store."""

    model_config = ConfigDict(extra="allow")

    id: str
    email: str | None = None
    totp2fa_secret: str | None = None
    totp2fa_required: bool | None = None

    @property
    def label(self) -> str:
        return self.email or self.id


class RequestPayload(BaseModel):
    """Caller-submitted login data. Credentials pass through untouched."""

    model_config = ConfigDict(extra="allow")

    strategy: str | None = None
    secret: str | None = None  # enrollment candidate
    token: str | None = None


class AuthenticationOutcome(BaseModel):
    """Result of a successful primary-credential login."""

    model_config = ConfigDict(extra="allow")

    user: Account | None = None


class ProvisioningBundle(BaseModel):
    """Enrollment material: never persisted, returned once."""

    qr: str
    secret: str


class VerifiedOutcome(BaseModel):
    """Login result returned after enrollment or verification.

    ``user`` holds the account data without the secret attribute.
    """

    model_config = ConfigDict(extra="allow")

    user: dict[str, Any]

    @classmethod
    def redact(cls, outcome: AuthenticationOutcome, secret_field: str) -> VerifiedOutcome:
        extra = outcome.model_dump(exclude={"user"})
        user = outcome.user.model_dump(exclude={secret_field}) if outcome.user else {}
        return cls(user=user, **extra)


def _result_kind(value: Any) -> str:
    # host dicts are never read as a VerifiedOutcome
    if isinstance(value, VerifiedOutcome):
        return "verified"
    if isinstance(value, ProvisioningBundle):
        return "provisioning"
    if isinstance(value, dict) and "user" not in value and {"qr", "secret"} <= value.keys():
        return "provisioning"
    return "outcome"


HookResult = Annotated[
    Union[
        Annotated[AuthenticationOutcome, Tag("outcome")],
        Annotated[ProvisioningBundle, Tag("provisioning")],
        Annotated[VerifiedOutcome, Tag("verified")],
    ],
    Discriminator(_result_kind),
]


class HookContext(BaseModel):
    """Pipeline context handed to the gate by the host authentication service."""

    type: HookType
    method: str
    data: RequestPayload | None = None
    result: HookResult | None = None
