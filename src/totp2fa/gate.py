"""Second-factor gate for the login pipeline.

Runs after the authentication service has accepted a password login and
decides, from the submitted payload and the stored account, what happens next:

- provision: no token, no candidate secret and nothing stored yet. The result
  is replaced by a fresh QR code and secret; nothing is written.
- enroll: a candidate secret plus a token for it. The secret is saved once.
- verify: a token checked against the stored secret.

After enroll or verify the secret field is stripped from the returned user.
"""

from __future__ import annotations

import logging
from typing import Any

from totp2fa.auth.qr import get_qr_code_secret
from totp2fa.auth.totp import verify_code
from totp2fa.config import GateOptions
from totp2fa.errors import (
    AccountNotFound,
    InvocationError,
    PersistenceError,
    ResolutionError,
    ValidationError,
)
from totp2fa.models import (
    Account,
    AuthenticationOutcome,
    HookContext,
    HookType,
    RequestPayload,
    VerifiedOutcome,
)
from totp2fa.store import AccountStore

logger = logging.getLogger(__name__)

HOOK_NAME = "totp2fa"
ALLOWED_METHODS = ("create",)


class SecondFactorGate:
    """TOTP second factor, to be called after ``create`` on the authentication service."""

    def __init__(self, store: AccountStore, options: GateOptions | None = None) -> None:
        self.store = store
        self.options = options or GateOptions()

    async def __call__(self, context: HookContext) -> HookContext:
        _check_context(context)

        data, result = context.data, context.result
        if data is None or result is None or data.strategy != self.options.strategy:
            return context
        if not isinstance(result, AuthenticationOutcome) or result.user is None:
            return context

        account = await self._resolve(result.user.id)

        if self.options.required_of(account) is False:
            logger.debug("2FA not required for account %s", account.id)
            return context

        stored = self.options.secret_of(account)

        if not data.token and not data.secret and not stored:
            logger.info("Provisioning TOTP secret for account %s", account.id)
            context.result = get_qr_code_secret(account, self.options)
            return context

        if data.secret:
            await self._enroll(account, data, stored)
        else:
            self._verify(account, data, stored)

        context.result = VerifiedOutcome.redact(result, self.options.secret_field_name)
        return context

    async def _resolve(self, account_id: str) -> Account:
        try:
            return await self.store.get(account_id)
        except AccountNotFound as e:
            logger.info("Account %s not found during 2FA check", account_id)
            raise ResolutionError(account_id) from e
        except Exception as e:
            logger.warning("Could not fetch account %s", account_id, exc_info=True)
            raise ResolutionError(account_id) from e

    async def _enroll(self, account: Account, data: RequestPayload, stored: str | None) -> None:
        if not data.token:
            raise ValidationError.token_required()
        if not verify_code(data.token, data.secret, self.options.valid_window):
            logger.info("Rejected enrollment token for account %s", account.id)
            raise ValidationError.invalid_token()
        if stored:
            logger.info("Account %s already has a TOTP secret", account.id)
            raise ValidationError.secret_already_saved()

        try:
            encoded = self.options.codec.encode(data.secret)
            await self.store.patch(account.id, {self.options.secret_field_name: encoded})
        except Exception as e:
            logger.warning("Could not save TOTP secret for account %s", account.id, exc_info=True)
            raise PersistenceError(account.id) from e
        logger.info("Saved TOTP secret for account %s", account.id)

    def _verify(self, account: Account, data: RequestPayload, stored: str | None) -> None:
        if not data.token:
            raise ValidationError.token_required()
        secret = None
        if stored:
            try:
                secret = self.options.codec.decode(stored)
            except Exception as e:
                logger.warning(
                    "Stored TOTP secret for account %s could not be decoded", account.id, exc_info=True
                )
                raise ValidationError.invalid_token() from e
        if not verify_code(data.token, secret, self.options.valid_window):
            logger.info("Rejected token for account %s", account.id)
            raise ValidationError.invalid_token()


def _check_context(context: HookContext) -> None:
    if context.type != HookType.AFTER:
        raise InvocationError(f"The '{HOOK_NAME}' hook can only be used as a 'after' hook.")
    if context.method not in ALLOWED_METHODS:
        methods = '["' + '","'.join(ALLOWED_METHODS) + '"]'
        raise InvocationError(
            f"The '{HOOK_NAME}' hook can only be used on the '{methods}' service method(s)."
        )


def totp2fa(store: AccountStore, **overrides: Any) -> SecondFactorGate:
    """Build a gate with ``overrides`` merged over the default options."""
    return SecondFactorGate(store, GateOptions(**overrides))
