"""Account stores the gate reads users from and writes secrets to."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from psycopg import sql

from totp2fa import db
from totp2fa.errors import AccountNotFound
from totp2fa.models import Account

if TYPE_CHECKING:
    from totp2fa.config import GateOptions

logger = logging.getLogger(__name__)


class AccountStore(Protocol):
    async def get(self, account_id: str) -> Account:
        """Return the full record. Raises AccountNotFound if absent."""
        ...

    async def patch(self, account_id: str, fields: dict[str, Any]) -> Account:
        """Update only ``fields`` and return the updated record."""
        ...


class MemoryAccountStore:
    """In-process store keyed by account id."""

    def __init__(self, account_model: type[Account] = Account) -> None:
        self.account_model = account_model
        self._records: dict[str, dict[str, Any]] = {}
        self.patch_calls = 0

    async def create(self, data: dict[str, Any]) -> Account:
        account = self.account_model.model_validate(data)
        self._records[account.id] = account.model_dump()
        return account

    async def get(self, account_id: str) -> Account:
        record = self._records.get(account_id)
        if record is None:
            raise AccountNotFound(account_id)
        return self.account_model.model_validate(record)

    async def patch(self, account_id: str, fields: dict[str, Any]) -> Account:
        record = self._records.get(account_id)
        if record is None:
            raise AccountNotFound(account_id)
        self.patch_calls += 1
        updated = {**record, **fields}
        self._records[account_id] = updated
        return self.account_model.model_validate(updated)


class PostgresAccountStore:
    """Accounts in a Postgres table, one column per account field."""

    def __init__(self, table: str = "users", account_model: type[Account] = Account) -> None:
        self.table = table
        self.account_model = account_model

    @classmethod
    def from_options(cls, options: GateOptions) -> PostgresAccountStore:
        return cls(table=options.users_service, account_model=options.account_model)

    async def get(self, account_id: str) -> Account:
        query = sql.SQL("SELECT * FROM {} WHERE id = %s").format(sql.Identifier(self.table))
        row = await db.execute_one(query, (str(account_id),))
        if row is None:
            raise AccountNotFound(account_id)
        return self.account_model.model_validate(_stringify_id(row))

    async def patch(self, account_id: str, fields: dict[str, Any]) -> Account:
        if not fields:
            return await self.get(account_id)
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(name)) for name in fields
        )
        query = sql.SQL("UPDATE {} SET {} WHERE id = %s RETURNING *").format(
            sql.Identifier(self.table), assignments
        )
        row = await db.execute_one(query, (*fields.values(), str(account_id)))
        if row is None:
            raise AccountNotFound(account_id)
        logger.debug("Patched %s in %s for account %s", ", ".join(fields), self.table, account_id)
        return self.account_model.model_validate(_stringify_id(row))


def _stringify_id(row: dict[str, Any]) -> dict[str, Any]:
    # UUID / integer primary keys
    return {**row, "id": str(row["id"])}
