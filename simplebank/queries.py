"""SQL queries over the accounts, entries and transfers tables."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Any, Callable, Sequence, TypeVar

from .models import Account, Entry, Transfer

T = TypeVar("T")

SCHEMA = """
CREATE TABLE IF NOT EXISTS accounts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    owner TEXT NOT NULL,
    balance INTEGER NOT NULL,
    currency TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    account_id INTEGER NOT NULL REFERENCES accounts (id),
    amount INTEGER NOT NULL,
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS transfers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    from_account_id INTEGER NOT NULL REFERENCES accounts (id),
    to_account_id INTEGER NOT NULL REFERENCES accounts (id),
    amount INTEGER NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS accounts_owner_idx ON accounts (owner);
CREATE INDEX IF NOT EXISTS entries_account_id_idx ON entries (account_id);
CREATE INDEX IF NOT EXISTS transfers_from_idx ON transfers (from_account_id);
CREATE INDEX IF NOT EXISTS transfers_to_idx ON transfers (to_account_id);
"""

_ACCOUNT_COLUMNS = "id, owner, balance, currency, created_at"
_ENTRY_COLUMNS = "id, account_id, amount, created_at"
_TRANSFER_COLUMNS = "id, from_account_id, to_account_id, amount, created_at"


class NotFoundError(LookupError):
    """Raised when a query that expects a row finds none."""


def create_schema(connection: sqlite3.Connection) -> None:
    """Create the tables and indexes if they do not exist yet."""
    connection.executescript(SCHEMA)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _account(row: Sequence[Any]) -> Account:
    id_, owner, balance, currency, created_at = row
    return Account(id_, owner, balance, currency, datetime.fromisoformat(created_at))


def _entry(row: Sequence[Any]) -> Entry:
    id_, account_id, amount, created_at = row
    return Entry(id_, account_id, amount, datetime.fromisoformat(created_at))


def _transfer(row: Sequence[Any]) -> Transfer:
    id_, from_id, to_id, amount, created_at = row
    return Transfer(id_, from_id, to_id, amount, datetime.fromisoformat(created_at))


def _check_page(limit: int, offset: int) -> None:
    if limit < 0:
        raise ValueError("LIMIT must not be negative")
    if offset < 0:
        raise ValueError("OFFSET must not be negative")


class Queries:
    """Typed queries over one database connection.

    Writes made outside an open transaction are committed at once; inside a
    transaction they are left for the caller to commit or roll back.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self.connection = connection

    def _write(self, sql: str, params: Sequence[Any]) -> sqlite3.Cursor:
        started = self.connection.in_transaction
        cursor = self.connection.execute(sql, params)
        if not started and self.connection.in_transaction:
            self.connection.commit()
        return cursor

    def _one(
        self, sql: str, params: Sequence[Any], build: Callable[[Sequence[Any]], T], what: str
    ) -> T:
        row = self.connection.execute(sql, params).fetchone()
        if row is None:
            raise NotFoundError(f"{what} not found: no rows in result set")
        return build(row)

    def _many(
        self, sql: str, params: Sequence[Any], build: Callable[[Sequence[Any]], T]
    ) -> list[T]:
        return [build(row) for row in self.connection.execute(sql, params)]

    # accounts

    def create_account(self, owner: str, balance: int, currency: str) -> Account:
        """Insert an account and return it."""
        cursor = self._write(
            "INSERT INTO accounts (owner, balance, currency, created_at) VALUES (?, ?, ?, ?)",
            (owner, balance, currency, _now()),
        )
        return self.get_account(cursor.lastrowid)

    def get_account(self, account_id: int) -> Account:
        """Return the account with the given id or raise NotFoundError."""
        return self._one(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE id = ? LIMIT 1",
            (account_id,),
            _account,
            f"account {account_id}",
        )

    def get_account_for_update(self, account_id: int) -> Account:
        """Return the account for a later update within the current transaction."""
        return self.get_account(account_id)

    def list_accounts(self, limit: int, offset: int) -> list[Account]:
        """Return a page of accounts ordered by id."""
        _check_page(limit, offset)
        return self._many(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts ORDER BY id LIMIT ? OFFSET ?",
            (limit, offset),
            _account,
        )

    def update_account(self, account_id: int, balance: int) -> Account:
        """Set an account's balance and return the updated account."""
        cursor = self._write(
            "UPDATE accounts SET balance = ? WHERE id = ?", (balance, account_id)
        )
        if cursor.rowcount == 0:
            raise NotFoundError(f"account {account_id} not found: no rows in result set")
        return self.get_account(account_id)

    def update_account_balance(self, account_id: int, amount: int) -> Account:
        """Add ``amount`` to an account's balance and return the updated account."""
        cursor = self._write(
            "UPDATE accounts SET balance = balance + ? WHERE id = ?", (amount, account_id)
        )
        if cursor.rowcount == 0:
            raise NotFoundError(f"account {account_id} not found: no rows in result set")
        return self.get_account(account_id)

    def delete_account(self, account_id: int) -> None:
        """Delete an account; deleting a missing account is not an error."""
        self._write("DELETE FROM accounts WHERE id = ?", (account_id,))

    # entries

    def create_entry(self, account_id: int, amount: int) -> Entry:
        """Insert an entry and return it."""
        cursor = self._write(
            "INSERT INTO entries (account_id, amount, created_at) VALUES (?, ?, ?)",
            (account_id, amount, _now()),
        )
        return self.get_entry(cursor.lastrowid)

    def get_entry(self, entry_id: int) -> Entry:
        """Return the entry with the given id or raise NotFoundError."""
        return self._one(
            f"SELECT {_ENTRY_COLUMNS} FROM entries WHERE id = ? LIMIT 1",
            (entry_id,),
            _entry,
            f"entry {entry_id}",
        )

    def list_entries(self, account_id: int, limit: int, offset: int) -> list[Entry]:
        """Return a page of one account's entries ordered by id."""
        _check_page(limit, offset)
        return self._many(
            f"SELECT {_ENTRY_COLUMNS} FROM entries WHERE account_id = ? "
            "ORDER BY id LIMIT ? OFFSET ?",
            (account_id, limit, offset),
            _entry,
        )

    # transfers

    def create_transfer(self, from_account_id: int, to_account_id: int, amount: int) -> Transfer:
        """Insert a transfer record and return it."""
        cursor = self._write(
            "INSERT INTO transfers (from_account_id, to_account_id, amount, created_at) "
            "VALUES (?, ?, ?, ?)",
            (from_account_id, to_account_id, amount, _now()),
        )
        return self.get_transfer(cursor.lastrowid)

    def get_transfer(self, transfer_id: int) -> Transfer:
        """Return the transfer with the given id or raise NotFoundError."""
        return self._one(
            f"SELECT {_TRANSFER_COLUMNS} FROM transfers WHERE id = ? LIMIT 1",
            (transfer_id,),
            _transfer,
            f"transfer {transfer_id}",
        )

    def list_transfers(
        self, from_account_id: int, to_account_id: int, limit: int, offset: int
    ) -> list[Transfer]:
        """Return a page of transfers from or to the given accounts, ordered by id."""
        _check_page(limit, offset)
        return self._many(
            f"SELECT {_TRANSFER_COLUMNS} FROM transfers "
            "WHERE from_account_id = ? OR to_account_id = ? ORDER BY id LIMIT ? OFFSET ?",
            (from_account_id, to_account_id, limit, offset),
            _transfer,
        )