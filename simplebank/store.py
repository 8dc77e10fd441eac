"""Transactional access to the bank's database."""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from os import PathLike
from typing import Any, Callable, Iterator, Sequence, TypeVar

from .models import Account, Entry, Transfer
from .queries import Queries, create_schema

T = TypeVar("T")


@dataclass(frozen=True)
class TransferTxResult:
    """Everything a money transfer created or changed."""

    transfer: Transfer
    from_account: Account
    to_account: Account
    from_entry: Entry
    to_entry: Entry

    def to_dict(self) -> dict[str, Any]:
        """Return the result as a JSON-ready mapping."""
        return {
            "transfer": self.transfer.to_dict(),
            "from_account": self.from_account.to_dict(),
            "to_account": self.to_account.to_dict(),
            "from_entry": self.from_entry.to_dict(),
            "to_entry": self.to_entry.to_dict(),
        }


class Store(Queries):
    """All queries plus transactions over one database.

    The store may be shared between threads; statements and transactions are
    serialised so that a transaction never sees another thread's writes half
    done.
    """

    def __init__(self, database: str | PathLike[str] = ":memory:") -> None:
        connection = sqlite3.connect(database, check_same_thread=False)
        super().__init__(connection)
        self._lock = threading.RLock()
        create_schema(connection)

    def _write(self, sql: str, params: Sequence[Any]) -> sqlite3.Cursor:
        with self._lock:
            return super()._write(sql, params)

    def _one(
        self, sql: str, params: Sequence[Any], build: Callable[[Sequence[Any]], T], what: str
    ) -> T:
        with self._lock:
            return super()._one(sql, params, build, what)

    def _many(
        self, sql: str, params: Sequence[Any], build: Callable[[Sequence[Any]], T]
    ) -> list[T]:
        with self._lock:
            return super()._many(sql, params, build)

    @contextmanager
    def transaction(self) -> Iterator[Queries]:
        """Run the block in one transaction, rolled back if the block raises."""
        with self._lock:
            self.connection.execute("BEGIN IMMEDIATE")
            try:
                yield Queries(self.connection)
            except BaseException as err:
                try:
                    self.connection.rollback()
                except sqlite3.Error as rb_err:
                    raise sqlite3.Error(f"tx err: {err}, rb err: {rb_err}") from err
                raise
            else:
                self.connection.commit()

    def transfer_tx(
        self, from_account_id: int, to_account_id: int, amount: int
    ) -> TransferTxResult:
        """Move ``amount`` between two accounts in a single transaction.

        Records the transfer and one entry per account, then updates both
        balances, always touching the account with the smaller id first.
        """
        with self.transaction() as q:
            transfer = q.create_transfer(from_account_id, to_account_id, amount)
            from_entry = q.create_entry(from_account_id, -amount)
            to_entry = q.create_entry(to_account_id, amount)
            if from_account_id < to_account_id:
                from_account = q.update_account_balance(from_account_id, -amount)
                to_account = q.update_account_balance(to_account_id, amount)
            else:
                to_account = q.update_account_balance(to_account_id, amount)
                from_account = q.update_account_balance(from_account_id, -amount)
        return TransferTxResult(
            transfer=transfer,
            from_account=from_account,
            to_account=to_account,
            from_entry=from_entry,
            to_entry=to_entry,
        )

    def close(self) -> None:
        """Close the underlying database connection."""
        with self._lock:
            self.connection.close()

    def __enter__(self) -> Store:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()