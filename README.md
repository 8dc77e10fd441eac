# simplebank

A small banking service. It keeps accounts, ledger entries and transfers
between accounts in an SQLite database, moves money inside a single
transaction, and serves the accounts over a JSON HTTP API built on Flask.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Data access

`simplebank.queries.Queries` wraps an `sqlite3` connection and offers one
method per query. `create_schema(connection)` creates the `accounts`,
`entries` and `transfers` tables if they do not exist yet.

```python
import sqlite3

from simplebank.queries import NotFoundError, Queries, create_schema

connection = sqlite3.connect(":memory:")
create_schema(connection)
queries = Queries(connection)

alice = queries.create_account("alice", 100, "USD")
bob = queries.create_account("bob", 50, "EUR")

queries.update_account(alice.id, 250)          # set the balance
queries.update_account_balance(bob.id, -20)    # add to the balance
queries.list_accounts(limit=5, offset=0)

try:
    queries.get_account(9999)
except NotFoundError:
    print("no such account")
```

The methods are:

- accounts: `create_account`, `get_account`, `get_account_for_update`,
  `list_accounts`, `update_account`, `update_account_balance`,
  `delete_account`
- entries: `create_entry`, `get_entry`, `list_entries`
- transfers: `create_transfer`, `get_transfer`, `list_transfers`

`get_*` and the `update_*` methods raise `NotFoundError` (a `LookupError`)
when the row does not exist; deleting a missing account is not an error.
The `list_*` methods return pages ordered by id and raise `ValueError` for
a negative limit or offset. `list_transfers` returns transfers whose source
is the first id given or whose target is the second.

Writes made outside an open transaction are committed at once; inside a
transaction they are left to the caller.

Results come back as `Account`, `Entry` and `Transfer` objects from
`simplebank.models`, frozen dataclasses whose `created_at` is a timezone-aware
`datetime`. Each has a `to_dict()` method giving its JSON form, with
`created_at` as an ISO 8601 string.

## Store and transfers

`simplebank.store.Store` opens a database (in memory by default, or the file
path given), creates the schema, and offers every query method above. It can
be shared between threads: its statements and transactions are serialised.
It is also a context manager that closes the connection on exit.

`Store.transfer_tx(from_account_id, to_account_id, amount)` runs a transfer
in one transaction: it records the transfer, a negative entry on the source
account and a positive entry on the target account, then updates both
balances, always touching the account with the smaller id first. It returns
a `TransferTxResult` holding `transfer`, `from_account`, `to_account`,
`from_entry` and `to_entry`, with a `to_dict()` of its own.

```python
from simplebank.store import Store

with Store("bank.db") as store:
    a = store.create_account("alice", 100, "USD")
    b = store.create_account("bob", 100, "USD")
    result = store.transfer_tx(a.id, b.id, 10)
    print(result.from_account.balance, result.to_account.balance)  # 90 110
```

`Store.transaction()` is a context manager that yields a `Queries` bound to
an open transaction; it commits when the block ends and rolls back if the
block raises. If any step of a transfer fails, the whole transfer is rolled
back.

Balances are not checked: a transfer may take an account below zero, and
the amount's sign and currency are not validated.

## HTTP API

`simplebank.api.Server(store)` builds a Flask application (available as
`server.app`) serving the accounts:

| Method | Path             | Body / query                          |
|--------|------------------|---------------------------------------|
| POST   | `/accounts`      | `{"owner": ..., "currency": "USD"}`   |
| GET    | `/accounts/<id>` |                                       |
| GET    | `/accounts`      | `?page_id=1&page_size=5` (5 to 10)    |
| PATCH  | `/accounts/<id>` | `{"balance": ...}` (at least 10)      |
| DELETE | `/accounts/<id>` |                                       |

New accounts start with a balance of 0. Currency must be `USD` or `EUR`, and
ids and `page_id` must be at least 1. Bad input gives 400, an unknown
account 404, and other failures 500, each with a body of the form
`{"error": "..."}`. A successful delete answers 204 with no body.

```python
from simplebank.api import Server
from simplebank.store import Store

server = Server(Store("bank.db"))
server.start("127.0.0.1:8080")
```

`start(address)` takes `host:port` (default `":8080"`); an empty host listens
on all interfaces. It runs Flask's development server.

The API covers accounts only: entries and transfers are reachable from
Python through `Store`, not over HTTP. There is no authentication and no
command-line program; a server is started from Python as shown.

## Test data

`simplebank.random` gives random values for filling a database:
`random_owner()` (six lower-case letters), `random_balance()` (1 to 1000),
`random_currency()` (`USD`, `EUR` or `IDR`), `random_string(n)` and
`random_int(min_value, max_value)`, which includes both bounds and raises
`ValueError` for an empty range.