from concurrent.futures import ThreadPoolExecutor

import pytest

from simplebank.queries import NotFoundError
from simplebank.random import random_balance, random_currency, random_owner
from simplebank.store import Store


@pytest.fixture
def store():
    s = Store()
    yield s
    s.close()


def _create_random_account(store):
    owner, balance, currency = random_owner(), random_balance(), random_currency()
    account = store.create_account(owner, balance, currency)
    assert account.owner == owner
    assert account.balance == balance
    assert account.currency == currency
    assert account.id != 0
    return account


def test_transfer_tx(store):
    account1 = _create_random_account(store)
    account2 = _create_random_account(store)

    n = 5
    amount = 10

    with ThreadPoolExecutor(max_workers=n) as pool:
        futures = [
            pool.submit(store.transfer_tx, account1.id, account2.id, amount)
            for _ in range(n)
        ]
        results = [future.result() for future in futures]

    existed = set()
    for result in results:
        transfer = result.transfer
        assert transfer.from_account_id == account1.id
        assert transfer.to_account_id == account2.id
        assert transfer.amount == amount
        assert transfer.id != 0
        assert store.get_transfer(transfer.id) == transfer

        from_entry = result.from_entry
        assert from_entry.account_id == account1.id
        assert from_entry.amount == -amount
        assert from_entry.id != 0
        assert store.get_entry(from_entry.id) == from_entry

        to_entry = result.to_entry
        assert to_entry.account_id == account2.id
        assert to_entry.amount == amount
        assert to_entry.id != 0
        assert store.get_entry(to_entry.id) == to_entry

        from_account = result.from_account
        assert from_account.id == account1.id
        to_account = result.to_account
        assert to_account.id == account2.id

        diff1 = account1.balance - from_account.balance
        diff2 = to_account.balance - account2.balance
        assert diff1 == diff2
        assert diff1 > 0
        assert diff1 % amount == 0

        k = diff1 // amount
        assert 1 <= k <= n
        assert k not in existed
        existed.add(k)

    updated1 = store.get_account(account1.id)
    updated2 = store.get_account(account2.id)
    assert updated1.balance == account1.balance - n * amount
    assert updated2.balance == account2.balance + n * amount


def test_transfer_tx_deadlock(store):
    account1 = _create_random_account(store)
    account2 = _create_random_account(store)

    n = 10
    amount = 13

    with ThreadPoolExecutor(max_workers=n) as pool:
        futures = []
        for i in range(n):
            from_id, to_id = account1.id, account2.id
            if i % 2 == 1:
                from_id, to_id = account2.id, account1.id
            futures.append(pool.submit(store.transfer_tx, from_id, to_id, amount))
        results = [future.result() for future in futures]

    assert len(results) == n
    assert store.get_account(account1.id).balance == account1.balance
    assert store.get_account(account2.id).balance == account2.balance


def test_transfer_tx_to_missing_account_rolls_back(store):
    account = _create_random_account(store)
    missing_id = account.id + 1000

    with pytest.raises(NotFoundError):
        store.transfer_tx(account.id, missing_id, 10)

    assert store.get_account(account.id).balance == account.balance
    assert store.list_transfers(account.id, account.id, 10, 0) == []
    assert store.list_entries(account.id, 10, 0) == []


def test_transaction_rolls_back_on_error(store):
    with pytest.raises(RuntimeError):
        with store.transaction() as q:
            created = q.create_account("rolled", 50, "USD")
            raise RuntimeError("boom")

    with pytest.raises(NotFoundError):
        store.get_account(created.id)
    assert store.list_accounts(10, 0) == []


def test_transaction_commits_on_success(store):
    with store.transaction() as q:
        created = q.create_account("kept", 75, "EUR")

    assert store.get_account(created.id) == created


def test_transfer_result_to_dict(store):
    account1 = _create_random_account(store)
    account2 = _create_random_account(store)
    result = store.transfer_tx(account1.id, account2.id, 7)

    data = result.to_dict()
    assert set(data) == {"transfer", "from_account", "to_account", "from_entry", "to_entry"}
    assert data["transfer"] == result.transfer.to_dict()
    assert data["from_entry"]["amount"] == -7
    assert data["to_entry"]["amount"] == 7


def test_store_persists_to_file(tmp_path):
    path = tmp_path / "bank.db"
    with Store(path) as first:
        account = first.create_account("owner", 120, "USD")

    with Store(path) as second:
        assert second.get_account(account.id) == account