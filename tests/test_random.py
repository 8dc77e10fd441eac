import pytest

from simplebank.random import (
    ALPHABET,
    CURRENCIES,
    random_balance,
    random_currency,
    random_int,
    random_owner,
    random_string,
)


@pytest.mark.parametrize("n", [0, 1, 6, 50])
def test_random_string_length_and_alphabet(n):
    value = random_string(n)
    assert len(value) == n
    assert set(value) <= set(ALPHABET)


def test_random_string_negative_is_empty():
    assert random_string(-3) == ""


def test_random_int_within_bounds():
    values = [random_int(-5, 5) for _ in range(500)]
    assert all(-5 <= v <= 5 for v in values)
    assert min(values) == -5
    assert max(values) == 5


def test_random_int_single_value_range():
    assert random_int(7, 7) == 7


def test_random_int_empty_range_raises():
    with pytest.raises(ValueError):
        random_int(10, 1)


def test_random_owner_is_six_letters():
    owner = random_owner()
    assert len(owner) == 6
    assert owner.isalpha() and owner.islower()


def test_random_balance_range():
    assert all(1 <= random_balance() <= 1000 for _ in range(300))


def test_random_currency_is_known():
    seen = {random_currency() for _ in range(300)}
    assert seen <= set(CURRENCIES)
    assert seen == {"USD", "EUR", "IDR"}