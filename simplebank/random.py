"""Random values for owners, balances and currencies."""

from __future__ import annotations

import random
import string
import time

ALPHABET = string.ascii_lowercase
CURRENCIES = ("USD", "EUR", "IDR")

_rng = random.Random(time.time_ns())


def random_string(n: int) -> str:
    """Return ``n`` random lower-case letters (empty for ``n <= 0``)."""
    return "".join(_rng.choice(ALPHABET) for _ in range(n))


def random_int(min_value: int, max_value: int) -> int:
    """Return a random integer in the closed range ``[min_value, max_value]``.

    Raises ValueError when ``max_value`` is smaller than ``min_value``.
    """
    if max_value < min_value:
        raise ValueError(f"empty range: {min_value}..{max_value}")
    return min_value + _rng.randrange(max_value - min_value + 1)


def random_owner() -> str:
    """Return a random six-letter owner name."""
    return random_string(6)


def random_balance() -> int:
    """Return a random balance between 1 and 1000."""
    return random_int(1, 1000)


def random_currency() -> str:
    """Return one of the known currency codes at random."""
    return _rng.choice(CURRENCIES)