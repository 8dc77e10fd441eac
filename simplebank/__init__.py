"""Accounts, ledger entries and transfers over SQLite, with a JSON HTTP API."""

__version__ = "0.1.0"