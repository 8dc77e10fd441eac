"""HTTP API for managing accounts."""

from __future__ import annotations

from typing import Any

from flask import Flask, Response, jsonify, request

from .queries import NotFoundError
from .store import Store

CURRENCIES = ("USD", "EUR")


class _BadRequest(ValueError):
    """A request that failed to bind or validate."""


def _error(err: BaseException, status: int) -> tuple[Response, int]:
    return jsonify({"error": str(err)}), status


def _parse_int(text: str | None, name: str) -> int:
    if text is None or text == "":
        raise _BadRequest(f"{name} is required")
    try:
        return int(text)
    except ValueError:
        raise _BadRequest(f"{name} must be an integer") from None


def _check_range(value: int, name: str, minimum: int, maximum: int | None = None) -> int:
    if value == 0:
        raise _BadRequest(f"{name} is required")
    if value < minimum:
        raise _BadRequest(f"{name} must be at least {minimum}")
    if maximum is not None and value > maximum:
        raise _BadRequest(f"{name} must be at most {maximum}")
    return value


def _json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise _BadRequest("request body must be a JSON object")
    return data


def _uri_id(raw: str) -> int:
    return _check_range(_parse_int(raw, "id"), "id", 1)


class Server:
    """Serves the account endpoints over a store."""

    def __init__(self, store: Store) -> None:
        self.store = store
        app = Flask(__name__)
        app.add_url_rule(
            "/accounts", "create_account", self._create_account, methods=["POST"]
        )
        app.add_url_rule(
            "/accounts/<account_id>", "get_account", self._get_account, methods=["GET"]
        )
        app.add_url_rule("/accounts", "list_accounts", self._list_accounts, methods=["GET"])
        app.add_url_rule(
            "/accounts/<account_id>",
            "update_account",
            self._update_account,
            methods=["PATCH"],
        )
        app.add_url_rule(
            "/accounts/<account_id>",
            "delete_account",
            self._delete_account,
            methods=["DELETE"],
        )
        self.app = app

    def start(self, address: str = ":8080") -> None:
        """Serve on ``host:port``; an empty host listens on all interfaces."""
        if ":" not in address:
            raise ValueError(f"address must be host:port, got {address!r}")
        host, _, port = address.rpartition(":")
        self.app.run(host=host or "0.0.0.0", port=int(port) if port else 8080)

    def _create_account(self):
        try:
            body = _json_body()
            owner = body.get("owner")
            if not isinstance(owner, str) or owner == "":
                raise _BadRequest("owner is required")
            currency = body.get("currency")
            if not isinstance(currency, str) or currency == "":
                raise _BadRequest("currency is required")
            if currency not in CURRENCIES:
                raise _BadRequest(f"currency must be one of {' '.join(CURRENCIES)}")
        except _BadRequest as err:
            return _error(err, 400)

        try:
            account = self.store.create_account(owner, 0, currency)
        except Exception as err:
            return _error(err, 500)
        return jsonify(account.to_dict()), 200

    def _get_account(self, account_id: str):
        try:
            id_ = _uri_id(account_id)
        except _BadRequest as err:
            return _error(err, 400)

        try:
            account = self.store.get_account(id_)
        except NotFoundError as err:
            return _error(err, 404)
        except Exception as err:
            return _error(err, 500)
        return jsonify(account.to_dict()), 200

    def _update_account(self, account_id: str):
        try:
            id_ = _uri_id(account_id)
            body = _json_body()
            balance = body.get("balance")
            if balance is None:
                raise _BadRequest("balance is required")
            if isinstance(balance, bool) or not isinstance(balance, int):
                raise _BadRequest("balance must be an integer")
            _check_range(balance, "balance", 10)
        except _BadRequest as err:
            return _error(err, 400)

        try:
            account = self.store.update_account(id_, balance)
        except NotFoundError as err:
            return _error(err, 404)
        except Exception as err:
            return _error(err, 500)
        return jsonify(account.to_dict()), 200

    def _delete_account(self, account_id: str):
        try:
            id_ = _uri_id(account_id)
        except _BadRequest as err:
            return _error(err, 400)

        try:
            self.store.delete_account(id_)
        except Exception as err:
            return _error(err, 500)
        return "", 204

    def _list_accounts(self):
        try:
            page_id = _check_range(
                _parse_int(request.args.get("page_id"), "page_id"), "page_id", 1
            )
            page_size = _check_range(
                _parse_int(request.args.get("page_size"), "page_size"), "page_size", 5, 10
            )
        except _BadRequest as err:
            return _error(err, 400)

        try:
            accounts = self.store.list_accounts(page_size, (page_id - 1) * page_size)
        except Exception as err:
            return _error(err, 500)
        return jsonify([account.to_dict() for account in accounts]), 200