"""Tests for the Alpaca REST client using a fake requests session."""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any
from uuid import UUID

import pytest
import requests

from apcacli.brokers.alpaca import AlpacaClient
from apcacli.domain.models import AccountStatus, OrderId, OrderRequest, OrderType, Side, TimeInForce
from apcacli.errors import IssueError, ResponseError

ACCOUNT_PAYLOAD = {
    "id": "e6fe16f3-64a4-4921-8928-cadf02f92f98",
    "status": "ACTIVE",
    "currency": "USD",
    "buying_power": "262113.632",
    "cash": "-23140.2",
    "cash_withdrawable": "0",
    "portfolio_value": "103820.56",
    "pattern_day_trader": False,
    "trading_blocked": False,
    "transfers_blocked": False,
    "account_blocked": False,
}

ORDER_PAYLOAD = {
    "id": "904837e3-3b76-47ec-b432-046db621571b",
    "symbol": "AAPL",
    "side": "buy",
    "type": "limit",
    "qty": "10",
    "limit_price": "150",
    "stop_price": None,
    "time_in_force": "day",
    "status": "accepted",
}


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text
        self.content = text.encode("utf-8")
        self.reason = "Error"

    def json(self) -> Any:
        return json.loads(self.text)


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.headers: dict[str, str] = {}
        self.response = response or FakeResponse()
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def request(self, **kwargs: Any) -> FakeResponse:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def _client(session: FakeSession) -> AlpacaClient:
    return AlpacaClient(
        api_key="key",
        secret_key="secret",
        base_url="https://paper-api.alpaca.markets/",
        timeout=7,
        session=session,  # type: ignore[arg-type]
    )


def test_client_sets_auth_headers() -> None:
    session = FakeSession()
    _client(session)

    assert session.headers["APCA-API-KEY-ID"] == "key"
    assert session.headers["APCA-API-SECRET-KEY"] == "secret"


def test_get_account_decodes_payload() -> None:
    session = FakeSession(FakeResponse(payload=ACCOUNT_PAYLOAD))

    account = _client(session).get_account()

    assert session.calls[0]["method"] == "GET"
    assert session.calls[0]["url"] == "https://paper-api.alpaca.markets/v2/account"
    assert session.calls[0]["timeout"] == 7
    assert account.status is AccountStatus.ACTIVE
    assert account.cash == Decimal("-23140.2")


def test_create_order_posts_request_body() -> None:
    session = FakeSession(FakeResponse(payload=ORDER_PAYLOAD))
    request = OrderRequest(
        symbol="AAPL",
        quantity=10,
        side=Side.BUY,
        type=OrderType.LIMIT,
        time_in_force=TimeInForce.DAY,
        limit_price=Decimal("150"),
    )

    order = _client(session).create_order(request)

    assert session.calls[0]["method"] == "POST"
    assert session.calls[0]["url"].endswith("/v2/orders")
    assert session.calls[0]["json"] == {
        "symbol": "AAPL",
        "qty": 10,
        "side": "buy",
        "type": "limit",
        "time_in_force": "day",
        "limit_price": "150",
    }
    assert order.id == OrderId(UUID("904837e3-3b76-47ec-b432-046db621571b"))


def test_delete_order_accepts_empty_response() -> None:
    session = FakeSession(FakeResponse(status_code=204))
    order_id = OrderId(UUID("904837e3-3b76-47ec-b432-046db621571b"))

    assert _client(session).delete_order(order_id) is None
    assert session.calls[0]["method"] == "DELETE"
    assert session.calls[0]["url"].endswith("/v2/orders/904837e3-3b76-47ec-b432-046db621571b")


def test_list_orders_requests_open_orders_with_limit() -> None:
    session = FakeSession(FakeResponse(payload=[ORDER_PAYLOAD, ORDER_PAYLOAD]))

    orders = _client(session).list_orders(500)

    assert session.calls[0]["params"] == {"status": "open", "limit": "500"}
    assert len(orders) == 2
    assert orders[0].limit_price == Decimal("150")


def test_list_orders_rejects_non_list_body() -> None:
    session = FakeSession(FakeResponse(payload={"message": "nope"}))

    with pytest.raises(ResponseError, match="expected a list of orders"):
        _client(session).list_orders(500)


def test_unbuildable_request_is_an_issue_error() -> None:
    session = FakeSession(error=requests.exceptions.InvalidURL("invalid URL"))

    with pytest.raises(IssueError) as excinfo:
        _client(session).get_account()

    assert str(excinfo.value) == "failed to issue GET request to account endpoint: invalid URL"


def test_timeout_is_a_response_error() -> None:
    session = FakeSession(error=requests.exceptions.Timeout("timeout"))

    with pytest.raises(ResponseError) as excinfo:
        _client(session).get_account()

    assert str(excinfo.value) == "timeout"
    assert excinfo.value.endpoint == "account"


def test_error_status_uses_api_message() -> None:
    session = FakeSession(
        FakeResponse(status_code=403, payload={"code": 40310000, "message": "insufficient buying power"})
    )

    with pytest.raises(ResponseError) as excinfo:
        _client(session).get_account()

    assert str(excinfo.value) == "HTTP status 403: insufficient buying power"
    assert excinfo.value.status_code == 403


def test_error_status_falls_back_to_body_text() -> None:
    session = FakeSession(FakeResponse(status_code=502, text="Bad Gateway"))

    with pytest.raises(ResponseError, match="^HTTP status 502: Bad Gateway$"):
        _client(session).list_orders(500)


def test_invalid_json_is_a_response_error() -> None:
    session = FakeSession(FakeResponse(text="<html>"))

    with pytest.raises(ResponseError, match="not valid JSON"):
        _client(session).get_account()


def test_undecodable_account_is_a_response_error() -> None:
    payload = dict(ACCOUNT_PAYLOAD)
    del payload["cash"]
    session = FakeSession(FakeResponse(payload=payload))

    with pytest.raises(ResponseError, match="failed to decode response"):
        _client(session).get_account()


def test_list_orders_accepts_notional_and_opening_orders() -> None:
    opening = dict(ORDER_PAYLOAD, time_in_force="opg")
    notional = dict(
        ORDER_PAYLOAD,
        id="e6fe16f3-64a4-4921-8928-cadf02f92f98",
        type="market",
        qty=None,
        notional="500",
        limit_price=None,
    )
    session = FakeSession(FakeResponse(payload=[opening, notional]))

    orders = _client(session).list_orders(500)

    assert orders[0].time_in_force == "opg"
    assert orders[1].quantity is None
    assert orders[1].notional == Decimal("500")
