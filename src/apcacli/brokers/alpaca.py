"""Alpaca trading API client (paper or live via base URL)."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

import requests

from apcacli.domain.models import Account, Order, OrderId, OrderRequest
from apcacli.errors import IssueError, ResponseError
from apcacli.logging_utils import TRACE

T = TypeVar("T")

# Raised while preparing a request, before anything is sent.
ISSUE_ERRORS = (
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.InvalidHeader,
    requests.exceptions.URLRequired,
)


class AlpacaClient:
    """Thin wrapper around the Alpaca REST endpoints used by the commands.

    Requests are sent exactly once. Errors are split into two kinds: an
    :class:`IssueError` when the request could not even be built, and a
    :class:`ResponseError` for everything after that: connection failures,
    timeouts, error statuses and bodies that could not be decoded.
    """

    def __init__(
        self,
        api_key: str,
        secret_key: str,
        base_url: str = "https://paper-api.alpaca.markets",
        timeout: int = 30,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger = logging.getLogger("apcacli.brokers.alpaca")
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "APCA-API-KEY-ID": api_key,
                "APCA-API-SECRET-KEY": secret_key,
                "Content-Type": "application/json",
            }
        )

    def get_account(self) -> Account:
        payload = self._request("GET", "account", "/v2/account")
        return self._decode("account", Account.from_payload, payload)

    def create_order(self, request: OrderRequest) -> Order:
        payload = self._request("POST", "order", "/v2/orders", json=request.to_payload())
        return self._decode("order", Order.from_payload, payload)

    def delete_order(self, order_id: OrderId) -> None:
        self._request("DELETE", "order", f"/v2/orders/{order_id}")

    def list_orders(self, limit: int) -> list[Order]:
        payload = self._request(
            "GET",
            "orders",
            "/v2/orders",
            params={"status": "open", "limit": str(limit)},
        )
        if not isinstance(payload, list):
            raise ResponseError("orders", f"expected a list of orders, got {type(payload).__name__}")
        return [self._decode("orders", Order.from_payload, item) for item in payload]

    def _request(
        self,
        method: str,
        endpoint: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        self.logger.debug("%s %s", method, url)
        if json is not None:
            self.logger.log(TRACE, "request body: %s", json)
        try:
            response = self.session.request(
                method=method,
                url=url,
                json=json,
                params=params,
                timeout=self.timeout,
            )
        except ISSUE_ERRORS as exc:
            raise IssueError(method, endpoint, str(exc)) from exc
        except requests.RequestException as exc:
            raise ResponseError(endpoint, str(exc)) from exc

        self.logger.debug("%s %s -> %s", method, url, response.status_code)
        self.logger.log(TRACE, "response body: %s", response.text)

        if response.status_code >= 400:
            raise ResponseError(
                endpoint,
                self._error_detail(response),
                status_code=response.status_code,
            )
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ResponseError(
                endpoint,
                f"response was not valid JSON: {exc}",
                status_code=response.status_code,
            ) from exc

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        message = ""
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            message = str(payload.get("message", "")).strip()
        if not message:
            message = response.text.strip() or response.reason or "request rejected"
        return f"HTTP status {response.status_code}: {message}"

    @staticmethod
    def _decode(endpoint: str, decoder: Callable[[dict[str, Any]], T], payload: Any) -> T:
        if not isinstance(payload, dict):
            raise ResponseError(endpoint, f"unexpected response body: {payload!r}")
        try:
            return decoder(payload)
        except (KeyError, ValueError, TypeError) as exc:
            raise ResponseError(endpoint, f"failed to decode response: {exc!r}") from exc
