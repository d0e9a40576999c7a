"""Trading client contract consumed by the commands."""

from __future__ import annotations

from typing import Protocol

from apcacli.domain.models import Account, Order, OrderId, OrderRequest


class TradingClient(Protocol):
    """Request/response operations of the brokerage API."""

    def get_account(self) -> Account:
        """Return the current account snapshot."""

    def create_order(self, request: OrderRequest) -> Order:
        """Submit an order and return it as accepted by the API."""

    def delete_order(self, order_id: OrderId) -> None:
        """Cancel an open order."""

    def list_orders(self, limit: int) -> list[Order]:
        """Return up to ``limit`` currently open orders."""
