"""Domain models for the Alpaca trading API."""

from .models import (
    Account,
    AccountStatus,
    Order,
    OrderId,
    OrderRequest,
    OrderType,
    Side,
    TimeInForce,
)

__all__ = [
    "Account",
    "AccountStatus",
    "Order",
    "OrderId",
    "OrderRequest",
    "OrderType",
    "Side",
    "TimeInForce",
]
