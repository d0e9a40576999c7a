"""Turn user order input into a fully specified order request."""

from __future__ import annotations

from decimal import Decimal

from apcacli.domain.models import OrderRequest, OrderType, Side, TimeInForce


def infer_order_type(limit_price: Decimal | None, stop_price: Decimal | None) -> OrderType:
    """Derive the order type from which prices were given."""
    has_limit = limit_price is not None
    has_stop = stop_price is not None
    if has_limit and has_stop:
        return OrderType.STOP_LIMIT
    if has_limit:
        return OrderType.LIMIT
    if has_stop:
        return OrderType.STOP
    return OrderType.MARKET


def infer_time_in_force(today: bool) -> TimeInForce:
    return TimeInForce.DAY if today else TimeInForce.UNTIL_CANCELED


def build_order_request(
    side: Side,
    symbol: str,
    quantity: int,
    limit_price: Decimal | None = None,
    stop_price: Decimal | None = None,
    today: bool = False,
) -> OrderRequest:
    """Build an order request.

    The symbol is passed through as given and the quantity is not checked
    beyond its type; the API rejects what it does not accept.
    """
    return OrderRequest(
        symbol=symbol,
        quantity=quantity,
        side=side,
        type=infer_order_type(limit_price, stop_price),
        time_in_force=infer_time_in_force(today),
        limit_price=limit_price,
        stop_price=stop_price,
    )
