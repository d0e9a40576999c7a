"""Human-readable rendering of accounts and orders."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from decimal import ROUND_HALF_UP, Decimal
from typing import TypeVar, assert_never

from apcacli.domain.models import Account, AccountStatus, Order, OrderType, Side

T = TypeVar("T")

ACCOUNT_TEMPLATE = """account:
  id:                {id}
  status:            {status}
  buying power:      {buying_power} {currency}
  cash:              {cash} {currency}
  withdrawable cash: {withdrawable_cash} {currency}
  portfolio value:   {portfolio_value} {currency}
  day trader:        {day_trader}
  trading blocked:   {trading_blocked}
  transfers blocked: {transfers_blocked}
  account blocked:   {account_blocked}"""


def format_account_status(status: AccountStatus) -> str:
    match status:
        case AccountStatus.ONBOARDING:
            return "onboarding"
        case AccountStatus.SUBMISSION_FAILED:
            return "submission failed"
        case AccountStatus.SUBMITTED:
            return "submitted"
        case AccountStatus.UPDATING:
            return "updating"
        case AccountStatus.APPROVAL_PENDING:
            return "approval pending"
        case AccountStatus.ACTIVE:
            return "active"
        case AccountStatus.REJECTED:
            return "rejected"
        case _:
            assert_never(status)


def format_decimal(value: Decimal) -> str:
    """Render a decimal without exponent and without trailing zeros."""
    text = format(value.normalize(), "f")
    return "0" if text == "-0" else text


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def format_account(account: Account) -> str:
    """Render an account snapshot as a fixed-label report."""
    return ACCOUNT_TEMPLATE.format(
        id=account.id,
        status=format_account_status(account.status),
        currency=account.currency,
        buying_power=format_decimal(account.buying_power),
        cash=format_decimal(account.cash),
        withdrawable_cash=format_decimal(account.withdrawable_cash),
        portfolio_value=format_decimal(account.portfolio_value),
        day_trader=format_bool(account.day_trader),
        trading_blocked=format_bool(account.trading_blocked),
        transfers_blocked=format_bool(account.transfers_blocked),
        account_blocked=format_bool(account.account_blocked),
    )


def format_quantity(quantity: Decimal | None) -> str:
    """Render a quantity with zero fractional digits; notional orders have none."""
    if quantity is None:
        return ""
    return str(quantity.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_side(side: Side) -> str:
    match side:
        case Side.BUY:
            return "buy"
        case Side.SELL:
            return "sell"
        case _:
            assert_never(side)


def format_price(order: Order, currency: str) -> str:
    """Describe the limit and stop prices of an order.

    The populated prices have to agree with the order type reported by the
    API; anything else is a broken API contract.
    """
    limit, stop = order.limit_price, order.stop_price
    if limit is not None and stop is not None:
        assert order.type is OrderType.STOP_LIMIT, order.type
        return (
            f"stop @ {format_decimal(stop)} {currency}, "
            f"limit @ {format_decimal(limit)} {currency}"
        )
    if limit is not None:
        assert order.type is OrderType.LIMIT, order.type
        return f"limit @ {format_decimal(limit)} {currency}"
    if stop is not None:
        assert order.type is OrderType.STOP, order.type
        return f"stop @ {format_decimal(stop)} {currency}"
    assert order.type is OrderType.MARKET, order.type
    return ""


def max_width(items: Iterable[T], measure: Callable[[T], int]) -> int:
    """Return the largest width produced by ``measure`` (0 when empty)."""
    return max((measure(item) for item in items), default=0)


def sort_orders(orders: Iterable[Order]) -> list[Order]:
    """Sort orders by symbol, keeping the API order among equal symbols."""
    return sorted(orders, key=lambda order: order.symbol.encode("utf-8"))


def format_order_rows(orders: Iterable[Order], currency: str) -> list[str]:
    """Render orders as column-aligned rows.

    Column widths are measured over the full sorted list before the first
    row is rendered.
    """
    ordered = sort_orders(orders)
    qty_width = max_width(ordered, lambda order: len(format_quantity(order.quantity)))
    sym_width = max_width(ordered, lambda order: len(order.symbol))

    rows: list[str] = []
    for order in ordered:
        side = format_side(order.side)
        qty = format_quantity(order.quantity)
        price = format_price(order, currency)
        rows.append(f"{order.id} {side:>4} {qty:>{qty_width}} {order.symbol:<{sym_width}} {price}")
    return rows
