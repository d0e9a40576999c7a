"""Command handlers gluing the trading client to order building and rendering."""

from __future__ import annotations

import logging
import queue
import sys
import threading
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, TextIO, TypeVar, assert_never

from apcacli.brokers.base import TradingClient
from apcacli.domain.models import Account, Order, OrderId, Side
from apcacli.errors import CommandError, IssueError, TransportError
from apcacli.formatting import format_account, format_order_rows
from apcacli.orders import build_order_request

T = TypeVar("T")

ORDER_LIST_LIMIT = 500

logger = logging.getLogger("apcacli.commands")


@dataclass(frozen=True)
class AccountCommand:
    """Show the account."""


@dataclass(frozen=True)
class SubmitOrderCommand:
    side: Side
    symbol: str
    quantity: int
    limit_price: Decimal | None = None
    stop_price: Decimal | None = None
    today: bool = False


@dataclass(frozen=True)
class CancelOrderCommand:
    id: OrderId


@dataclass(frozen=True)
class ListOrdersCommand:
    """List all open orders."""


Command = AccountCommand | SubmitOrderCommand | CancelOrderCommand | ListOrdersCommand


def call(action: str, operation: Callable[[], T]) -> T:
    """Run one API call, wrapping its failure with the attempted action.

    Issue errors already name the endpoint and method, so they pass through
    unchanged.
    """
    try:
        return operation()
    except IssueError:
        raise
    except TransportError as exc:
        raise CommandError(action, exc) from exc


def account(client: TradingClient, out: TextIO) -> None:
    """Print the account report."""
    snapshot = call("retrieve account information", client.get_account)
    print(format_account(snapshot), file=out)


def order_submit(client: TradingClient, command: SubmitOrderCommand, out: TextIO) -> None:
    """Submit an order and print the identifier the API assigned to it."""
    request = build_order_request(
        side=command.side,
        symbol=command.symbol,
        quantity=command.quantity,
        limit_price=command.limit_price,
        stop_price=command.stop_price,
        today=command.today,
    )
    logger.info(
        "submitting %s %s order for %s %s",
        request.type.value,
        request.side.value,
        request.quantity,
        request.symbol,
    )
    order = call("submit order", lambda: client.create_order(request))
    print(order.id, file=out)


def order_cancel(client: TradingClient, command: CancelOrderCommand) -> None:
    """Cancel an order; prints nothing on success."""
    logger.info("canceling order %s", command.id)
    call("cancel order", lambda: client.delete_order(command.id))


def join(*operations: Callable[[], Any]) -> list[Any]:
    """Run operations on daemon threads and return their results in order.

    The first failure is raised as soon as it happens. Calls still in
    flight are abandoned and do not keep the process alive.
    """
    completed: queue.Queue[tuple[int, Any, BaseException | None]] = queue.Queue()

    def run(index: int, operation: Callable[[], Any]) -> None:
        try:
            completed.put((index, operation(), None))
        except BaseException as exc:
            completed.put((index, None, exc))

    for index, operation in enumerate(operations):
        threading.Thread(
            target=run,
            args=(index, operation),
            name=f"apcacli-join-{index}",
            daemon=True,
        ).start()

    results: list[Any] = [None] * len(operations)
    for _ in operations:
        index, result, error = completed.get()
        if error is not None:
            raise error
        results[index] = result
    return results


def order_list(client: TradingClient, out: TextIO) -> None:
    """List all open orders, annotated with the account currency.

    The account and orders requests run concurrently and both have to
    succeed. Nothing is printed until every row has been rendered.
    """
    snapshot: Account
    orders: list[Order]
    snapshot, orders = join(
        lambda: call("retrieve account information", client.get_account),
        lambda: call("list orders", lambda: client.list_orders(ORDER_LIST_LIMIT)),
    )

    logger.debug("retrieved %d open orders", len(orders))
    rows = format_order_rows(orders, snapshot.currency)
    if rows:
        out.write("\n".join(rows) + "\n")


def dispatch(client: TradingClient, command: Command, out: TextIO | None = None) -> None:
    """Run exactly one command against the client."""
    stream = out if out is not None else sys.stdout
    match command:
        case AccountCommand():
            account(client, stream)
        case SubmitOrderCommand():
            order_submit(client, command, stream)
        case CancelOrderCommand():
            order_cancel(client, command)
        case ListOrdersCommand():
            order_list(client, stream)
        case _:
            assert_never(command)
