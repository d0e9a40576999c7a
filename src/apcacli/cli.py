"""Command-line interface for the Alpaca trading client."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from decimal import Decimal, InvalidOperation

from apcacli import __version__
from apcacli.brokers.alpaca import AlpacaClient
from apcacli.commands import (
    AccountCommand,
    CancelOrderCommand,
    Command,
    ListOrdersCommand,
    SubmitOrderCommand,
    dispatch,
)
from apcacli.config import Settings
from apcacli.domain.models import OrderId, Side
from apcacli.errors import ApcaCliError, ConfigError
from apcacli.logging_utils import setup_logger

logger = logging.getLogger("apcacli.cli")


def parse_side(token: str) -> Side:
    try:
        return Side.parse(token)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def parse_quantity(text: str) -> int:
    try:
        quantity = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{text} is not a valid quantity") from exc
    if quantity < 0:
        raise argparse.ArgumentTypeError(f"quantity must not be negative, got {quantity}")
    return quantity


def parse_price(text: str) -> Decimal:
    try:
        price = Decimal(text)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"{text} is not a valid price") from exc
    if not price.is_finite():
        raise argparse.ArgumentTypeError(f"{text} is not a valid price")
    return price


def parse_order_id(text: str) -> OrderId:
    try:
        return OrderId.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{text} is not a valid order id: {exc}") from exc


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        prog="apcacli",
        description="A command line client for automated trading with Alpaca.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be supplied multiple times)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    commands.add_parser("account", help="Retrieve information about the Alpaca account")

    order = commands.add_parser("order", help="Perform various order related functions")
    order_commands = order.add_subparsers(dest="order_command", required=True, metavar="ACTION")

    submit = order_commands.add_parser("submit", help="Submit an order")
    submit.add_argument("side", type=parse_side, help="The side of the order (buy or sell)")
    submit.add_argument("symbol", help="The symbol of the asset involved in the order")
    submit.add_argument("quantity", type=parse_quantity, help="The quantity to trade")
    submit.add_argument(
        "-l",
        "--limit",
        dest="limit_price",
        type=parse_price,
        metavar="PRICE",
        help="Create a limit order (or stop limit order) with the given limit price",
    )
    submit.add_argument(
        "-s",
        "--stop",
        dest="stop_price",
        type=parse_price,
        metavar="PRICE",
        help="Create a stop order (or stop limit order) with the given stop price",
    )
    submit.add_argument(
        "--today",
        action="store_true",
        help="Create an order that is only valid for today",
    )

    cancel = order_commands.add_parser("cancel", help="Cancel an order")
    cancel.add_argument("id", type=parse_order_id, help="The id of the order to cancel")

    order_commands.add_parser("list", help="List open orders")
    return parser


def command_from_args(args: argparse.Namespace) -> Command:
    """Translate parsed arguments into a typed command."""
    if args.command == "account":
        return AccountCommand()
    if args.order_command == "submit":
        return SubmitOrderCommand(
            side=args.side,
            symbol=args.symbol,
            quantity=args.quantity,
            limit_price=args.limit_price,
            stop_price=args.stop_price,
            today=args.today,
        )
    if args.order_command == "cancel":
        return CancelOrderCommand(id=args.id)
    return ListOrdersCommand()


def build_client(settings: Settings) -> AlpacaClient:
    return AlpacaClient(
        api_key=settings.api_key,
        secret_key=settings.secret_key,
        base_url=settings.base_url,
        timeout=settings.timeout,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    command = command_from_args(args)

    try:
        settings = Settings.from_env().with_overrides(verbosity=args.verbose)
    except ConfigError as exc:
        print(f"failed to retrieve Alpaca environment information: {exc}", file=sys.stderr)
        return 1

    setup_logger(settings.verbosity)
    logger.debug("using %s", settings.base_url)
    try:
        dispatch(build_client(settings), command)
    except ApcaCliError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
