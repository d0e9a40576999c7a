"""Core trading domain models and their Alpaca wire representation."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import StrEnum
from typing import Any, Self
from uuid import UUID


class Side(StrEnum):
    """Supported order directions."""

    BUY = "buy"
    SELL = "sell"

    @classmethod
    def parse(cls, token: str) -> Self:
        """Parse a lowercase side token as typed on the command line."""
        for side in cls:
            if side.value == token:
                return side
        raise ValueError(f"{token} is not a valid side specification (use 'buy' or 'sell')")


class OrderType(StrEnum):
    """Execution type of an order, determined by its limit and stop prices."""

    MARKET = "market"
    LIMIT = "limit"
    STOP = "stop"
    STOP_LIMIT = "stop_limit"


class TimeInForce(StrEnum):
    """How long an order stays valid."""

    DAY = "day"
    UNTIL_CANCELED = "gtc"


class AccountStatus(StrEnum):
    """Account states reported by the API."""

    ONBOARDING = "ONBOARDING"
    SUBMISSION_FAILED = "SUBMISSION_FAILED"
    SUBMITTED = "SUBMITTED"
    UPDATING = "ACCOUNT_UPDATED"
    APPROVAL_PENDING = "APPROVAL_PENDING"
    ACTIVE = "ACTIVE"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class OrderId:
    """Identifier of an order as assigned by the API."""

    value: UUID

    @classmethod
    def parse(cls, text: str) -> Self:
        return cls(UUID(text))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class OrderRequest:
    """Fully specified order ready for submission."""

    symbol: str
    quantity: int
    side: Side
    type: OrderType
    time_in_force: TimeInForce
    limit_price: Decimal | None = None
    stop_price: Decimal | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body expected by the order endpoint."""
        body: dict[str, Any] = {
            "symbol": self.symbol,
            "qty": self.quantity,
            "side": self.side.value,
            "type": self.type.value,
            "time_in_force": self.time_in_force.value,
        }
        if self.limit_price is not None:
            body["limit_price"] = str(self.limit_price)
        if self.stop_price is not None:
            body["stop_price"] = str(self.stop_price)
        return body


@dataclass(frozen=True)
class Order:
    """Order as reported by the API.

    ``quantity`` is None for notional orders, which are sized by amount.
    Time in force and status are kept as the raw API strings.
    """

    id: OrderId
    symbol: str
    side: Side
    type: OrderType
    quantity: Decimal | None
    limit_price: Decimal | None = None
    stop_price: Decimal | None = None
    notional: Decimal | None = None
    time_in_force: str = ""
    status: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Self:
        return cls(
            id=OrderId.parse(str(payload["id"])),
            symbol=str(payload["symbol"]),
            side=Side(str(payload["side"])),
            type=OrderType(str(payload.get("type", payload.get("order_type")))),
            quantity=parse_optional_decimal(payload.get("qty")),
            limit_price=parse_optional_decimal(payload.get("limit_price")),
            stop_price=parse_optional_decimal(payload.get("stop_price")),
            notional=parse_optional_decimal(payload.get("notional")),
            time_in_force=str(payload.get("time_in_force") or ""),
            status=str(payload.get("status") or ""),
        )


@dataclass(frozen=True)
class Account:
    """Snapshot of the trading account."""

    id: UUID
    status: AccountStatus
    currency: str
    buying_power: Decimal
    cash: Decimal
    withdrawable_cash: Decimal
    portfolio_value: Decimal
    day_trader: bool
    trading_blocked: bool
    transfers_blocked: bool
    account_blocked: bool

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Self:
        return cls(
            id=UUID(str(payload["id"])),
            status=AccountStatus(str(payload["status"])),
            currency=str(payload["currency"]),
            buying_power=parse_decimal(payload["buying_power"]),
            cash=parse_decimal(payload["cash"]),
            withdrawable_cash=parse_decimal(
                payload.get("cash_withdrawable", payload.get("withdrawable_cash"))
            ),
            portfolio_value=parse_decimal(payload["portfolio_value"]),
            day_trader=bool(payload["pattern_day_trader"]),
            trading_blocked=bool(payload["trading_blocked"]),
            transfers_blocked=bool(payload["transfers_blocked"]),
            account_blocked=bool(payload["account_blocked"]),
        )


def parse_decimal(value: Any) -> Decimal:
    """Parse an API number (usually sent as a string) without losing precision."""
    if isinstance(value, float):
        value = repr(value)
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"invalid decimal value: {value!r}") from exc


def parse_optional_decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return parse_decimal(text)
