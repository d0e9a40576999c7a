"""Trading API clients."""

from .alpaca import AlpacaClient
from .base import TradingClient

__all__ = ["AlpacaClient", "TradingClient"]
