"""Command line client for trading stocks on Alpaca."""

__version__ = "0.2.0"

__all__ = ["__version__"]
