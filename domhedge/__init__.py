"""Futures market data, exchange response records, numeric helpers and trader tables."""

__version__ = "0.1.0"

__all__ = [
    "binance",
    "binance_types",
    "models",
    "numeric",
    "repository",
]