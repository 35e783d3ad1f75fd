"""Concrete broker adapters."""

from __future__ import annotations

from .alpaca_adapter import AlpacaBrokerAdapter

__all__ = ["AlpacaBrokerAdapter"]
