"""Dependency injection helpers."""

from __future__ import annotations

from .services import get_broker_adapter, get_research_service, get_trading_service

__all__ = [
    "get_broker_adapter",
    "get_research_service",
    "get_trading_service",
]
