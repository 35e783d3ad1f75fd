"""HTTP middleware."""

from __future__ import annotations

from .tracing import RequestTracingMiddleware

__all__ = ["RequestTracingMiddleware"]
