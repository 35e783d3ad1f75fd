"""Background workers."""

from __future__ import annotations

from .reconciler import CancellationReconciler

__all__ = ["CancellationReconciler"]
