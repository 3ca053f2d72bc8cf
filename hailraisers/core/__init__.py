"""Core building blocks shared across the hailraisers package."""

from .cancellation import CancellationToken
from .debounce import Debouncer

__all__ = ["CancellationToken", "Debouncer"]
