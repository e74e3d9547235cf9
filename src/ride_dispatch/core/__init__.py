"""Core utilities for the dispatch core."""

from .clock import Clock, FixedClock, SystemClock
from .exceptions import (
    DispatchError,
    InvalidTransitionError,
    NotFoundError,
    PermanentError,
    StateError,
    StorageError,
    TransientError,
    ValidationError,
)

__all__ = [
    "DispatchError",
    "TransientError",
    "StorageError",
    "PermanentError",
    "ValidationError",
    "NotFoundError",
    "StateError",
    "InvalidTransitionError",
    "Clock",
    "SystemClock",
    "FixedClock",
]
