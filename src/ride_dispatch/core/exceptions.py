"""Standardized exception hierarchy for the dispatch core."""

from typing import Any


class DispatchError(Exception):
    """Base exception for all dispatch errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TransientError(DispatchError):
    """Errors that may succeed on retry."""

    pass


class StorageError(TransientError):
    """The underlying data store failed."""

    pass


class PermanentError(DispatchError):
    """Errors that will not succeed on retry."""

    pass


class ValidationError(PermanentError):
    """Invalid input or data format."""

    pass


class NotFoundError(PermanentError):
    """Requested ride request, ride, driver or notification does not exist."""

    pass


class StateError(PermanentError):
    """Invalid state for the attempted operation."""

    pass


class InvalidTransitionError(StateError):
    """A lifecycle transition was attempted from a state that forbids it."""

    def __init__(self, action: str, current_state: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"Cannot {action} from state {current_state}",
            details={"action": action, "current_state": current_state, **(details or {})},
        )
        self.action = action
        self.current_state = current_state
