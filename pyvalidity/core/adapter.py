"""
The error-state adapter contract the orchestrator reports through.
"""

from abc import ABC, abstractmethod
from typing import Callable

from .field import Field

# The callback shapes the orchestrator is driven by. Any adapter's bound
# `set_error`/`clear_error` methods satisfy them, as do plain functions.
ErrorCallback = Callable[[Field, str], None]
ClearCallback = Callable[[Field], None]


class ErrorStateAdapter(ABC):
    """Abstract base class for everything that presents field error state.

    The engine never owns error state. It only tells an adapter when a
    field failed (with the message to show) and when a field's error state
    must be reset.
    """

    @abstractmethod
    def set_error(self, field: Field, message: str) -> None:
        """Marks `field` invalid and shows `message`.

        Calling it again for the same field must leave only the latest
        message visible, never two.
        """
        raise NotImplementedError("Subclasses must implement set_error()")

    @abstractmethod
    def clear_error(self, field: Field) -> None:
        """Reverses exactly what `set_error` did to `field`.

        Must be a no-op for a field without an error.
        """
        raise NotImplementedError("Subclasses must implement clear_error()")
