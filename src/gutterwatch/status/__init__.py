"""Status indicator."""

from gutterwatch.status.toggler import (
    DisplayState,
    StatusBarItem,
    StatusBarToggler,
)

__all__ = ["DisplayState", "StatusBarItem", "StatusBarToggler"]
