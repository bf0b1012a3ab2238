"""Core module exports."""

from gutterwatch.core.disposable import CompositeSubscription, Subscription
from gutterwatch.core.errors import (
    AggregationError,
    ConfigError,
    CoverageParseError,
    DiscoveryError,
    ErrorCode,
    GutterWatchError,
    InternalError,
    ReadError,
    RenderError,
)
from gutterwatch.core.logging import (
    clear_cycle_id,
    configure_logging,
    get_cycle_id,
    set_cycle_id,
)

__all__ = [
    # Errors
    "AggregationError",
    "ConfigError",
    "CoverageParseError",
    "DiscoveryError",
    "ErrorCode",
    "GutterWatchError",
    "InternalError",
    "ReadError",
    "RenderError",
    # Logging
    "clear_cycle_id",
    "configure_logging",
    "get_cycle_id",
    "set_cycle_id",
    # Subscriptions
    "CompositeSubscription",
    "Subscription",
]
