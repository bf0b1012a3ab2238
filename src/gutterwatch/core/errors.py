"""gutterwatch error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Discovery / read
- 4xxx: Parse
- 5xxx: Aggregation / render
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Discovery / read (3xxx)
    DISCOVERY_FAILED = 3001
    READ_FAILED = 3101

    # Parse (4xxx)
    PARSE_FAILED = 4001
    UNKNOWN_FORMAT = 4002

    # Aggregation / render (5xxx)
    AGGREGATION_FAILED = 5001
    RENDER_FAILED = 5101

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class GutterWatchError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'PARSE_FAILED')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(GutterWatchError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class DiscoveryError(GutterWatchError):
    """Coverage file discovery failed."""

    @classmethod
    def walk_failed(cls, root: str, reason: str) -> "DiscoveryError":
        return cls(
            code=ErrorCode.DISCOVERY_FAILED,
            message=f"Could not search {root} for coverage files: {reason}",
            details={"root": root, "reason": reason},
        )


class ReadError(GutterWatchError):
    """A discovered coverage file could not be read."""

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "ReadError":
        return cls(
            code=ErrorCode.READ_FAILED,
            message=f"Could not read coverage file {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class CoverageParseError(GutterWatchError):
    """A single coverage report could not be parsed.

    Never fatal for a refresh cycle: the offending file is skipped.
    """

    @classmethod
    def invalid(cls, source: str, reason: str) -> "CoverageParseError":
        return cls(
            code=ErrorCode.PARSE_FAILED,
            message=f"Invalid coverage data in {source}: {reason}",
            details={"source": source, "reason": reason},
        )

    @classmethod
    def unknown_format(cls, source: str) -> "CoverageParseError":
        return cls(
            code=ErrorCode.UNKNOWN_FORMAT,
            message=f"Could not detect coverage format for {source}. "
            "Supported formats: lcov, cobertura, jacoco, clover",
            details={"source": source},
        )


class AggregationError(GutterWatchError):
    """Percentage aggregation failed. Degrades to 'no coverage'."""

    @classmethod
    def malformed_section(cls, path: str, reason: str) -> "AggregationError":
        return cls(
            code=ErrorCode.AGGREGATION_FAILED,
            message=f"Cannot aggregate section {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class RenderError(GutterWatchError):
    """Decorations could not be applied to an editor."""

    @classmethod
    def editor_failed(cls, path: str, reason: str) -> "RenderError":
        return cls(
            code=ErrorCode.RENDER_FAILED,
            message=f"Failed to render coverage for {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class InternalError(GutterWatchError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
